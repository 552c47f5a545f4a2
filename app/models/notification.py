# app/models/notification.py
"""
Notifications table: permission requests addressed to authorities.
Created by the visitor admission workflow, marked read on view or decision.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey
from app.database import Base

TYPE_VISITOR_REQUEST = "visitor_request"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    visitor_id = Column(Integer, ForeignKey("visitors.id", ondelete="CASCADE"), nullable=False, index=True)
    authority_id = Column(Integer, ForeignKey("authorities.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Notification {self.id} visitor={self.visitor_id} authority={self.authority_id} read={self.is_read}>"
