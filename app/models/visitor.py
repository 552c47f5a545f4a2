# app/models/visitor.py
"""
Visitors table: one row per visitor registration at the gate.

Status lifecycle:
  pending  --approve-->  approved  --checkout-->  exited
  pending  --reject--->  rejected
  (no authority selected) --> approved directly

exit_time is set if and only if status == "exited".
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey
from app.database import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_EXITED = "exited"
VISITOR_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_EXITED)


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=False, index=True)
    email = Column(String(200), nullable=False)
    purpose = Column(Text, nullable=False)
    authority_id = Column(Integer, ForeignKey("authorities.id", ondelete="SET NULL"))  # nullable
    status = Column(String(20), nullable=False, index=True)
    photo_url = Column(Text)
    notes = Column(Text)
    created_by = Column(String(100))
    authority_permission_required = Column(Boolean, default=False, nullable=False)
    authority_permission_granted = Column(Boolean, default=False, nullable=False)
    permission_granted_at = Column(DateTime)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Visitor {self.id} name={self.name} status={self.status}>"
