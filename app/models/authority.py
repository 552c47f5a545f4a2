# app/models/authority.py
"""
Authorities table: staff and admin accounts that approve or reject visitors.
Target of the notification fan-out in visitor_service.
"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from app.database import Base

DESIGNATIONS = ("Principal", "Vice Principal", "HOD", "Dean", "Staff", "Security", "Admin")
ROLES = ("admin", "authority")


class Authority(Base):
    __tablename__ = "authorities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    designation = Column(String(50), nullable=False)   # Principal | HOD | Staff | ...
    department = Column(String(200))
    phone = Column(String(30))
    email = Column(String(200))
    role = Column(String(20), default="authority", nullable=False, index=True)  # admin | authority
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime)

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.designation})"

    def __repr__(self):
        return f"<Authority {self.id} name={self.name} role={self.role} active={self.is_active}>"
