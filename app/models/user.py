# app/models/user.py
"""Login accounts for gate staff, authorities and admins."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from app.database import Base

USER_ROLES = ("admin", "authority", "user")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.username} role={self.role}>"
