# app/schemas/visitor.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class VisitorCreate(BaseModel):
    """Raw form input. Required fields are checked by visitor_service before any write."""
    name: str = ""
    phone: str = ""
    email: str = ""
    purpose: str = ""
    authority_id: Optional[int] = None
    notes: Optional[str] = None


class VisitorOut(BaseModel):
    id: int
    name: str
    phone: str
    email: str
    purpose: str
    authority_id: Optional[int]
    status: str
    photo_url: Optional[str]
    notes: Optional[str]
    created_by: Optional[str]
    authority_permission_required: bool
    authority_permission_granted: bool
    permission_granted_at: Optional[datetime]
    entry_time: datetime
    exit_time: Optional[datetime]

    class Config:
        from_attributes = True


class VisitorListOut(VisitorOut):
    authority_name: Optional[str] = None


class VisitorSubmitOut(BaseModel):
    message: str
    exported: bool
    notifications_created: int
    visitor: VisitorOut
