# app/schemas/authority.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Literal

Designation = Literal["Principal", "Vice Principal", "HOD", "Dean", "Staff", "Security", "Admin"]


class AuthorityCreate(BaseModel):
    name: str
    designation: Designation
    department: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    role: Literal["admin", "authority"] = "authority"


class AuthorityUpdate(BaseModel):
    name: Optional[str] = None
    designation: Optional[Designation] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Literal["admin", "authority"]] = None
    is_active: Optional[bool] = None


class AuthorityOut(BaseModel):
    id: int
    name: str
    designation: str
    department: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    role: str
    is_active: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
