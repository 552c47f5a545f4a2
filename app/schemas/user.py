# app/schemas/user.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Literal


class UserCreate(BaseModel):
    username: str
    password: str
    role: Literal["admin", "authority", "user"] = "user"


class UserOut(BaseModel):
    id: int
    username: str
    role: str
    is_active: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    username: str
    password: str
