# app/utils/session.py
"""
Caller identity and role gate.

The identity comes from request headers set by the front end after login
(X-User-Id, X-Username, X-User-Role) and is handed to the workflow as an
explicit SessionUser. This is a convenience gate, not a security boundary:
the headers are not signed.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.config import settings


@dataclass(frozen=True)
class SessionUser:
    id: Optional[int]
    username: str
    role: str   # admin | authority | user

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


ANONYMOUS = SessionUser(id=None, username=settings.DEFAULT_CREATED_BY, role="user")


def get_session_user(
    x_user_id: Optional[int] = Header(default=None),
    x_username: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> SessionUser:
    """FastAPI dependency: returns the caller, or ANONYMOUS when no headers are sent."""
    if not x_username:
        return ANONYMOUS
    return SessionUser(id=x_user_id, username=x_username, role=(x_user_role or "user").lower())


def require_roles(*roles: str):
    """Dependency factory: 401 without identity, 403 when the role is not allowed."""

    def _check(user: SessionUser = Depends(get_session_user)) -> SessionUser:
        if user is ANONYMOUS:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
        if roles and user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                                detail="You don't have permission to access this resource")
        return user

    return _check
