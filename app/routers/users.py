# app/routers/users.py
"""User accounts (admin only) and login."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import LoginRequest, UserCreate, UserOut
from app.services import user_service
from app.utils.session import SessionUser, require_roles

router = APIRouter()


@router.post("/auth/login", summary="Check credentials and return the session identity")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """The client stores the returned identity and sends it back as X-User-* headers."""
    user = user_service.authenticate(db, body.username, body.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return {"id": user.id, "username": user.username, "role": user.role}


@router.get("/users", response_model=list[UserOut], summary="List users")
def list_users(db: Session = Depends(get_db), user: SessionUser = Depends(require_roles("admin"))):
    return user_service.list_users(db)


@router.post("/users", response_model=UserOut, status_code=201, summary="Create a user")
def create_user(body: UserCreate, db: Session = Depends(get_db),
                user: SessionUser = Depends(require_roles("admin"))):
    return user_service.create_user(db, body)


@router.delete("/users/{user_id}", summary="Delete a user")
def delete_user(user_id: int, db: Session = Depends(get_db),
                user: SessionUser = Depends(require_roles("admin"))):
    user_service.delete_user(db, user_id)
    return {"status": "deleted", "id": user_id}


@router.post("/users/{user_id}/toggle", response_model=UserOut, summary="Enable / disable a user")
def toggle_user(user_id: int, db: Session = Depends(get_db),
                user: SessionUser = Depends(require_roles("admin"))):
    return user_service.toggle_user(db, user_id)
