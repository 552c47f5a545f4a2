# app/services/user_service.py
"""
Gate staff / authority / admin login accounts.
Passwords are stored as salted PBKDF2-SHA256 hashes: "<salt hex>$<hash hex>".
"""

import hashlib
import hmac
import os
from datetime import datetime
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.exceptions import NotFoundError, ValidationError
from app.utils.session import SessionUser
from app.utils.logger import get_logger

logger = get_logger(__name__)

PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt_hex, _, digest_hex = stored.partition("$")
    if not digest_hex:
        return False
    expected = hash_password(password, bytes.fromhex(salt_hex))
    return hmac.compare_digest(expected, stored)


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def create_user(db: Session, body: UserCreate) -> User:
    username = body.username.strip()
    if not username or not body.password:
        raise ValidationError("Please fill in all fields")
    user = User(username=username, password_hash=hash_password(body.password),
                role=body.role, is_active=True, created_at=datetime.utcnow())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(f"Username {username} is already taken") from e
    db.refresh(user)
    logger.info(f"[USER] Created {user.username} role={user.role}")
    return user


def _get(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def delete_user(db: Session, user_id: int):
    db.delete(_get(db, user_id))
    db.commit()
    logger.info(f"[USER] Deleted {user_id}")


def toggle_user(db: Session, user_id: int) -> User:
    user = _get(db, user_id)
    user.is_active = not user.is_active
    db.commit()
    return user


def authenticate(db: Session, username: str, password: str) -> Optional[SessionUser]:
    """Returns the session identity for valid, active credentials, else None."""
    user = db.query(User).filter(User.username == username.strip()).first()
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        logger.warning(f"[USER] Failed login for {username!r}")
        return None
    return SessionUser(id=user.id, username=user.username, role=user.role)
