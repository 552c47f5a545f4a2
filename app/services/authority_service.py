# app/services/authority_service.py
"""
Authority lookup and administration helpers.
Used by visitor_service (fan-out targets) and the authorities router.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.authority import Authority
from app.schemas.authority import AuthorityCreate, AuthorityUpdate
from app.services.exceptions import NotFoundError, StoreWriteError, ValidationError
from app.utils.logger import get_logger

logger = get_logger(__name__)

# NOT NULL columns an update may change but never clear
REQUIRED_UPDATE_FIELDS = ("name", "designation", "role", "is_active")


def get_authority(db: Session, authority_id: int) -> Optional[Authority]:
    return db.query(Authority).filter(Authority.id == authority_id).first()


def get_active_authority(db: Session, authority_id: int) -> Authority:
    """Resolve the authority picked on the visitor form. Raises ValidationError if unusable."""
    authority = get_authority(db, authority_id)
    if authority is None:
        raise ValidationError(f"Authority {authority_id} does not exist")
    if not authority.is_active:
        raise ValidationError(f"Authority {authority.name} is not active")
    return authority


def find_admin_authority(db: Session) -> Optional[Authority]:
    """First active authority with role=admin, or None."""
    return (
        db.query(Authority)
        .filter(Authority.role == "admin", Authority.is_active == True)  # noqa: E712
        .order_by(Authority.id)
        .first()
    )


def list_authorities(db: Session, active: Optional[bool] = True) -> list[Authority]:
    """Ordered by designation then name. active=None returns everyone."""
    q = db.query(Authority)
    if active is not None:
        q = q.filter(Authority.is_active == active)
    return q.order_by(Authority.designation.asc(), Authority.name.asc()).all()


def count_active(db: Session) -> int:
    return db.query(Authority).filter(Authority.is_active == True).count()  # noqa: E712


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[AUTHORITY] {action} failed: {e}")
        raise StoreWriteError(f"Could not {action}") from e


def create_authority(db: Session, body: AuthorityCreate) -> Authority:
    if not body.name.strip():
        raise ValidationError("Authority name is required")
    authority = Authority(
        name=body.name.strip(),
        designation=body.designation,
        department=body.department or None,
        phone=body.phone or None,
        email=body.email or None,
        role=body.role,
        is_active=True,
        created_at=datetime.utcnow(),
    )
    db.add(authority)
    _commit(db, "add authority")
    db.refresh(authority)
    logger.info(f"[AUTHORITY] Added {authority.display_name} role={authority.role}")
    return authority


def update_authority(db: Session, authority_id: int, body: AuthorityUpdate) -> Authority:
    authority = get_authority(db, authority_id)
    if not authority:
        raise NotFoundError("Authority not found")
    changes = body.model_dump(exclude_unset=True)
    cleared = [name for name in REQUIRED_UPDATE_FIELDS if name in changes and changes[name] is None]
    if cleared:
        raise ValidationError(f"Field(s) cannot be empty: {', '.join(cleared)}")
    if "name" in changes and not changes["name"].strip():
        raise ValidationError("Authority name is required")
    for field, value in changes.items():
        setattr(authority, field, value)
    _commit(db, "update authority")
    db.refresh(authority)
    return authority


def toggle_authority(db: Session, authority_id: int) -> Authority:
    authority = get_authority(db, authority_id)
    if not authority:
        raise NotFoundError("Authority not found")
    authority.is_active = not authority.is_active
    _commit(db, "update authority status")
    logger.info(f"[AUTHORITY] {authority.name} active={authority.is_active}")
    return authority


def delete_authority(db: Session, authority_id: int):
    authority = get_authority(db, authority_id)
    if not authority:
        raise NotFoundError("Authority not found")
    db.delete(authority)
    _commit(db, "delete authority")
    logger.info(f"[AUTHORITY] Deleted {authority_id}")
