# app/services/visitor_service.py
"""
Visitor admission workflow.

submit   → validate → upload photo (optional) → insert visitor → notify authorities → export
decide   → pending visitor becomes approved / rejected, its notifications are closed
checkout → approved visitor becomes exited, exit_time stamped

Status rules:
  - no authority selected    → "approved" immediately, permission_granted_at = now
  - authority selected       → "pending", one notification (+ admin copy)
  - exit_time is set if and only if status == "exited"

With STRICT_VISITOR_TRANSITIONS=False, decide() accepts any non-exited visitor and
checkout() accepts pending/rejected visitors too. A visitor that already exited can
never be decided or checked out again.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.config import settings
from app.models.authority import Authority
from app.models.notification import Notification
from app.models.visitor import (
    Visitor, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_EXITED,
)
from app.schemas.visitor import VisitorCreate
from app.services.authority_service import get_active_authority
from app.services.exceptions import (
    InvalidTransitionError, NotFoundError, StoreWriteError, ValidationError,
)
from app.services.export_service import export_visitor
from app.services.notification_service import mark_read_for_visitor, notify_authorities
from app.services.photo_service import upload_photo
from app.utils.session import SessionUser, ANONYMOUS
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "phone", "email", "purpose")


@dataclass
class SubmissionResult:
    visitor: Visitor
    authority: Optional[Authority]
    notifications: list[Notification] = field(default_factory=list)
    exported: bool = False

    @property
    def message(self) -> str:
        if self.exported:
            return "Visitor registered successfully and sent to external system!"
        return "Visitor registered successfully! (External system integration not configured)"


def validate_submission(body: VisitorCreate):
    missing = [name for name in REQUIRED_FIELDS if not (getattr(body, name) or "").strip()]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def get_visitor(db: Session, visitor_id: int) -> Visitor:
    visitor = db.query(Visitor).filter(Visitor.id == visitor_id).first()
    if not visitor:
        raise NotFoundError("Visitor not found")
    return visitor


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[VISITOR] {action} failed: {e}")
        raise StoreWriteError(f"Could not {action}. Please try again.") from e


async def submit_visitor(db: Session, body: VisitorCreate, actor: SessionUser = ANONYMOUS,
                         photo: Optional[bytes] = None,
                         photo_content_type: str = "image/jpeg") -> SubmissionResult:
    validate_submission(body)
    authority = get_active_authority(db, body.authority_id) if body.authority_id is not None else None

    # Photo first: its URL goes into the visitor row. Failure → no photo.
    photo_url = await upload_photo(photo, photo_content_type) if photo else None

    requires_permission = authority is not None
    granted = not requires_permission
    now = datetime.utcnow()

    visitor = Visitor(
        name=body.name.strip(),
        phone=body.phone.strip(),
        email=body.email.strip(),
        purpose=body.purpose.strip(),
        authority_id=authority.id if authority else None,
        status=STATUS_PENDING if requires_permission else STATUS_APPROVED,
        photo_url=photo_url,
        notes=body.notes or None,
        created_by=actor.username,
        authority_permission_required=requires_permission,
        authority_permission_granted=granted,
        permission_granted_at=now if granted else None,
        entry_time=now,
        created_at=now,
    )
    db.add(visitor)
    _commit(db, "register visitor")
    db.refresh(visitor)
    logger.info(f"[VISITOR] Registered {visitor.id} name={visitor.name} status={visitor.status} "
                f"authority={authority.name if authority else '-'} by={actor.username}")

    notifications = notify_authorities(db, visitor, authority) if requires_permission else []

    exported = await export_visitor(visitor, authority)
    return SubmissionResult(visitor=visitor, authority=authority,
                            notifications=notifications, exported=exported)


def decide_visitor(db: Session, visitor_id: int, approve: bool,
                   actor: SessionUser = ANONYMOUS) -> Visitor:
    visitor = get_visitor(db, visitor_id)
    if visitor.status == STATUS_EXITED:
        raise InvalidTransitionError("Visitor has already exited")
    if settings.STRICT_VISITOR_TRANSITIONS and visitor.status != STATUS_PENDING:
        raise InvalidTransitionError(f"Visitor is already {visitor.status}")

    visitor.status = STATUS_APPROVED if approve else STATUS_REJECTED
    visitor.authority_permission_granted = approve
    visitor.permission_granted_at = datetime.utcnow() if approve else None
    _commit(db, "process approval")
    logger.info(f"[VISITOR] {visitor.id} {visitor.status} by {actor.username}")

    # Any decision closes the request for every recipient, admin copy included
    try:
        closed = mark_read_for_visitor(db, visitor.id)
        logger.debug(f"[NOTIFY] Closed {closed} notification(s) for visitor {visitor.id}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[NOTIFY] Could not close notifications for visitor {visitor.id}: {e}")

    db.refresh(visitor)
    return visitor


def checkout_visitor(db: Session, visitor_id: int) -> Visitor:
    visitor = get_visitor(db, visitor_id)
    if visitor.exit_time is not None:
        raise InvalidTransitionError("Visitor has already checked out")
    if settings.STRICT_VISITOR_TRANSITIONS and visitor.status != STATUS_APPROVED:
        raise InvalidTransitionError(f"Only approved visitors can check out (status: {visitor.status})")

    visitor.exit_time = datetime.utcnow()
    visitor.status = STATUS_EXITED
    _commit(db, "record exit")
    db.refresh(visitor)
    logger.info(f"[VISITOR] {visitor.id} checked out at {visitor.exit_time:%H:%M:%S}")
    return visitor


def pending_visitors(db: Session) -> list[Visitor]:
    """Approval queue, newest first."""
    return (
        db.query(Visitor)
        .filter(Visitor.status == STATUS_PENDING)
        .order_by(Visitor.entry_time.desc())
        .all()
    )


def search_for_exit(db: Session, query: str) -> list[Visitor]:
    """Visitors still inside whose name or phone contains `query` (case-insensitive)."""
    query = (query or "").strip()
    if not query:
        return []
    pattern = f"%{query}%"
    # Only offer visitors checkout_visitor() will accept
    leavable = ((STATUS_APPROVED,) if settings.STRICT_VISITOR_TRANSITIONS
                else (STATUS_PENDING, STATUS_APPROVED))
    return (
        db.query(Visitor)
        .filter(
            or_(Visitor.name.ilike(pattern), Visitor.phone.ilike(pattern)),
            Visitor.exit_time == None,  # noqa: E711
            Visitor.status.in_(leavable),
        )
        .order_by(Visitor.entry_time.desc())
        .all()
    )
