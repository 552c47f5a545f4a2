# app/services/notification_service.py
"""
Notification fan-out and read-state handling.
Used by visitor_service (create on submit, mark read on decision) and the
notifications router.

Insert failures are logged and swallowed: a visitor may end up without a
notification if the store rejects the insert. Nothing retries it.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.authority import Authority
from app.models.notification import Notification, TYPE_VISITOR_REQUEST
from app.models.visitor import Visitor
from app.services.exceptions import NotFoundError
from app.services.authority_service import find_admin_authority
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_TITLE = "New Visitor Permission Request"
ADMIN_COPY_TITLE = "New Visitor Permission Request (Admin Copy)"


def request_message(visitor: Visitor) -> str:
    return (f"{visitor.name} ({visitor.email}) is requesting permission to enter. "
            f"Purpose: {visitor.purpose}")


def create_notification(db: Session, visitor: Visitor, authority: Authority,
                        title: str, message: str) -> Optional[Notification]:
    """Create and persist one notification. Always commits immediately; returns None on failure."""
    notification = Notification(
        visitor_id=visitor.id,
        authority_id=authority.id,
        type=TYPE_VISITOR_REQUEST,
        title=title,
        message=message,
        is_read=False,
        created_at=datetime.utcnow(),
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[NOTIFY] Could not notify authority {authority.id} for visitor {visitor.id}: {e}")
        return None
    logger.info(f"[NOTIFY] '{title}' → {authority.display_name} (visitor {visitor.id})")
    return notification


def notify_authorities(db: Session, visitor: Visitor, authority: Authority) -> list[Notification]:
    """
    Fan out a permission request for a freshly inserted visitor:
      - one notification to the selected authority
      - one "(Admin Copy)" to the first active admin, unless the selected
        authority is itself an admin. No admin → skipped.
    """
    created = []
    primary = create_notification(db, visitor, authority, REQUEST_TITLE, request_message(visitor))
    if primary:
        created.append(primary)

    if authority.role != "admin":
        admin = find_admin_authority(db)
        if admin:
            copy = create_notification(
                db, visitor, admin, ADMIN_COPY_TITLE,
                f"{request_message(visitor)}. Assigned to: {authority.name}",
            )
            if copy:
                created.append(copy)
        else:
            logger.debug(f"[NOTIFY] No admin authority found, admin copy skipped for visitor {visitor.id}")
    return created


def mark_read_for_visitor(db: Session, visitor_id: int) -> int:
    """Close every notification of a visitor, whoever it was addressed to."""
    updated = (
        db.query(Notification)
        .filter(Notification.visitor_id == visitor_id, Notification.is_read == False)  # noqa: E712
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def mark_read(db: Session, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise NotFoundError("Notification not found")
    notification.is_read = True
    db.commit()
    return notification


def list_notifications(db: Session, authority_id: Optional[int] = None,
                       unread_only: bool = False, limit: int = 50) -> list[Notification]:
    q = db.query(Notification)
    if authority_id is not None:
        q = q.filter(Notification.authority_id == authority_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def unread_count(db: Session, authority_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.authority_id == authority_id, Notification.is_read == False)  # noqa: E712
        .count()
    )
