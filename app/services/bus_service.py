# app/services/bus_service.py
"""
Bus / vehicle entry and exit tracking.

register → bus_entries row with status "entered" → best-effort export
exit     → stamps exit_time and moves the row to "exited" (once only)

No approval step and no notifications, unlike visitor_service.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.bus_entry import BusEntry, STATUS_ENTERED, STATUS_EXITED
from app.schemas.bus_entry import BusEntryCreate
from app.services.exceptions import InvalidTransitionError, NotFoundError, StoreWriteError, ValidationError
from app.services.export_service import export_bus
from app.utils.session import SessionUser, ANONYMOUS
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[BUS] {action} failed: {e}")
        raise StoreWriteError(f"Could not {action}. Please try again.") from e


def get_entry(db: Session, entry_id: int) -> BusEntry:
    entry = db.query(BusEntry).filter(BusEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Bus entry not found")
    return entry


async def register_bus(db: Session, body: BusEntryCreate,
                       actor: SessionUser = ANONYMOUS) -> tuple[BusEntry, bool]:
    """Returns the new entry and whether an external export accepted it."""
    bus_number = (body.bus_number or "").strip()
    if not bus_number:
        raise ValidationError("Missing required field(s): bus_number")

    now = datetime.utcnow()
    entry = BusEntry(
        bus_number=bus_number,
        driver_name=body.driver_name or None,
        driver_phone=body.driver_phone or None,
        route=body.route or None,
        passenger_count=body.passenger_count,
        entry_time=now,
        status=STATUS_ENTERED,
        notes=body.notes or None,
        created_by=actor.username,
        created_at=now,
    )
    db.add(entry)
    _commit(db, "register bus entry")
    db.refresh(entry)
    logger.info(f"[BUS] Entered {entry.id} bus={entry.bus_number} route={entry.route or '-'}")

    exported = await export_bus(entry)
    return entry, exported


def exit_bus(db: Session, entry_id: int) -> BusEntry:
    entry = get_entry(db, entry_id)
    if entry.exit_time is not None:
        raise InvalidTransitionError("Bus exit already recorded")

    entry.exit_time = datetime.utcnow()
    entry.status = STATUS_EXITED
    _commit(db, "record bus exit")
    db.refresh(entry)

    minutes = int((entry.exit_time - entry.entry_time).total_seconds()) // 60
    logger.info(f"[BUS] Exited {entry.id} bus={entry.bus_number} after {minutes} min")
    return entry


def search_entered(db: Session, query: str) -> list[BusEntry]:
    """Buses still inside whose number contains `query` (case-insensitive)."""
    query = (query or "").strip()
    if not query:
        return []
    return (
        db.query(BusEntry)
        .filter(
            BusEntry.bus_number.ilike(f"%{query}%"),
            BusEntry.status == STATUS_ENTERED,
            BusEntry.exit_time == None,  # noqa: E711
        )
        .order_by(BusEntry.entry_time.desc())
        .all()
    )


def list_entries(db: Session, status: Optional[str] = None, limit: Optional[int] = None) -> list[BusEntry]:
    q = db.query(BusEntry)
    if status:
        q = q.filter(BusEntry.status == status)
    q = q.order_by(BusEntry.entry_time.desc())
    if limit:
        q = q.limit(limit)
    return q.all()
