# app/services/query_service.py
"""
Read-side queries shared by the dashboard, lists and reports.

  on premises : admitted status AND exit_time IS NULL
  history     : newest entry_time first, optional inclusive date range + status
"""

from datetime import date, datetime, time, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from app.models.authority import Authority
from app.models.bus_entry import BusEntry, STATUS_ENTERED
from app.models.visitor import Visitor, STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED
from app.services.authority_service import count_active
from app.services.exceptions import ValidationError

REPORT_TYPES = ("all", "visitors", "buses")
RECENT_LIMIT = 5


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Start-of-day of `start` to end-of-day of `end`, both inclusive."""
    if end < start:
        raise ValidationError("End date must not be before start date")
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


def _history(q, model, start: Optional[date], end: Optional[date], status: Optional[str]):
    if start or end:
        lo, hi = day_bounds(start or end, end or start)
        q = q.filter(model.entry_time >= lo, model.entry_time <= hi)
    if status:
        q = q.filter(model.status == status)
    return q.order_by(model.entry_time.desc())


def visitor_history(db: Session, start: Optional[date] = None, end: Optional[date] = None,
                    status: Optional[str] = None, limit: Optional[int] = None
                    ) -> list[tuple[Visitor, Optional[Authority]]]:
    """Visitors paired with their assigned authority (None when unassigned)."""
    q = db.query(Visitor, Authority).outerjoin(Authority, Visitor.authority_id == Authority.id)
    q = _history(q, Visitor, start, end, status)
    if limit:
        q = q.limit(limit)
    return [(visitor, authority) for visitor, authority in q.all()]


def bus_history(db: Session, start: Optional[date] = None, end: Optional[date] = None,
                status: Optional[str] = None, limit: Optional[int] = None) -> list[BusEntry]:
    q = _history(db.query(BusEntry), BusEntry, start, end, status)
    if limit:
        q = q.limit(limit)
    return q.all()


def visitors_on_premises(db: Session) -> list[Visitor]:
    return (
        db.query(Visitor)
        .filter(Visitor.status == STATUS_APPROVED, Visitor.exit_time == None)  # noqa: E711
        .order_by(Visitor.entry_time.desc())
        .all()
    )


def buses_on_premises(db: Session) -> list[BusEntry]:
    return (
        db.query(BusEntry)
        .filter(BusEntry.status == STATUS_ENTERED, BusEntry.exit_time == None)  # noqa: E711
        .order_by(BusEntry.entry_time.desc())
        .all()
    )


def dashboard_stats(db: Session, today: Optional[date] = None) -> dict:
    today = today or datetime.utcnow().date()
    lo = datetime.combine(today, time.min)
    hi = lo + timedelta(days=1)

    visitors = db.query(Visitor)
    buses = db.query(BusEntry)
    return {
        "total_visitors": visitors.count(),
        "active_visitors": visitors.filter(Visitor.status == STATUS_APPROVED,
                                           Visitor.exit_time == None).count(),  # noqa: E711
        "pending_approvals": visitors.filter(Visitor.status == STATUS_PENDING).count(),
        "today_visitors": visitors.filter(Visitor.entry_time >= lo, Visitor.entry_time < hi).count(),
        "total_buses": buses.count(),
        "active_buses": buses.filter(BusEntry.status == STATUS_ENTERED).count(),
        "today_buses": buses.filter(BusEntry.entry_time >= lo, BusEntry.entry_time < hi).count(),
        "total_authorities": count_active(db),
        "recent_visitors": db.query(Visitor).order_by(Visitor.entry_time.desc()).limit(RECENT_LIMIT).all(),
        "recent_buses": db.query(BusEntry).order_by(BusEntry.entry_time.desc()).limit(RECENT_LIMIT).all(),
    }


def _bus_status_for_report(status: Optional[str]) -> Optional[str]:
    # Report filter is phrased in visitor terms; buses have no pending state
    if not status or status == STATUS_PENDING:
        return None
    return STATUS_ENTERED if status == STATUS_APPROVED else status


def build_report(db: Session, start: date, end: date, report_type: str = "all",
                 status: Optional[str] = None) -> dict:
    if report_type not in REPORT_TYPES:
        raise ValidationError(f"report_type must be one of {', '.join(REPORT_TYPES)}")
    if status == "all":
        status = None

    day_bounds(start, end)
    visitors = visitor_history(db, start, end, status)
    buses = bus_history(db, start, end, _bus_status_for_report(status))

    return {
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "report_type": report_type,
        "status": status,
        "total_visitors": len(visitors),
        "approved_visitors": sum(1 for v, _ in visitors if v.status == STATUS_APPROVED),
        "rejected_visitors": sum(1 for v, _ in visitors if v.status == STATUS_REJECTED),
        "pending_visitors": sum(1 for v, _ in visitors if v.status == STATUS_PENDING),
        "total_buses": len(buses),
        "visitors": [] if report_type == "buses" else visitors,
        "buses": [] if report_type == "visitors" else buses,
    }
