# app/services/export_service.py
"""
Best-effort forwarding of new gate records to external systems.

Each visitor or bus registration is POSTed as JSON to an optional webhook
(Zapier, Make.com, IFTTT, ...) and appended to an optional Google Sheet.
Nothing here raises: failures are logged and reported as False so the
registration itself is never affected.
"""

from typing import Optional
import httpx
from app.config import settings
from app.models.authority import Authority
from app.models.bus_entry import BusEntry
from app.models.visitor import Visitor
from app.services import sheets_service
from app.utils.logger import get_logger

logger = get_logger(__name__)


def visitor_summary(visitor: Visitor, authority: Optional[Authority]) -> dict:
    return {
        "name": visitor.name,
        "phone": visitor.phone,
        "email": visitor.email,
        "purpose": visitor.purpose,
        "entryTime": visitor.entry_time.isoformat(),
        "authorityName": authority.display_name if authority else None,
        "status": visitor.status,
        "photoUrl": visitor.photo_url,
        "notes": visitor.notes or None,
    }


def bus_summary(entry: BusEntry) -> dict:
    return {
        "busNumber": entry.bus_number,
        "driverName": entry.driver_name,
        "driverPhone": entry.driver_phone,
        "route": entry.route,
        "passengerCount": entry.passenger_count,
        "entryTime": entry.entry_time.isoformat(),
        "status": entry.status,
        "notes": entry.notes or None,
    }


async def send_to_webhook(data: dict, record_type: str) -> bool:
    """POST one record summary. record_type is "visitor" or "bus"."""
    webhook_url = settings.VISITOR_WEBHOOK_URL if record_type == "visitor" else settings.BUS_WEBHOOK_URL
    if not webhook_url:
        logger.debug(f"[EXPORT] No {record_type} webhook configured, skipping")
        return False

    try:
        async with httpx.AsyncClient(timeout=settings.EXPORT_TIMEOUT_SECONDS) as client:
            response = await client.post(webhook_url, json=data)
        if response.is_success:
            return True
        logger.warning(f"[EXPORT] {record_type} webhook returned HTTP {response.status_code}")
        return False
    except httpx.HTTPError as e:
        logger.error(f"[EXPORT] {record_type} webhook failed: {e}")
        return False


async def export_visitor(visitor: Visitor, authority: Optional[Authority]) -> bool:
    """Forward to webhook and sheet. True if at least one destination accepted it."""
    sent = await send_to_webhook(visitor_summary(visitor, authority), "visitor")
    appended = await sheets_service.append_visitor(visitor, authority)
    return sent or appended


async def export_bus(entry: BusEntry) -> bool:
    sent = await send_to_webhook(bus_summary(entry), "bus")
    appended = await sheets_service.append_bus(entry)
    return sent or appended
