# app/services/sheets_service.py
"""
Google Sheets integration via the Sheets v4 REST API (API-key auth).

  Append:  POST .../spreadsheets/{id}/values/{Tab}!A:I:append?valueInputOption=RAW&key=...
  Headers: PUT  .../spreadsheets/{id}/values/{Tab}!A1:I1?valueInputOption=RAW&key=...

Both return False instead of raising when the sheet is not configured or
the API call fails.
"""

from dataclasses import dataclass
from typing import Optional
import httpx
from app.config import settings
from app.models.authority import Authority
from app.models.bus_entry import BusEntry
from app.models.visitor import Visitor
from app.utils.formatting import format_display_time, text_or_blank
from app.utils.logger import get_logger

logger = get_logger(__name__)

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"


@dataclass(frozen=True)
class SheetTab:
    name: str
    headers: tuple

    @property
    def append_range(self) -> str:
        return f"{self.name}!A:I"

    @property
    def header_range(self) -> str:
        return f"{self.name}!A1:I1"


VISITORS_TAB = SheetTab("Visitors", (
    "Entry Time", "Visitor Name", "Phone Number", "Purpose", "Authority",
    "Status", "Exit Time", "Photo URL", "Notes",
))
BUSES_TAB = SheetTab("BusEntries", (
    "Entry Time", "Bus Number", "Driver Name", "Driver Phone", "Route",
    "Passenger Count", "Status", "Exit Time", "Notes",
))


def visitor_row(visitor: Visitor, authority: Optional[Authority]) -> list[str]:
    return [
        format_display_time(visitor.entry_time),
        visitor.name,
        visitor.phone,
        visitor.purpose,
        authority.display_name if authority else "Not Assigned",
        visitor.status,
        format_display_time(visitor.exit_time),
        text_or_blank(visitor.photo_url),
        text_or_blank(visitor.notes),
    ]


def bus_row(entry: BusEntry) -> list[str]:
    return [
        format_display_time(entry.entry_time),
        entry.bus_number,
        text_or_blank(entry.driver_name),
        text_or_blank(entry.driver_phone),
        text_or_blank(entry.route),
        text_or_blank(entry.passenger_count),
        entry.status,
        format_display_time(entry.exit_time),
        text_or_blank(entry.notes),
    ]


async def _write(method: str, sheet_id: Optional[str], cell_range: str, row: list, suffix: str = "") -> bool:
    if not sheet_id or not settings.GOOGLE_SHEETS_API_KEY:
        logger.debug(f"[SHEETS] Not configured for {cell_range}, skipping")
        return False

    url = f"{SHEETS_API_URL}/{sheet_id}/values/{cell_range}{suffix}"
    params = {"valueInputOption": "RAW", "key": settings.GOOGLE_SHEETS_API_KEY}
    try:
        async with httpx.AsyncClient(timeout=settings.EXPORT_TIMEOUT_SECONDS) as client:
            response = await client.request(method, url, params=params, json={"values": [row]})
        if not response.is_success:
            logger.error(f"[SHEETS] {cell_range} returned HTTP {response.status_code}: {response.text[:200]}")
            return False
        return True
    except httpx.HTTPError as e:
        logger.error(f"[SHEETS] {cell_range} request failed: {e}")
        return False


async def append_visitor(visitor: Visitor, authority: Optional[Authority]) -> bool:
    return await _write("POST", settings.VISITORS_SHEET_ID, VISITORS_TAB.append_range,
                        visitor_row(visitor, authority), suffix=":append")


async def append_bus(entry: BusEntry) -> bool:
    return await _write("POST", settings.BUS_ENTRIES_SHEET_ID, BUSES_TAB.append_range,
                        bus_row(entry), suffix=":append")


async def initialize_sheets() -> dict:
    """Write the header row of both tabs. Returns per-tab success."""
    visitors_ok = await _write("PUT", settings.VISITORS_SHEET_ID, VISITORS_TAB.header_range,
                               list(VISITORS_TAB.headers))
    buses_ok = await _write("PUT", settings.BUS_ENTRIES_SHEET_ID, BUSES_TAB.header_range,
                            list(BUSES_TAB.headers))
    logger.info(f"[SHEETS] Header init: visitors={visitors_ok} buses={buses_ok}")
    return {"visitors": visitors_ok, "buses": buses_ok}
