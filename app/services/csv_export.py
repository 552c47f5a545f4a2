# app/services/csv_export.py
"""
CSV formatting for visitor and vehicle exports.

Every value is double-quoted and embedded quotes are doubled, so the files
open cleanly in Excel and Google Sheets regardless of commas in notes.
"""

import csv
import io
from typing import Iterable, Optional
from app.models.authority import Authority
from app.models.bus_entry import BusEntry
from app.models.visitor import Visitor
from app.utils.formatting import format_display_time, text_or_blank

VISITOR_HEADERS = ["Entry Time", "Name", "Phone", "Purpose", "Authority", "Status",
                   "Exit Time", "Photo URL", "Notes"]
VEHICLE_HEADERS = ["Entry Time", "Vehicle Number", "Driver Name", "Driver Phone", "Route",
                   "Passenger Count", "Status", "Exit Time", "Notes"]
REPORT_VISITOR_HEADERS = ["Entry Time", "Name", "Phone", "Purpose", "Authority", "Status",
                          "Exit Time", "Notes"]
REPORT_BUS_HEADERS = ["Entry Time", "Bus Number", "Driver Name", "Driver Phone", "Route",
                      "Passenger Count", "Status", "Exit Time", "Notes"]


def _write_table(out: io.StringIO, headers: list[str], rows: Iterable[list[str]]):
    out.write(",".join(headers) + "\n")
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)


def visitor_csv_row(visitor: Visitor, authority: Optional[Authority]) -> list[str]:
    return [
        format_display_time(visitor.entry_time),
        visitor.name,
        visitor.phone,
        visitor.purpose,
        authority.name if authority else "Not Assigned",
        visitor.status,
        format_display_time(visitor.exit_time),
        text_or_blank(visitor.photo_url),
        text_or_blank(visitor.notes),
    ]


def vehicle_csv_row(entry: BusEntry) -> list[str]:
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


def visitors_to_csv(rows: Iterable[tuple[Visitor, Optional[Authority]]]) -> str:
    out = io.StringIO()
    _write_table(out, VISITOR_HEADERS, (visitor_csv_row(v, a) for v, a in rows))
    return out.getvalue()


def vehicles_to_csv(entries: Iterable[BusEntry]) -> str:
    out = io.StringIO()
    _write_table(out, VEHICLE_HEADERS, (vehicle_csv_row(e) for e in entries))
    return out.getvalue()


def report_to_csv(report: dict) -> str:
    """Sectioned report: VISITORS REPORT and/or BUS ENTRIES REPORT."""
    out = io.StringIO()
    if report["report_type"] in ("all", "visitors"):
        out.write("VISITORS REPORT\n")
        _write_table(out, REPORT_VISITOR_HEADERS, (
            [
                format_display_time(v.entry_time), v.name, v.phone, v.purpose,
                a.display_name if a else "Not Assigned", v.status,
                format_display_time(v.exit_time), text_or_blank(v.notes),
            ]
            for v, a in report["visitors"]
        ))
        out.write("\n")
    if report["report_type"] in ("all", "buses"):
        out.write("BUS ENTRIES REPORT\n")
        _write_table(out, REPORT_BUS_HEADERS, (vehicle_csv_row(e) for e in report["buses"]))
    return out.getvalue()
