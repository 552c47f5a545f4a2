# app/routers/reports.py
"""Dashboard counters, date-range reports and CSV downloads."""

from datetime import date
from typing import Literal, Optional
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.bus_entry import BusEntryOut
from app.schemas.report import DashboardStatsOut, ReportSummaryOut
from app.schemas.visitor import VisitorListOut, VisitorOut
from app.services import csv_export
from app.services.query_service import build_report, bus_history, dashboard_stats, visitor_history

router = APIRouter()

ReportType = Literal["all", "visitors", "buses"]


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stats/dashboard", response_model=DashboardStatsOut, summary="Dashboard counters")
def get_dashboard(db: Session = Depends(get_db)):
    """Totals, on-campus counts, today's arrivals and the five latest of each kind."""
    return dashboard_stats(db)


@router.get("/reports", response_model=ReportSummaryOut, summary="Report for a date range")
def get_report(start_date: date, end_date: date, report_type: ReportType = "all",
               status: Optional[str] = None, db: Session = Depends(get_db)):
    report = build_report(db, start_date, end_date, report_type, status)
    report["visitors"] = [
        VisitorListOut(**VisitorOut.model_validate(v).model_dump(),
                       authority_name=a.display_name if a else None)
        for v, a in report["visitors"]
    ]
    report["buses"] = [BusEntryOut.model_validate(b) for b in report["buses"]]
    return report


@router.get("/reports/csv", summary="Download a date-range report as CSV")
def download_report(start_date: date, end_date: date, report_type: ReportType = "all",
                    status: Optional[str] = None, db: Session = Depends(get_db)):
    report = build_report(db, start_date, end_date, report_type, status)
    return _csv_response(csv_export.report_to_csv(report),
                         f"gate-entry-report-{start_date}-to-{end_date}.csv")


@router.get("/exports/visitors.csv", summary="Download all visitors as CSV")
def export_visitors(db: Session = Depends(get_db)):
    return _csv_response(csv_export.visitors_to_csv(visitor_history(db)),
                         f"visitors_{date.today().isoformat()}.csv")


@router.get("/exports/vehicles.csv", summary="Download all vehicle entries as CSV")
def export_vehicles(db: Session = Depends(get_db)):
    return _csv_response(csv_export.vehicles_to_csv(bus_history(db)),
                         f"vehicle_entries_{date.today().isoformat()}.csv")
