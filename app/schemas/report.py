# app/schemas/report.py
from pydantic import BaseModel
from typing import Optional

from app.schemas.visitor import VisitorListOut, VisitorOut
from app.schemas.bus_entry import BusEntryOut


class DashboardStatsOut(BaseModel):
    total_visitors: int
    active_visitors: int
    pending_approvals: int
    today_visitors: int
    total_buses: int
    active_buses: int
    today_buses: int
    total_authorities: int
    recent_visitors: list[VisitorOut]
    recent_buses: list[BusEntryOut]


class ReportSummaryOut(BaseModel):
    start_date: str
    end_date: str
    report_type: str
    status: Optional[str]
    total_visitors: int
    approved_visitors: int
    rejected_visitors: int
    pending_visitors: int
    total_buses: int
    visitors: list[VisitorListOut]
    buses: list[BusEntryOut]
