# app/utils/formatting.py
"""
Display helpers shared by the CSV and Google Sheets exports.
"""

from datetime import datetime
from typing import Any, Optional


def format_display_time(value: Optional[datetime]) -> str:
    """Format as DD/MM/YYYY, hh:mm am, the en-IN style used on gate reports."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y, %I:%M ") + value.strftime("%p").lower()


def text_or_blank(value: Any) -> str:
    return "" if value is None else str(value)
