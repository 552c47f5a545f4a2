# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + which optional integrations are configured.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_db
from app.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "integrations": {
            "photo_storage": "supabase" if settings.use_supabase_storage else "local",
            "visitor_webhook": bool(settings.VISITOR_WEBHOOK_URL),
            "bus_webhook": bool(settings.BUS_WEBHOOK_URL),
            "google_sheets": bool(settings.GOOGLE_SHEETS_API_KEY),
        },
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
