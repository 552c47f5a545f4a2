# app/routers/sheets.py
"""Google Sheets setup endpoint."""

from fastapi import APIRouter, Depends
from app.services import sheets_service
from app.utils.session import SessionUser, require_roles

router = APIRouter()


@router.post("/sheets/init", summary="Write header rows to the visitor and bus sheets")
async def init_sheets(user: SessionUser = Depends(require_roles("admin"))):
    result = await sheets_service.initialize_sheets()
    ok = all(result.values())
    return {"status": "ok" if ok else "failed", **result}
