# app/routers/bus_entries.py
"""Bus / vehicle gate entries: register, exit, search and list."""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.bus_entry import BusEntryCreate, BusEntryOut, BusRegisterOut
from app.services import bus_service
from app.utils.session import SessionUser, get_session_user

router = APIRouter()


@router.post("/bus-entries", response_model=BusRegisterOut, status_code=201, summary="Register a bus entry")
async def register_bus(body: BusEntryCreate, db: Session = Depends(get_db),
                       user: SessionUser = Depends(get_session_user)):
    entry, exported = await bus_service.register_bus(db, body, user)
    message = ("Bus entry registered successfully and sent to external system!" if exported
               else "Bus entry registered successfully! (External system integration not configured)")
    return BusRegisterOut(message=message, exported=exported, entry=BusEntryOut.model_validate(entry))


@router.get("/vehicle-entries", response_model=list[BusEntryOut], summary="List vehicle entries")
def list_vehicle_entries(status: Optional[str] = None, limit: Optional[int] = Query(None, ge=1),
                         db: Session = Depends(get_db)):
    """Newest first. Filter by status (entered | exited). Feeds the vehicles CSV export."""
    return bus_service.list_entries(db, status=status, limit=limit)


@router.get("/bus-entries/search", response_model=list[BusEntryOut], summary="Find a bus to mark as exited")
def search_buses(q: str = "", db: Session = Depends(get_db)):
    return bus_service.search_entered(db, q)


@router.post("/bus-entries/{entry_id}/exit", response_model=BusEntryOut, summary="Record bus exit")
def exit_bus(entry_id: int, db: Session = Depends(get_db)):
    return bus_service.exit_bus(db, entry_id)
