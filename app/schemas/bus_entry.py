# app/schemas/bus_entry.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class BusEntryCreate(BaseModel):
    bus_number: str = ""
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    route: Optional[str] = None
    passenger_count: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class BusEntryOut(BaseModel):
    id: int
    bus_number: str
    driver_name: Optional[str]
    driver_phone: Optional[str]
    route: Optional[str]
    passenger_count: Optional[int]
    entry_time: datetime
    exit_time: Optional[datetime]
    status: str
    notes: Optional[str]
    created_by: Optional[str]

    class Config:
        from_attributes = True


class BusRegisterOut(BaseModel):
    message: str
    exported: bool
    entry: BusEntryOut
