# app/models/bus_entry.py
"""
Bus entries table: college buses and other vehicles passing the gate.
No approval step: rows start as "entered" and move to "exited" once.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.database import Base

STATUS_ENTERED = "entered"
STATUS_EXITED = "exited"
BUS_STATUSES = (STATUS_ENTERED, STATUS_EXITED)


class BusEntry(Base):
    __tablename__ = "bus_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bus_number = Column(String(50), nullable=False, index=True)
    driver_name = Column(String(200))
    driver_phone = Column(String(30))
    route = Column(String(200))
    passenger_count = Column(Integer)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)
    status = Column(String(20), nullable=False, index=True)  # entered | exited
    notes = Column(Text)
    created_by = Column(String(100))
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<BusEntry {self.id} bus={self.bus_number} status={self.status}>"
