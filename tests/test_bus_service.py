# tests/test_bus_service.py
"""Unit tests for the bus entry/exit tracker."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import time
import pytest
from unittest.mock import AsyncMock, patch
from app.models.bus_entry import BusEntry
from app.schemas.bus_entry import BusEntryCreate
from app.services import bus_service
from app.services.exceptions import InvalidTransitionError, NotFoundError, ValidationError


def make_bus(bus_number="KA-01-F-1234", **extra):
    return BusEntryCreate(bus_number=bus_number, driver_name="Suresh", route="City Centre",
                          passenger_count=42, **extra)


class TestBusService:
    @pytest.mark.asyncio
    async def test_register_creates_entered_row(self, db):
        entry, exported = await bus_service.register_bus(db, make_bus())

        assert entry.status == "entered"
        assert entry.entry_time is not None
        assert entry.exit_time is None
        assert entry.created_by == "Gatekeeper"
        assert exported is False
        assert db.query(BusEntry).count() == 1

    @pytest.mark.asyncio
    async def test_missing_bus_number_writes_nothing(self, db):
        with pytest.raises(ValidationError):
            await bus_service.register_bus(db, make_bus(bus_number="   "))
        assert db.query(BusEntry).count() == 0

    @pytest.mark.asyncio
    async def test_export_is_attempted(self, db):
        with patch("app.services.bus_service.export_bus", new_callable=AsyncMock, return_value=True) as mock_export:
            _, exported = await bus_service.register_bus(db, make_bus())
        mock_export.assert_awaited_once()
        assert exported is True

    @pytest.mark.asyncio
    async def test_exit_round_trip(self, db):
        entry, _ = await bus_service.register_bus(db, make_bus())
        time.sleep(0.01)

        out = bus_service.exit_bus(db, entry.id)

        assert out.status == "exited"
        assert out.exit_time > out.entry_time

    @pytest.mark.asyncio
    async def test_second_exit_rejected(self, db):
        entry, _ = await bus_service.register_bus(db, make_bus())
        bus_service.exit_bus(db, entry.id)
        with pytest.raises(InvalidTransitionError):
            bus_service.exit_bus(db, entry.id)

    def test_exit_unknown_bus(self, db):
        with pytest.raises(NotFoundError):
            bus_service.exit_bus(db, 12345)

    @pytest.mark.asyncio
    async def test_search_only_entered_case_insensitive(self, db):
        inside, _ = await bus_service.register_bus(db, make_bus("KA-01-F-1234"))
        left, _ = await bus_service.register_bus(db, make_bus("ka-01-f-9999"))
        bus_service.exit_bus(db, left.id)

        found = bus_service.search_entered(db, "ka-01")
        assert [b.id for b in found] == [inside.id]
        assert bus_service.search_entered(db, "") == []

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, db):
        a, _ = await bus_service.register_bus(db, make_bus("BUS-A"))
        b, _ = await bus_service.register_bus(db, make_bus("BUS-B"))
        bus_service.exit_bus(db, a.id)

        assert [e.id for e in bus_service.list_entries(db, status="entered")] == [b.id]
        assert [e.id for e in bus_service.list_entries(db, status="exited")] == [a.id]
        assert len(bus_service.list_entries(db)) == 2
