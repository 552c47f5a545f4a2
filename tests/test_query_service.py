# tests/test_query_service.py
"""Unit tests for on-premises, history, dashboard and report queries."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, datetime, timedelta
from app.models.bus_entry import BusEntry
from app.models.visitor import Visitor
from app.services import query_service
from app.services.exceptions import ValidationError


def add_visitor(db, name, status, entry_time, exit_time=None, authority_id=None):
    v = Visitor(name=name, phone="1", email="x@y.z", purpose="p", status=status,
                authority_id=authority_id, entry_time=entry_time, exit_time=exit_time,
                authority_permission_required=authority_id is not None,
                authority_permission_granted=status in ("approved", "exited"))
    db.add(v)
    db.commit()
    return v


def add_bus(db, number, status, entry_time, exit_time=None):
    b = BusEntry(bus_number=number, status=status, entry_time=entry_time, exit_time=exit_time)
    db.add(b)
    db.commit()
    return b


DAY = datetime(2026, 3, 10)


class TestQueries:
    def test_on_premises(self, db):
        add_visitor(db, "inside", "approved", DAY)
        add_visitor(db, "waiting", "pending", DAY)
        add_visitor(db, "gone", "exited", DAY, DAY + timedelta(hours=1))
        add_bus(db, "B1", "entered", DAY)
        add_bus(db, "B2", "exited", DAY, DAY + timedelta(hours=2))

        assert [v.name for v in query_service.visitors_on_premises(db)] == ["inside"]
        assert [b.bus_number for b in query_service.buses_on_premises(db)] == ["B1"]

    def test_history_range_is_inclusive_of_whole_days(self, db, staff):
        add_visitor(db, "before", "approved", DAY - timedelta(seconds=1))
        add_visitor(db, "start", "approved", DAY, authority_id=staff.id)
        add_visitor(db, "late", "rejected", DAY + timedelta(days=1, hours=23, minutes=59, seconds=59))
        add_visitor(db, "after", "approved", DAY + timedelta(days=2))

        rows = query_service.visitor_history(db, date(2026, 3, 10), date(2026, 3, 11))
        assert [v.name for v, _ in rows] == ["late", "start"]
        assert rows[1][1].name == "Ravi Kumar"
        assert rows[0][1] is None

    def test_history_status_filter(self, db):
        add_visitor(db, "a", "approved", DAY)
        add_visitor(db, "r", "rejected", DAY)
        rows = query_service.visitor_history(db, status="rejected")
        assert [v.name for v, _ in rows] == ["r"]

    def test_reversed_range_rejected(self, db):
        with pytest.raises(ValidationError):
            query_service.build_report(db, date(2026, 3, 11), date(2026, 3, 10))

    def test_report_counts_and_bus_status_mapping(self, db):
        add_visitor(db, "a", "approved", DAY)
        add_visitor(db, "p", "pending", DAY)
        add_visitor(db, "r", "rejected", DAY)
        add_bus(db, "IN", "entered", DAY)
        add_bus(db, "OUT", "exited", DAY, DAY + timedelta(hours=1))

        everything = query_service.build_report(db, DAY.date(), DAY.date())
        assert everything["total_visitors"] == 3
        assert (everything["approved_visitors"], everything["rejected_visitors"],
                everything["pending_visitors"]) == (1, 1, 1)
        assert everything["total_buses"] == 2

        approved = query_service.build_report(db, DAY.date(), DAY.date(), status="approved")
        assert [b.bus_number for b in approved["buses"]] == ["IN"]

        pending = query_service.build_report(db, DAY.date(), DAY.date(), status="pending")
        assert pending["total_buses"] == 2

        buses_only = query_service.build_report(db, DAY.date(), DAY.date(), report_type="buses")
        assert buses_only["visitors"] == []
        assert buses_only["total_visitors"] == 3

    def test_dashboard_stats(self, db, staff, admin):
        add_visitor(db, "today-in", "approved", DAY + timedelta(hours=9))
        add_visitor(db, "today-wait", "pending", DAY + timedelta(hours=10))
        add_visitor(db, "turned-away", "rejected", DAY + timedelta(hours=11))
        add_visitor(db, "old", "exited", DAY - timedelta(days=3), DAY - timedelta(days=3, hours=-1))
        add_bus(db, "B1", "entered", DAY + timedelta(hours=7))

        stats = query_service.dashboard_stats(db, today=DAY.date())
        assert stats["total_visitors"] == 4
        assert stats["active_visitors"] == 1
        assert stats["pending_approvals"] == 1
        assert stats["today_visitors"] == 3
        assert stats["total_buses"] == 1
        assert stats["active_buses"] == 1
        assert stats["today_buses"] == 1
        assert stats["total_authorities"] == 2
        assert [v.name for v in stats["recent_visitors"]][0] == "turned-away"
