# tests/test_api.py
"""HTTP-level tests: routing, role gate, error mapping and CSV downloads."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from app.database import get_db
from app.main import app

ADMIN = {"X-User-Id": "1", "X-Username": "admin", "X-User-Role": "admin"}
STAFF = {"X-User-Id": "2", "X-Username": "ravi", "X-User-Role": "authority"}
GUARD = {"X-User-Id": "3", "X-Username": "guard1", "X-User-Role": "user"}

VISITOR_FORM = {"name": "Asha Rao", "phone": "9990001111", "email": "a@x.com", "purpose": "Delivery"}


@pytest.fixture
def client(engine):
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = Session()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def add_authority(client, name, designation="Staff", role="authority"):
    resp = client.post("/api/v1/authorities", headers=ADMIN,
                       json={"name": name, "designation": designation, "role": role})
    assert resp.status_code == 201
    return resp.json()


class TestVisitorAPI:
    def test_walk_in_visitor(self, client):
        resp = client.post("/api/v1/visitors", data=VISITOR_FORM, headers=GUARD)

        assert resp.status_code == 201
        body = resp.json()
        assert body["visitor"]["status"] == "approved"
        assert body["visitor"]["created_by"] == "guard1"
        assert body["notifications_created"] == 0
        assert body["exported"] is False
        assert "not configured" in body["message"]

    def test_missing_field_is_422(self, client):
        resp = client.post("/api/v1/visitors", data={**VISITOR_FORM, "purpose": ""})
        assert resp.status_code == 422
        assert "purpose" in resp.json()["detail"]
        assert client.get("/api/v1/visitors").json() == []

    def test_bad_authority_id_is_422(self, client):
        resp = client.post("/api/v1/visitors", data={**VISITOR_FORM, "authority_id": "abc"})
        assert resp.status_code == 422

    def test_photo_upload_stored_locally(self, client):
        files = {"photo": ("face.jpg", b"\xff\xd8\xff\xe0fake", "image/jpeg")}
        resp = client.post("/api/v1/visitors", data=VISITOR_FORM, files=files)
        assert resp.status_code == 201
        photo_url = resp.json()["visitor"]["photo_url"]
        assert "/photos/visitor-" in photo_url

        served = client.get(photo_url[photo_url.index("/photos/"):])
        assert served.status_code == 200
        assert served.content == b"\xff\xd8\xff\xe0fake"

    def test_approval_flow(self, client):
        hod = add_authority(client, "Dr. Meena", "HOD")
        add_authority(client, "Principal Office", "Principal", role="admin")

        resp = client.post("/api/v1/visitors", data={**VISITOR_FORM, "authority_id": str(hod["id"])})
        assert resp.status_code == 201
        visitor_id = resp.json()["visitor"]["id"]
        assert resp.json()["notifications_created"] == 2

        count = client.get("/api/v1/notifications/unread-count", params={"authority_id": hod["id"]})
        assert count.json() == {"authority_id": hod["id"], "unread": 1}

        pending = client.get("/api/v1/visitors/pending", headers=STAFF).json()
        assert [v["id"] for v in pending] == [visitor_id]
        assert pending[0]["authority_name"] == "Dr. Meena"

        approved = client.post(f"/api/v1/visitors/{visitor_id}/approve", headers=STAFF)
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["permission_granted_at"] is not None

        again = client.post(f"/api/v1/visitors/{visitor_id}/reject", headers=STAFF)
        assert again.status_code == 409

        count = client.get("/api/v1/notifications/unread-count", params={"authority_id": hod["id"]})
        assert count.json()["unread"] == 0

        out = client.post(f"/api/v1/visitors/{visitor_id}/checkout")
        assert out.status_code == 200
        assert out.json()["status"] == "exited"
        assert client.post(f"/api/v1/visitors/{visitor_id}/checkout").status_code == 409

    def test_guard_cannot_approve(self, client):
        visitor_id = client.post("/api/v1/visitors", data=VISITOR_FORM).json()["visitor"]["id"]
        assert client.post(f"/api/v1/visitors/{visitor_id}/approve").status_code == 401
        assert client.post(f"/api/v1/visitors/{visitor_id}/approve", headers=GUARD).status_code == 403

    def test_unknown_visitor_is_404(self, client):
        assert client.get("/api/v1/visitors/999").status_code == 404
        assert client.post("/api/v1/visitors/999/checkout").status_code == 404

    def test_recent_limit_must_be_positive(self, client):
        client.post("/api/v1/visitors", data=VISITOR_FORM)
        assert client.get("/api/v1/visitors/recent", params={"limit": -1}).status_code == 422
        assert client.get("/api/v1/visitors/recent", params={"limit": 0}).status_code == 422
        assert len(client.get("/api/v1/visitors/recent", params={"limit": 1}).json()) == 1

    def test_search_and_checked_in(self, client):
        client.post("/api/v1/visitors", data=VISITOR_FORM)
        assert len(client.get("/api/v1/visitors/search", params={"q": "ASHA"}).json()) == 1
        assert len(client.get("/api/v1/visitors/checked-in").json()) == 1


class TestBusAPI:
    def test_register_search_exit(self, client):
        resp = client.post("/api/v1/bus-entries", json={"bus_number": "KA-01-F-1234", "passenger_count": 30})
        assert resp.status_code == 201
        entry_id = resp.json()["entry"]["id"]
        assert resp.json()["entry"]["status"] == "entered"

        found = client.get("/api/v1/bus-entries/search", params={"q": "f-12"}).json()
        assert [b["id"] for b in found] == [entry_id]

        out = client.post(f"/api/v1/bus-entries/{entry_id}/exit")
        assert out.json()["status"] == "exited"
        assert client.post(f"/api/v1/bus-entries/{entry_id}/exit").status_code == 409

        listed = client.get("/api/v1/vehicle-entries", params={"status": "exited"}).json()
        assert [b["id"] for b in listed] == [entry_id]

    def test_vehicle_list_limit_must_be_positive(self, client):
        assert client.get("/api/v1/vehicle-entries", params={"limit": -5}).status_code == 422

    def test_negative_passenger_count_rejected(self, client):
        resp = client.post("/api/v1/bus-entries", json={"bus_number": "B1", "passenger_count": -1})
        assert resp.status_code == 422


class TestAdminAPI:
    def test_authority_admin_requires_admin_role(self, client):
        body = {"name": "X", "designation": "Staff"}
        assert client.post("/api/v1/authorities", json=body, headers=STAFF).status_code == 403

    def test_authority_toggle_hides_from_active_list(self, client):
        staff = add_authority(client, "Ravi Kumar")
        client.post(f"/api/v1/authorities/{staff['id']}/toggle", headers=ADMIN)

        assert client.get("/api/v1/authorities").json() == []
        inactive = client.get("/api/v1/authorities", params={"filter": "inactive"}).json()
        assert [a["name"] for a in inactive] == ["Ravi Kumar"]

        resp = client.post("/api/v1/visitors", data={**VISITOR_FORM, "authority_id": str(staff["id"])})
        assert resp.status_code == 422

    def test_authority_update_cannot_clear_required_fields(self, client):
        staff = add_authority(client, "Ravi Kumar")
        url = f"/api/v1/authorities/{staff['id']}"

        assert client.put(url, headers=ADMIN, json={"name": None}).status_code == 422
        assert client.put(url, headers=ADMIN, json={"designation": None}).status_code == 422
        assert client.put(url, headers=ADMIN, json={"name": "  "}).status_code == 422

        renamed = client.put(url, headers=ADMIN, json={"name": "Ravi K", "department": None})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Ravi K"
        assert renamed.json()["designation"] == "Staff"

    def test_user_login(self, client):
        created = client.post("/api/v1/users", headers=ADMIN,
                              json={"username": "gate1", "password": "s3cret", "role": "user"})
        assert created.status_code == 201
        assert "password" not in created.json()

        ok = client.post("/api/v1/auth/login", json={"username": "gate1", "password": "s3cret"})
        assert ok.status_code == 200
        assert ok.json()["role"] == "user"

        bad = client.post("/api/v1/auth/login", json={"username": "gate1", "password": "nope"})
        assert bad.status_code == 401

        dup = client.post("/api/v1/users", headers=ADMIN,
                          json={"username": "gate1", "password": "x", "role": "user"})
        assert dup.status_code == 422


class TestReportsAPI:
    def test_csv_exports(self, client):
        client.post("/api/v1/visitors", data=VISITOR_FORM)
        client.post("/api/v1/bus-entries", json={"bus_number": "KA-01"})

        visitors = client.get("/api/v1/exports/visitors.csv")
        assert visitors.status_code == 200
        assert visitors.headers["content-type"].startswith("text/csv")
        assert "attachment" in visitors.headers["content-disposition"]
        lines = visitors.text.splitlines()
        assert lines[0].startswith("Entry Time,Name,Phone,Purpose,Authority")
        assert '"Asha Rao"' in lines[1]

        vehicles = client.get("/api/v1/exports/vehicles.csv").text.splitlines()
        assert vehicles[0].startswith("Entry Time,Vehicle Number,Driver Name")
        assert '"KA-01"' in vehicles[1]

    def test_dashboard_and_report(self, client):
        client.post("/api/v1/visitors", data=VISITOR_FORM)
        stats = client.get("/api/v1/stats/dashboard").json()
        assert stats["total_visitors"] == 1
        assert stats["active_visitors"] == 1
        assert len(stats["recent_visitors"]) == 1

        report = client.get("/api/v1/reports", params={"start_date": "2000-01-01", "end_date": "2100-01-01"})
        assert report.status_code == 200
        assert report.json()["approved_visitors"] == 1
        assert report.json()["visitors"][0]["authority_name"] is None

        bad = client.get("/api/v1/reports", params={"start_date": "2026-02-01", "end_date": "2026-01-01"})
        assert bad.status_code == 422

    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["database"] == "ok"
        assert body["integrations"]["photo_storage"] == "local"
