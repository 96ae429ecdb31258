from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from src.absensi.absensi.audit.service import AuditLogger
from src.absensi.absensi.container import wire
from src.absensi.absensi.core.enums import Role
from src.absensi.absensi.main import create_app
from src.absensi.absensi.settings.model import SystemSettings
from src.absensi.absensi.users.model import Profile
from tests.fakes import (
    FixedClock,
    InMemoryAttendance,
    InMemoryAuditLogs,
    InMemoryLeaves,
    InMemoryProfiles,
    InMemorySettings,
)

WIB = ZoneInfo("Asia/Jakarta")
OFFICE = (-6.200000, 106.816666)


@pytest.fixture()
def env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    clock = FixedClock(datetime(2026, 3, 3, 7, 45, tzinfo=WIB))
    settings = InMemorySettings(
        SystemSettings(
            enable_location_tracking=True,
            office_latitude=OFFICE[0],
            office_longitude=OFFICE[1],
            auto_clock_out=True,
            auto_clock_out_time="21:00",
        )
    )
    container = wire(
        settings_repo=settings,
        attendance_repo=InMemoryAttendance(),
        leave_repo=InMemoryLeaves(),
        profiles_repo=InMemoryProfiles(
            Profile(user_id=1, full_name="Budi Santoso", role=Role.EMPLOYEE, join_date=date(2025, 1, 6)),
            Profile(user_id=2, full_name="Sari Manager", role=Role.MANAGER, join_date=date(2024, 5, 1)),
        ),
        audit=AuditLogger(InMemoryAuditLogs()),
        clock=clock,
        local_timezone="Asia/Jakarta",
    )
    app = create_app(container)
    return app, clock


def login(client, user_id: int, role: Role) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value


def at_office() -> dict:
    return {"location": "Head office", "latitude": OFFICE[0], "longitude": OFFICE[1] + 0.0002}


def test_requires_session(env):
    app, _ = env
    resp = app.test_client().post("/api/attendance/clock-in", json=at_office())
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_clock_in_then_duplicate(env):
    app, _ = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)

    resp = client.post("/api/attendance/clock-in", json=at_office())
    body = resp.get_json()
    assert resp.status_code == 201
    assert body["success"] is True
    assert body["status_assigned"] == "present"
    assert body["server_date"] == "2026-03-03"
    assert body["data"]["clock_in_location"] == "Head office"

    again = client.post("/api/attendance/clock-in", json=at_office())
    assert again.status_code == 409
    assert again.get_json()["error"] == "You already clocked in today"
    assert again.get_json()["existing_record"]["clock_out"] is None


def test_clock_in_location_errors(env):
    app, _ = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)

    assert client.post("/api/attendance/clock-in", json={}).status_code == 400

    far = client.post("/api/attendance/clock-in", json={"latitude": OFFICE[0] + 0.01, "longitude": OFFICE[1]})
    assert far.status_code == 403
    assert far.get_json()["max_radius"] == 100
    assert far.get_json()["distance_meters"] > 1000

    bad = client.post("/api/attendance/clock-in", json={"latitude": "north", "longitude": OFFICE[1]})
    assert bad.status_code == 400


def test_clock_out_flow(env):
    app, clock = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)

    assert client.post("/api/attendance/clock-out", json=at_office()).status_code == 400

    client.post("/api/attendance/clock-in", json=at_office())
    clock.current = datetime(2026, 3, 3, 16, 45, tzinfo=WIB)
    resp = client.post("/api/attendance/clock-out", json=at_office())
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["final_status"] == "early_leave"
    assert body["is_early_leave"] is True
    assert body["work_hours"] == 9.0

    assert client.post("/api/attendance/clock-out", json=at_office()).status_code == 409

    today = client.get("/api/attendance/today").get_json()
    assert today["data"]["status"] == "early_leave"


def test_period_access(env):
    app, _ = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)

    resp = client.get("/api/attendance/period?start=2026-03-02&end=2026-03-04")
    days = resp.get_json()["data"]["days"]
    assert [d["status"] for d in days] == ["absent", "pending", "future"]

    assert client.get("/api/attendance/period?start=2026-03-02&end=2026-03-04&user_id=2").status_code == 403
    assert client.get("/api/attendance/period?start=2026-03-xx").status_code == 400
    assert client.get("/api/attendance/period?start=0001-01-01&end=9999-12-31").status_code == 400

    login(client, 2, Role.MANAGER)
    other = client.get("/api/attendance/period?start=2026-03-02&end=2026-03-02&user_id=1")
    assert other.status_code == 200
    assert other.get_json()["data"]["user_id"] == 1


def test_overview_is_for_reviewers(env):
    app, _ = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)
    client.post("/api/attendance/clock-in", json=at_office())
    assert client.get("/api/attendance/overview").status_code == 403

    login(client, 2, Role.MANAGER)
    rows = client.get("/api/attendance/overview?date=2026-03-03").get_json()["data"]
    assert {r["full_name"]: r["day"]["status"] for r in rows} == {"Budi Santoso": "present"}


def test_admin_auto_clock_out(env):
    app, clock = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)
    client.post("/api/attendance/clock-in", json=at_office())
    assert client.post("/api/admin/auto-clock-out").status_code == 403

    login(client, 9, Role.ADMIN)
    early = client.post("/api/admin/auto-clock-out").get_json()
    assert early["skipped_reason"] == "too_early"

    clock.current = datetime(2026, 3, 3, 21, 30, tzinfo=WIB)
    done = client.post("/api/admin/auto-clock-out").get_json()
    assert done["processed_count"] == 1
    assert done["failed_ids"] == []


def test_auto_clock_out_cli(env):
    app, clock = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)
    client.post("/api/attendance/clock-in", json=at_office())
    clock.current = datetime(2026, 3, 3, 22, 0, tzinfo=WIB)

    result = app.test_cli_runner().invoke(args=["auto-clock-out"])
    assert result.exit_code == 0
    assert "Auto clocked out 1 users" in result.output


def test_leave_endpoints(env):
    app, _ = env
    client = app.test_client()
    login(client, 1, Role.EMPLOYEE)

    resp = client.post(
        "/api/leave",
        json={"start_date": "2026-03-09", "end_date": "2026-03-10", "leave_type": "cuti", "reason": "Mudik"},
    )
    assert resp.status_code == 201
    request_id = resp.get_json()["data"]["id"]

    assert client.post(f"/api/leave/{request_id}/approve").status_code == 403
    assert client.post("/api/leave", json={"start_date": "tomorrow"}).status_code == 400

    login(client, 2, Role.MANAGER)
    approved = client.post(f"/api/leave/{request_id}/approve", json={"admin_note": "Enjoy"})
    assert approved.get_json()["data"]["status"] == "approved"
    assert client.post(f"/api/leave/{request_id}/reject").status_code == 400

    login(client, 1, Role.EMPLOYEE)
    quota = client.get("/api/leave/quota").get_json()
    assert (quota["year"], quota["used_days"], quota["remaining_days"]) == (2026, 2, 10)
    assert len(client.get("/api/leave").get_json()["data"]) == 1
