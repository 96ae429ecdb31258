from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.absensi.absensi.attendance.model import ClockLocation
from src.absensi.absensi.attendance.service import AttendanceService, calculate_work_hours
from src.absensi.absensi.audit.service import AuditLogger
from src.absensi.absensi.core.enums import AttendanceStatus
from src.absensi.absensi.core.exceptions import (
    AlreadyClockedOut,
    DuplicateClockIn,
    LocationRequired,
    NoOpenRecord,
    OutOfGeofence,
)
from src.absensi.absensi.settings.model import SystemSettings
from tests.fakes import FixedClock, InMemoryAttendance, InMemoryAuditLogs, InMemorySettings

WIB = ZoneInfo("Asia/Jakarta")
OFFICE = (-6.200000, 106.816666)


def wib(hour: int, minute: int, day: int = 3) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=WIB)


def build(settings: SystemSettings | None = None, *, audit_fail: bool = False):
    attendance = InMemoryAttendance()
    audit_logs = InMemoryAuditLogs(fail=audit_fail)
    provider = InMemorySettings(settings)
    service = AttendanceService(
        attendance,
        provider,
        AuditLogger(audit_logs),
        clock=FixedClock(wib(8, 0)),
        local_timezone="Asia/Jakarta",
    )
    return service, attendance, audit_logs, provider


def test_clock_in_on_time():
    service, attendance, audit_logs, _ = build()
    result = service.clock_in(1, now=wib(7, 59))

    assert result.status_assigned == AttendanceStatus.PRESENT
    assert result.server_date == date(2026, 3, 3)
    assert result.record.work_date == date(2026, 3, 3)
    assert result.record.is_open
    assert audit_logs.actions() == ["CLOCK_IN"]


def test_clock_in_exactly_at_threshold_is_present():
    service, *_ = build()
    assert service.clock_in(1, now=wib(8, 0)).status_assigned == AttendanceStatus.PRESENT


def test_clock_in_after_threshold_is_late():
    service, *_ = build()
    result = service.clock_in(1, now=wib(8, 1))
    assert result.status_assigned == AttendanceStatus.LATE
    assert "late" in result.message


def test_clock_in_uses_injected_clock_when_now_is_omitted():
    service, *_ = build()
    result = service.clock_in(1)
    assert result.server_time == wib(8, 0).astimezone(timezone.utc)


def test_clock_in_local_day_differs_from_utc_day():
    # 06:30 local on the 3rd is still the 2nd in UTC.
    service, *_ = build()
    result = service.clock_in(1, now=datetime(2026, 3, 2, 23, 30, tzinfo=timezone.utc))
    assert result.server_date == date(2026, 3, 3)
    assert result.status_assigned == AttendanceStatus.PRESENT


def test_second_clock_in_same_day_is_rejected_with_existing_record():
    service, *_ = build()
    service.clock_in(1, now=wib(7, 30))

    with pytest.raises(DuplicateClockIn) as exc:
        service.clock_in(1, now=wib(9, 0))
    assert exc.value.status_code == 409
    assert exc.value.payload["existing_record"]["clock_in"].startswith("2026-03-03T00:30")


def test_clock_in_next_day_is_allowed():
    service, *_ = build()
    service.clock_in(1, now=wib(7, 30))
    assert service.clock_in(1, now=wib(7, 30, day=4)).server_date == date(2026, 3, 4)


def test_settings_read_once_per_operation():
    service, _, _, provider = build()
    service.clock_in(1, now=wib(7, 30))
    service.clock_out(1, now=wib(17, 30))
    assert provider.reads == 2


def test_location_required_when_tracking_enabled():
    settings = SystemSettings(enable_location_tracking=True, office_latitude=OFFICE[0], office_longitude=OFFICE[1])
    service, attendance, *_ = build(settings)

    with pytest.raises(LocationRequired):
        service.clock_in(1, now=wib(7, 30))
    assert attendance.all() == []


def test_clock_in_outside_geofence_is_rejected():
    settings = SystemSettings(enable_location_tracking=True, office_latitude=OFFICE[0], office_longitude=OFFICE[1])
    service, attendance, *_ = build(settings)

    with pytest.raises(OutOfGeofence) as exc:
        service.clock_in(1, ClockLocation("Cafe", OFFICE[0] + 0.01, OFFICE[1]), now=wib(7, 30))
    assert exc.value.payload["distance_meters"] > 1000
    assert attendance.all() == []


def test_clock_in_inside_geofence_stores_location():
    settings = SystemSettings(enable_location_tracking=True, office_latitude=OFFICE[0], office_longitude=OFFICE[1])
    service, *_ = build(settings)

    record = service.clock_in(1, ClockLocation("Lobby", OFFICE[0], OFFICE[1] + 0.0003), now=wib(7, 30)).record
    assert record.clock_in_location == "Lobby"
    assert record.clock_in_lat == OFFICE[0]


def test_clock_out_after_window_keeps_present():
    service, _, audit_logs, _ = build()
    service.clock_in(1, now=wib(7, 55))
    result = service.clock_out(1, now=wib(17, 1))

    assert result.final_status == AttendanceStatus.PRESENT
    assert not result.is_early_leave
    assert result.work_hours == 9.1
    assert result.record.clock_out == wib(17, 1).astimezone(timezone.utc)
    assert audit_logs.actions() == ["CLOCK_IN", "CLOCK_OUT"]


def test_clock_out_early_upgrades_present_to_early_leave():
    service, *_ = build()
    service.clock_in(1, now=wib(7, 45))
    result = service.clock_out(1, now=wib(16, 45))

    assert result.final_status == AttendanceStatus.EARLY_LEAVE
    assert result.is_early_leave
    assert result.work_hours == 9.0


def test_clock_out_early_keeps_late():
    service, *_ = build()
    service.clock_in(1, now=wib(9, 30))
    result = service.clock_out(1, now=wib(15, 0))

    assert result.final_status == AttendanceStatus.LATE
    assert result.is_early_leave


def test_clock_out_without_clock_in():
    service, *_ = build()
    with pytest.raises(NoOpenRecord) as exc:
        service.clock_out(1, now=wib(17, 0))
    assert exc.value.status_code == 400


def test_clock_out_twice():
    service, *_ = build()
    service.clock_in(1, now=wib(7, 45))
    service.clock_out(1, now=wib(17, 5))

    with pytest.raises(AlreadyClockedOut) as exc:
        service.clock_out(1, now=wib(17, 10))
    assert exc.value.payload["existing_record"]["clock_out"] is not None


def test_audit_failure_does_not_undo_clock_in(caplog):
    service, attendance, *_ = build(audit_fail=True)
    with caplog.at_level(logging.ERROR):
        result = service.clock_in(1, now=wib(7, 45))

    assert attendance.find_for_user_and_date(1, date(2026, 3, 3)) == result.record
    assert "Audit log write failed" in caplog.text


def test_today_record_and_history():
    service, *_ = build()
    service.clock_in(1, now=wib(7, 45, day=2))
    service.clock_in(1, now=wib(7, 45, day=3))

    assert service.get_today_record(1, now=wib(12, 0)).work_date == date(2026, 3, 3)
    assert service.get_today_record(2, now=wib(12, 0)) is None
    assert [r.work_date.day for r in service.get_history(1, limit=5)] == [3, 2]


@pytest.mark.parametrize(
    "start,end,hours",
    [
        (datetime(2026, 3, 3, 1, 0), datetime(2026, 3, 3, 10, 0), 9.0),
        (datetime(2026, 3, 3, 1, 0), datetime(2026, 3, 3, 1, 20), 0.33),
        (datetime(2026, 3, 3, 1, 0), datetime(2026, 3, 3, 0, 59), 0.0),
        # halves round up
        (datetime(2026, 3, 3, 1, 0), datetime(2026, 3, 3, 1, 7, 30), 0.13),
        (datetime(2026, 3, 3, 1, 0), datetime(2026, 3, 3, 2, 7, 30), 1.13),
    ],
)
def test_calculate_work_hours(start, end, hours):
    assert calculate_work_hours(start, end) == hours
