from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from src.absensi.absensi.attendance.service import AttendanceService
from src.absensi.absensi.attendance.sweeper import SKIPPED_DISABLED, SKIPPED_TOO_EARLY, AutoClockOutSweeper
from src.absensi.absensi.audit.service import AuditLogger
from src.absensi.absensi.core.constants import AUTO_CLOCK_OUT_NOTE
from src.absensi.absensi.core.enums import AttendanceStatus
from src.absensi.absensi.settings.model import SystemSettings
from tests.fakes import FixedClock, InMemoryAttendance, InMemoryAuditLogs, InMemorySettings

WIB = ZoneInfo("Asia/Jakarta")


def wib(hour: int, minute: int, day: int = 3) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=WIB)


def build(settings: SystemSettings):
    attendance = InMemoryAttendance()
    audit_logs = InMemoryAuditLogs()
    provider = InMemorySettings(settings)
    audit = AuditLogger(audit_logs)
    service = AttendanceService(attendance, provider, audit)
    sweeper = AutoClockOutSweeper(attendance, provider, audit, service, clock=FixedClock(wib(22, 0)))
    return sweeper, service, attendance, audit_logs


ENABLED = SystemSettings(auto_clock_out=True, auto_clock_out_time="21:00")


def test_disabled_sweep_does_nothing():
    sweeper, service, attendance, _ = build(SystemSettings(auto_clock_out=False))
    service.clock_in(1, now=wib(7, 30))

    result = sweeper.sweep(now=wib(23, 0))
    assert result.skipped_reason == SKIPPED_DISABLED
    assert result.processed_count == 0
    assert attendance.all()[0].is_open


def test_sweep_before_cutoff_is_skipped():
    sweeper, service, attendance, _ = build(ENABLED)
    service.clock_in(1, now=wib(7, 30))

    result = sweeper.sweep(now=wib(20, 59))
    assert result.skipped_reason == SKIPPED_TOO_EARLY
    assert attendance.all()[0].is_open


def test_sweep_closes_open_records_of_today():
    sweeper, service, attendance, audit_logs = build(ENABLED)
    service.clock_in(1, now=wib(7, 30))
    service.clock_in(2, now=wib(9, 0))
    service.clock_in(3, now=wib(7, 40))
    service.clock_out(3, now=wib(17, 10))
    service.clock_in(4, now=wib(7, 30, day=2))

    result = sweeper.sweep()

    assert result.processed_count == 2
    assert result.failed_ids == []
    assert result.skipped_reason is None
    closed = {r.user_id: r for r in attendance.all()}
    assert closed[1].status == AttendanceStatus.PRESENT
    assert closed[1].clock_out == wib(22, 0)
    assert closed[1].work_hours == 14.5
    assert closed[1].notes == AUTO_CLOCK_OUT_NOTE
    assert closed[2].status == AttendanceStatus.LATE
    # yesterday's open record is not today's business
    assert closed[4].is_open
    auto = [e for e in audit_logs.entries if e.action.value == "AUTO_CLOCK_OUT"]
    assert sorted(e.user_id for e in auto) == [1, 2]


def test_second_sweep_is_a_no_op():
    sweeper, service, _, audit_logs = build(ENABLED)
    service.clock_in(1, now=wib(7, 30))

    assert sweeper.sweep().processed_count == 1
    again = sweeper.sweep()
    assert again.processed_count == 0
    assert "No open attendance records" in again.message
    assert audit_logs.actions().count("AUTO_CLOCK_OUT") == 1


def test_misconfigured_cutoff_still_applies_early_leave_rule():
    settings = SystemSettings(auto_clock_out=True, auto_clock_out_time="12:00", clock_out_start="17:00")
    sweeper, service, attendance, _ = build(settings)
    service.clock_in(1, now=wib(7, 30))

    sweeper.sweep(now=wib(12, 30))
    assert attendance.all()[0].status == AttendanceStatus.EARLY_LEAVE


def test_one_failing_record_does_not_stop_the_batch():
    sweeper, service, attendance, _ = build(ENABLED)
    first = service.clock_in(1, now=wib(7, 30)).record
    service.clock_in(2, now=wib(7, 35))
    attendance.fail_update_ids.add(first.record_id)

    result = sweeper.sweep()

    assert result.processed_count == 1
    assert result.failed_ids == [first.record_id]
    by_user = {r.user_id: r for r in attendance.all()}
    assert by_user[1].is_open
    assert not by_user[2].is_open
    assert by_user[2].work_date == date(2026, 3, 3)
