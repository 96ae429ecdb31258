from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..audit.model import AuditEntry
from ..audit.service import AuditLogger
from ..common.datetime_utils import Clock, SystemClock, as_utc, current_local_minutes, local_date
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LOCAL_TIMEZONE
from ..core.enums import AttendanceStatus, AuditAction
from ..core.exceptions import AlreadyClockedOut, NoOpenRecord
from ..geofence.service import GeofenceValidator
from ..settings.model import TimeWindows
from ..settings.repository import SettingsProvider
from .factory import AttendanceStrategyFactory, is_early_leave
from .guard import DuplicateClockInGuard
from .model import AttendanceRecord, ClockLocation, ClockOutPatch, NewAttendance
from .repository import AttendanceRepository
from .strategies.base import check_clock_out_transition


@dataclass(frozen=True)
class ClockInResult:
    record: AttendanceRecord
    server_time: datetime
    server_date: date
    status_assigned: AttendanceStatus
    message: Optional[str]


@dataclass(frozen=True)
class ClockOutResult:
    record: AttendanceRecord
    server_time: datetime
    server_date: date
    work_hours: float
    is_early_leave: bool
    final_status: AttendanceStatus
    message: Optional[str]


def calculate_work_hours(clock_in: datetime, clock_out: datetime) -> float:
    """Elapsed hours rounded to 2 decimals, never negative."""
    seconds = (as_utc(clock_out) - as_utc(clock_in)).total_seconds()
    hours = Decimal(str(max(seconds, 0) / 3600))
    return float(hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def append_note(notes: Optional[str], line: str) -> str:
    return f"{notes}\n{line}" if notes else line


class AttendanceService:
    """Clock-in / clock-out state machine.

    Each operation reads ``now`` once and the settings once, and passes both
    through every check (status, duration, day lookup).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        settings: SettingsProvider,
        audit: AuditLogger,
        *,
        geofence: Optional[GeofenceValidator] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Optional[Clock] = None,
        local_timezone: str = DEFAULT_LOCAL_TIMEZONE,
    ):
        self._attendance = attendance
        self._settings = settings
        self._audit = audit
        self._guard = DuplicateClockInGuard(attendance)
        self._geofence = geofence or GeofenceValidator()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock or SystemClock()
        self._tz = local_timezone

    @property
    def local_timezone(self) -> str:
        return self._tz

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_utc(now or self._clock.now())

    def clock_in(
        self,
        user_id: int,
        location: Optional[ClockLocation] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ClockInResult:
        now = self._now(now)
        settings = self._settings.get()
        windows = settings.resolve_windows()
        today = local_date(now, self._tz)
        location = location or ClockLocation()

        self._guard.ensure_no_record(user_id, today)

        self._geofence.require_location(settings, location.point)
        if location.point is not None:
            self._geofence.validate(settings, location.point)

        now_minutes = current_local_minutes(now, self._tz)
        strategy = self._factory.for_clock_in(now_minutes=now_minutes, windows=windows)
        decision = strategy.decide_clock_in(now_minutes=now_minutes, windows=windows)

        record = self._guard.insert(
            NewAttendance(
                user_id=user_id,
                work_date=today,
                clock_in=now,
                status=decision.status,
                clock_in_location=location.label,
                clock_in_lat=location.latitude,
                clock_in_lng=location.longitude,
            )
        )

        self._audit.record(
            AuditEntry(
                user_id=user_id,
                action=AuditAction.CLOCK_IN,
                target_table="attendance",
                target_id=record.record_id,
                new_data=record.to_dict(),
                description=f"User clocked in at {now.isoformat()} with status: {decision.status.value}",
            )
        )
        return ClockInResult(
            record=record,
            server_time=now,
            server_date=today,
            status_assigned=decision.status,
            message=decision.message,
        )

    def clock_out(
        self,
        user_id: int,
        location: Optional[ClockLocation] = None,
        *,
        now: Optional[datetime] = None,
    ) -> ClockOutResult:
        now = self._now(now)
        settings = self._settings.get()
        today = local_date(now, self._tz)

        record = self._attendance.find_for_user_and_date(user_id, today)
        if not record:
            raise NoOpenRecord()
        if not record.is_open:
            raise AlreadyClockedOut(record)

        result = self.close_record(record, now=now, windows=settings.resolve_windows(), location=location)

        self._audit.record(
            AuditEntry(
                user_id=user_id,
                action=AuditAction.CLOCK_OUT,
                target_table="attendance",
                target_id=record.record_id,
                old_data=record.to_dict(),
                new_data=result.record.to_dict(),
                description=(
                    f"User clocked out at {now.isoformat()}. "
                    f"Work hours: {result.work_hours}h. Status: {result.final_status.value}"
                ),
            )
        )
        return result

    def close_record(
        self,
        record: AttendanceRecord,
        *,
        now: datetime,
        windows: TimeWindows,
        location: Optional[ClockLocation] = None,
        note: Optional[str] = None,
    ) -> ClockOutResult:
        """Apply the clock-out transition to an open record at ``now``."""

        location = location or ClockLocation()
        now_minutes = current_local_minutes(now, self._tz)
        strategy = self._factory.for_clock_out(now_minutes=now_minutes, windows=windows, current_status=record.status)
        decision = strategy.decide_clock_out(now_minutes=now_minutes, windows=windows, current=record.status)
        final_status = check_clock_out_transition(record.status, decision.status)
        work_hours = calculate_work_hours(record.clock_in, now)

        updated = self._attendance.update_clock_out(
            record.record_id,
            ClockOutPatch(
                clock_out=now,
                status=final_status,
                work_hours=work_hours,
                clock_out_location=location.label,
                clock_out_lat=location.latitude,
                clock_out_lng=location.longitude,
                notes=append_note(record.notes, note) if note else record.notes,
            ),
        )
        if updated is None:
            raise AlreadyClockedOut(self._attendance.find_for_user_and_date(record.user_id, record.work_date))

        return ClockOutResult(
            record=updated,
            server_time=now,
            server_date=local_date(now, self._tz),
            work_hours=work_hours,
            is_early_leave=is_early_leave(now_minutes, windows),
            final_status=final_status,
            message=decision.message,
        )

    def get_today_record(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        return self._attendance.find_for_user_and_date(user_id, local_date(self._now(now), self._tz))

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, limit)
