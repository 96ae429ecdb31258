"""Daily period reconciliation.

Turns sparse attendance rows plus approved leave into one entry per calendar
day. ``today`` is a parameter, so the result depends only on the arguments.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import iter_days, local_date
from ..core.constants import DEFAULT_LOCAL_TIMEZONE
from ..core.enums import DayStatus, RequestStatus
from ..core.exceptions import ValidationError
from ..leave.model import LeaveRequest
from .model import DailyAttendanceStatus

_WEEKEND_ISO_DAYS = (6, 7)


def is_weekend(day: date) -> bool:
    return day.isoweekday() in _WEEKEND_ISO_DAYS


def index_records_by_day(records: Iterable[AttendanceRecord], tz_name: str) -> dict[date, AttendanceRecord]:
    """Key records by the local date of their clock-in; the earliest clock-in wins."""
    by_day: dict[date, AttendanceRecord] = {}
    for record in sorted(records, key=lambda r: r.clock_in):
        by_day.setdefault(local_date(record.clock_in, tz_name), record)
    return by_day


def find_leave(leaves: Sequence[LeaveRequest], day: date) -> Optional[LeaveRequest]:
    for leave in leaves:
        if leave.status == RequestStatus.APPROVED and leave.covers(day):
            return leave
    return None


def classify_day(
    day: date,
    *,
    today: date,
    record: Optional[AttendanceRecord],
    leave: Optional[LeaveRequest],
    join_date: Optional[date] = None,
) -> DailyAttendanceStatus:
    weekend = is_weekend(day)
    base = dict(date=day, is_weekend=weekend, iso_weekday=day.isoweekday())

    if day > today:
        return DailyAttendanceStatus(status=DayStatus.FUTURE, **base)

    if record is not None:
        return DailyAttendanceStatus(
            status=DayStatus(record.status.value),
            clock_in=record.clock_in,
            clock_out=record.clock_out,
            work_hours=record.work_hours,
            notes=record.notes,
            record_id=record.record_id,
            **base,
        )

    if leave is not None:
        return DailyAttendanceStatus(status=leave.day_status, notes=leave.reason, **base)

    if weekend:
        return DailyAttendanceStatus(status=DayStatus.WEEKEND, **base)

    if join_date is not None and day < join_date:
        return DailyAttendanceStatus(status=DayStatus.NOT_EMPLOYED, **base)

    if day == today:
        return DailyAttendanceStatus(status=DayStatus.PENDING, **base)

    return DailyAttendanceStatus(status=DayStatus.ABSENT, **base)


def reconcile(
    start_date: date,
    end_date: date,
    raw_records: Iterable[AttendanceRecord],
    approved_leaves: Iterable[LeaveRequest],
    *,
    today: date,
    join_date: Optional[date] = None,
    local_timezone: str = DEFAULT_LOCAL_TIMEZONE,
) -> list[DailyAttendanceStatus]:
    """One ``DailyAttendanceStatus`` per day of ``[start_date, end_date]``, ascending.

    Resolution order per day: future, raw record, approved leave, weekend,
    before ``join_date`` (``not_employed``), today (``pending``), otherwise
    ``absent``.
    """
    if end_date < start_date:
        raise ValidationError("End date must be on or after the start date")

    by_day = index_records_by_day(raw_records, local_timezone)
    leaves = list(approved_leaves)

    return [
        classify_day(
            day,
            today=today,
            record=by_day.get(day),
            leave=find_leave(leaves, day),
            join_date=join_date,
        )
        for day in iter_days(start_date, end_date)
    ]
