from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_LOCAL_TIMEZONE, MAX_PERIOD_DAYS
from ..core.exceptions import ValidationError
from ..leave.repository import LeaveRepository
from ..users.repository import ProfileRepository
from .model import DailyAttendanceStatus, EmployeeDay, PeriodSummary
from .reconciler import reconcile
from .stats import summarize


@dataclass(frozen=True)
class PeriodReport:
    user_id: int
    start_date: date
    end_date: date
    days: list[DailyAttendanceStatus]
    summary: PeriodSummary

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": [d.to_dict() for d in self.days],
            "summary": self.summary.to_dict(),
        }


class PeriodReportService:
    """Loads rows from the stores and hands them to the pure reconciler."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        profiles: ProfileRepository,
        *,
        local_timezone: str = DEFAULT_LOCAL_TIMEZONE,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._profiles = profiles
        self._tz = local_timezone

    def period(self, *, user_id: int, start: date, end: date, today: date) -> PeriodReport:
        if end < start:
            raise ValidationError("End date must be on or after the start date")
        if (end - start).days + 1 > MAX_PERIOD_DAYS:
            raise ValidationError(f"Period cannot be longer than {MAX_PERIOD_DAYS} days")

        profile = self._profiles.get_by_id(int(user_id))
        if not profile:
            raise ValidationError("Employee not found")

        records = self._attendance.query_range(start_date=start, end_date=end, user_id=profile.user_id)
        leaves = self._leaves.find_approved_overlapping(start_date=start, end_date=end, user_id=profile.user_id)
        days = reconcile(
            start,
            end,
            records,
            leaves,
            today=today,
            join_date=profile.join_date,
            local_timezone=self._tz,
        )
        return PeriodReport(user_id=profile.user_id, start_date=start, end_date=end, days=days, summary=summarize(days))

    def daily_overview(self, *, work_date: date, today: date, department: Optional[str] = None) -> list[EmployeeDay]:
        profiles = [p for p in self._profiles.list_active() if department is None or p.department == department]
        records = self._attendance.query_range(start_date=work_date, end_date=work_date)
        leaves = self._leaves.find_approved_overlapping(start_date=work_date, end_date=work_date)

        records_by_user: dict[int, list] = {}
        for r in records:
            records_by_user.setdefault(r.user_id, []).append(r)
        leaves_by_user: dict[int, list] = {}
        for leave in leaves:
            leaves_by_user.setdefault(leave.user_id, []).append(leave)

        out: list[EmployeeDay] = []
        for p in sorted(profiles, key=lambda x: x.full_name.lower()):
            (day,) = reconcile(
                work_date,
                work_date,
                records_by_user.get(p.user_id, []),
                leaves_by_user.get(p.user_id, []),
                today=today,
                join_date=p.join_date,
                local_timezone=self._tz,
            )
            out.append(EmployeeDay(user_id=p.user_id, full_name=p.full_name, day=day))
        return out
