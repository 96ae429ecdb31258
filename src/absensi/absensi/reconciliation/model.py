from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import DayStatus


@dataclass(frozen=True)
class DailyAttendanceStatus:
    """One calendar day of a reconciled period. Derived, never stored."""

    date: date
    status: DayStatus
    is_weekend: bool
    iso_weekday: int
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    work_hours: Optional[float] = None
    notes: Optional[str] = None
    record_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "status": self.status.value,
            "is_weekend": self.is_weekend,
            "iso_weekday": self.iso_weekday,
            "clock_in": self.clock_in.isoformat() if self.clock_in else None,
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "work_hours": self.work_hours,
            "notes": self.notes,
            "record_id": self.record_id,
        }


@dataclass(frozen=True)
class PeriodSummary:
    present: int = 0
    late: int = 0
    early_leave: int = 0
    absent: int = 0
    leave: int = 0
    sick: int = 0
    permission: int = 0
    weekend: int = 0
    future: int = 0
    pending: int = 0
    not_employed: int = 0
    working_days: int = 0
    total_work_hours: float = 0.0

    @property
    def attended(self) -> int:
        return self.present + self.late + self.early_leave

    @property
    def attendance_rate(self) -> float:
        if not self.working_days:
            return 0.0
        return round(self.attended / self.working_days * 100, 1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "attended": self.attended,
            "present": self.present,
            "late": self.late,
            "early_leave": self.early_leave,
            "absent": self.absent,
            "leave": self.leave,
            "sick": self.sick,
            "permission": self.permission,
            "weekend": self.weekend,
            "future": self.future,
            "pending": self.pending,
            "not_employed": self.not_employed,
            "working_days": self.working_days,
            "attendance_rate": self.attendance_rate,
            "total_work_hours": self.total_work_hours,
        }


@dataclass(frozen=True)
class EmployeeDay:
    user_id: int
    full_name: str
    day: DailyAttendanceStatus

    def to_dict(self) -> dict[str, Any]:
        return {"user_id": self.user_id, "full_name": self.full_name, "day": self.day.to_dict()}
