from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import LEAVE_TYPE_DAY_STATUS, DayStatus, LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    @property
    def day_count(self) -> int:
        """Inclusive number of calendar days."""
        return (self.end_date - self.start_date).days + 1

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def day_status(self) -> DayStatus:
        return LEAVE_TYPE_DAY_STATUS.get(self.leave_type, DayStatus.LEAVE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "leave_type": self.leave_type.value,
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "admin_note": self.admin_note,
        }
