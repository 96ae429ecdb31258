from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, ClockOutPatch, NewAttendance


class AttendanceRepository(Protocol):
    def find_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        """The (open or closed) record whose clock-in falls on ``work_date``."""

        raise NotImplementedError

    def insert(self, record: NewAttendance) -> AttendanceRecord:
        """Persist a new open record.

        Raises ``Conflict`` when ``(user_id, work_date)`` already exists.
        """

        raise NotImplementedError

    def update_clock_out(self, record_id: int, patch: ClockOutPatch) -> Optional[AttendanceRecord]:
        """Close an open record; None when it was already closed."""

        raise NotImplementedError

    def query_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_all_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
