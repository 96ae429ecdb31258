from __future__ import annotations

import logging

from ..core.exceptions import Conflict, DuplicateClockIn
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class DuplicateClockInGuard:
    """At most one attendance record per (user, local day).

    The unique key on ``(user_id, work_date)`` in the store is the source of
    truth. The lookup before the insert only gives a friendlier answer in the
    common case; a concurrent request that slips past it hits the key and is
    reported the same way.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def ensure_no_record(self, user_id: int, work_date) -> None:
        existing = self._attendance.find_for_user_and_date(user_id, work_date)
        if existing:
            raise DuplicateClockIn(existing)

    def insert(self, record: NewAttendance) -> AttendanceRecord:
        try:
            return self._attendance.insert(record)
        except Conflict:
            logger.warning(
                "Concurrent clock-in rejected by unique key (user_id=%s work_date=%s)",
                record.user_id,
                record.work_date,
            )
            existing = self._attendance.find_for_user_and_date(record.user_id, record.work_date)
            raise DuplicateClockIn(existing)
