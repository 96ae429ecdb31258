from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..audit.model import AuditEntry
from ..audit.service import AuditLogger
from ..common.datetime_utils import Clock, SystemClock, as_utc, current_local_minutes, local_date
from ..core.constants import AUTO_CLOCK_OUT_NOTE
from ..core.enums import AuditAction
from ..settings.repository import SettingsProvider
from .repository import AttendanceRepository
from .service import AttendanceService

logger = logging.getLogger(__name__)

SKIPPED_DISABLED = "disabled"
SKIPPED_TOO_EARLY = "too_early"


@dataclass(frozen=True)
class SweepResult:
    processed_count: int
    failed_ids: list[int] = field(default_factory=list)
    skipped_reason: Optional[str] = None
    timestamp: Optional[datetime] = None

    @property
    def message(self) -> str:
        if self.skipped_reason == SKIPPED_DISABLED:
            return "Auto clock-out is disabled in settings."
        if self.skipped_reason == SKIPPED_TOO_EARLY:
            return "Too early to run auto clock-out."
        if not self.processed_count and not self.failed_ids:
            return "No open attendance records found for today."
        return f"Auto clocked out {self.processed_count} users ({len(self.failed_ids)} failed)."


class AutoClockOutSweeper:
    """Force-close today's open records once ``auto_clock_out_time`` has passed.

    Only open records are selected, so a second run on the same day finds
    nothing left to do. Each record is closed independently: one failure is
    logged and counted, the rest of the batch continues.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        settings: SettingsProvider,
        audit: AuditLogger,
        attendance_service: AttendanceService,
        *,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._settings = settings
        self._audit = audit
        self._service = attendance_service
        self._clock = clock or SystemClock()

    def sweep(self, now: Optional[datetime] = None) -> SweepResult:
        now = as_utc(now or self._clock.now())
        tz = self._service.local_timezone
        settings = self._settings.get()

        if not settings.auto_clock_out:
            return SweepResult(processed_count=0, skipped_reason=SKIPPED_DISABLED, timestamp=now)

        windows = settings.resolve_windows()
        if current_local_minutes(now, tz) < windows.auto_clock_out_time:
            return SweepResult(processed_count=0, skipped_reason=SKIPPED_TOO_EARLY, timestamp=now)

        today = local_date(now, tz)
        open_records = self._attendance.find_all_open_for_date(today)

        processed = 0
        failed: list[int] = []
        for record in open_records:
            try:
                result = self._service.close_record(record, now=now, windows=windows, note=AUTO_CLOCK_OUT_NOTE)
            except Exception:
                logger.exception("Auto clock-out failed for attendance id=%s user_id=%s", record.record_id, record.user_id)
                failed.append(record.record_id)
                continue

            processed += 1
            self._audit.record(
                AuditEntry(
                    user_id=record.user_id,
                    action=AuditAction.AUTO_CLOCK_OUT,
                    target_table="attendance",
                    target_id=record.record_id,
                    old_data=record.to_dict(),
                    new_data=result.record.to_dict(),
                    description=f"System auto clocked out employee. Time: {now.isoformat()}",
                )
            )

        logger.info("Auto clock-out for %s: processed=%s failed=%s", today.isoformat(), processed, len(failed))
        return SweepResult(processed_count=processed, failed_ids=failed, timestamp=now)
