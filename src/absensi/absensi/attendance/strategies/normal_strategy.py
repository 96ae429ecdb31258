from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...settings.model import TimeWindows
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time clock-in, normal clock-out."""

    def decide_clock_in(self, *, now_minutes: int, windows: TimeWindows) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.PRESENT,
            message="Clock in successful, you are recorded as on time",
        )

    def decide_clock_out(self, *, now_minutes: int, windows: TimeWindows, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current, message="Clock out successful")
