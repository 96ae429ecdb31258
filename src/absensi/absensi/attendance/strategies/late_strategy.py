from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...settings.model import TimeWindows
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in; also used after the clock-in window has closed."""

    def decide_clock_in(self, *, now_minutes: int, windows: TimeWindows) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            message="Clock in successful, but you are recorded as late",
        )

    def decide_clock_out(self, *, now_minutes: int, windows: TimeWindows, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current, message="Clock out successful")
