from __future__ import annotations

from ...core.enums import AttendanceStatus
from ...settings.model import TimeWindows
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Early leave on clock-out (only when clock-in was present).

    Leaving early has no meaning at clock-in; there it behaves like the
    on-time rule.
    """

    def decide_clock_in(self, *, now_minutes: int, windows: TimeWindows) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_clock_out(self, *, now_minutes: int, windows: TimeWindows, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE, message="Clock out successful (early leave)")
