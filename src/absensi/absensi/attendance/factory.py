from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus
from ..settings.model import TimeWindows
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now_minutes: int, windows: TimeWindows) -> AttendanceStrategy:
        # Inclusive: clocking in exactly at the threshold is on time.
        # There is no hard cut-off at clock_in_end; anything later is late.
        if now_minutes <= windows.late_threshold:
            return NormalStrategy()
        return LateStrategy()

    def for_clock_out(self, *, now_minutes: int, windows: TimeWindows, current_status: AttendanceStatus) -> AttendanceStrategy:
        if is_early_leave(now_minutes, windows) and current_status == AttendanceStatus.PRESENT:
            return EarlyLeaveStrategy()
        return NormalStrategy()


def is_early_leave(now_minutes: int, windows: TimeWindows) -> bool:
    return now_minutes < windows.clock_out_start
