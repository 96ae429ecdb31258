from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import CLOCK_OUT_TRANSITIONS, AttendanceStatus
from ...settings.model import TimeWindows


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    message: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status.

    ``now_minutes`` is the evaluated instant as minutes since local midnight.
    """

    @abstractmethod
    def decide_clock_in(self, *, now_minutes: int, windows: TimeWindows) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(self, *, now_minutes: int, windows: TimeWindows, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError


def check_clock_out_transition(current: AttendanceStatus, decided: AttendanceStatus) -> AttendanceStatus:
    if decided not in CLOCK_OUT_TRANSITIONS[current]:
        raise ValueError(f"Illegal status transition at clock-out: {current.value} -> {decided.value}")
    return decided
