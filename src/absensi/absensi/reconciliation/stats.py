from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..core.enums import DayStatus
from .model import DailyAttendanceStatus, PeriodSummary

# Days that never enter the attendance-rate denominator.
_NON_WORKING = frozenset({DayStatus.WEEKEND, DayStatus.FUTURE, DayStatus.PENDING, DayStatus.NOT_EMPLOYED})


def summarize(days: Iterable[DailyAttendanceStatus]) -> PeriodSummary:
    days = list(days)
    counts = Counter(d.status for d in days)
    total_hours = sum(d.work_hours or 0.0 for d in days)

    return PeriodSummary(
        present=counts[DayStatus.PRESENT],
        late=counts[DayStatus.LATE],
        early_leave=counts[DayStatus.EARLY_LEAVE],
        absent=counts[DayStatus.ABSENT],
        leave=counts[DayStatus.LEAVE],
        sick=counts[DayStatus.SICK],
        permission=counts[DayStatus.PERMISSION],
        weekend=counts[DayStatus.WEEKEND],
        future=counts[DayStatus.FUTURE],
        pending=counts[DayStatus.PENDING],
        not_employed=counts[DayStatus.NOT_EMPLOYED],
        working_days=sum(1 for d in days if d.status not in _NON_WORKING),
        total_work_hours=round(total_hours, 2),
    )
