"""Timezone-aware helpers for the fixed business timezone.

Every "is it late / is it early / which day is it" decision goes through these
functions so both sides of a comparison are minute-of-day values in the same
zone. Instants are always timezone-aware; naive values coming from the store
are UTC.
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import Protocol
from zoneinfo import ZoneInfo

from ..core.exceptions import ConfigError

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current instant (UTC, timezone-aware).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_utc()


@lru_cache(maxsize=None)
def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_local(instant: datetime, tz_name: str) -> datetime:
    return as_utc(instant).astimezone(get_zone(tz_name))


def minutes_since_midnight(time_str: str) -> int:
    """Convert "HH:MM" into minutes since midnight (0..1439)."""
    match = _HHMM.match((time_str or "").strip())
    if not match:
        raise ConfigError(f"Invalid time value {time_str!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ConfigError(f"Invalid time value {time_str!r}, expected HH:MM")
    return hours * 60 + minutes


def current_local_minutes(instant: datetime, tz_name: str) -> int:
    local = to_local(instant, tz_name)
    return local.hour * 60 + local.minute


def local_date(instant: datetime, tz_name: str) -> date:
    return to_local(instant, tz_name).date()


def current_local_date_key(instant: datetime, tz_name: str) -> str:
    return local_date(instant, tz_name).isoformat()


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
