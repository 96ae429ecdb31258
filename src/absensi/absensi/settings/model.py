from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.datetime_utils import minutes_since_midnight
from ..core import constants
from ..core.exceptions import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeWindows:
    """Settings times resolved to minutes since local midnight."""

    clock_in_start: int
    clock_in_end: int
    late_threshold: int
    clock_out_start: int
    clock_out_end: int
    auto_clock_out_time: int


@dataclass(frozen=True)
class SystemSettings:
    """Process-wide business configuration, read once per operation."""

    clock_in_start: str = constants.DEFAULT_CLOCK_IN_START
    clock_in_end: str = constants.DEFAULT_CLOCK_IN_END
    late_threshold: str = constants.DEFAULT_LATE_THRESHOLD
    clock_out_start: str = constants.DEFAULT_CLOCK_OUT_START
    clock_out_end: str = constants.DEFAULT_CLOCK_OUT_END
    enable_location_tracking: bool = False
    office_latitude: Optional[float] = None
    office_longitude: Optional[float] = None
    max_radius_meters: float = constants.DEFAULT_MAX_RADIUS_METERS
    auto_clock_out: bool = False
    auto_clock_out_time: str = constants.DEFAULT_AUTO_CLOCK_OUT_TIME
    max_leave_days: int = constants.DEFAULT_MAX_LEAVE_DAYS

    @classmethod
    def from_mapping(cls, values: Mapping[str, Optional[str]]) -> "SystemSettings":
        """Build settings from the ``system_settings`` key/value rows.

        Missing keys keep their defaults; unparsable or non-finite numbers (and a
        non-positive radius) fall back to the default with a warning.
        """

        defaults = cls()

        def text(key: str, default: str) -> str:
            value = values.get(key)
            return value.strip() if value and value.strip() else default

        def flag(key: str, default: bool) -> bool:
            value = values.get(key)
            if value is None or value == "":
                return default
            return str(value).strip().lower() == "true"

        def number(key: str, default, cast, *, positive: bool = False):
            value = values.get(key)
            if value is None or str(value).strip() == "":
                return default
            try:
                parsed = cast(str(value).strip())
            except ValueError:
                parsed = None
            if parsed is None or not math.isfinite(parsed) or (positive and parsed <= 0):
                logger.warning("%s", ConfigError(f"Invalid {key}={value!r}, using default {default!r}"))
                return default
            return parsed

        return cls(
            clock_in_start=text("clock_in_start", defaults.clock_in_start),
            clock_in_end=text("clock_in_end", defaults.clock_in_end),
            late_threshold=text("late_threshold", defaults.late_threshold),
            clock_out_start=text("clock_out_start", defaults.clock_out_start),
            clock_out_end=text("clock_out_end", defaults.clock_out_end),
            enable_location_tracking=flag("enable_location_tracking", defaults.enable_location_tracking),
            office_latitude=number("office_latitude", None, float),
            office_longitude=number("office_longitude", None, float),
            max_radius_meters=number("max_radius_meters", defaults.max_radius_meters, float, positive=True),
            auto_clock_out=flag("auto_clock_out", defaults.auto_clock_out),
            auto_clock_out_time=text("auto_clock_out_time", defaults.auto_clock_out_time),
            max_leave_days=number("max_leave_days", defaults.max_leave_days, int),
        )

    def as_mapping(self) -> dict[str, str]:
        """Inverse of ``from_mapping``; unset office coordinates are left out."""
        out = {
            "clock_in_start": self.clock_in_start,
            "clock_in_end": self.clock_in_end,
            "late_threshold": self.late_threshold,
            "clock_out_start": self.clock_out_start,
            "clock_out_end": self.clock_out_end,
            "enable_location_tracking": "true" if self.enable_location_tracking else "false",
            "max_radius_meters": f"{self.max_radius_meters:g}",
            "auto_clock_out": "true" if self.auto_clock_out else "false",
            "auto_clock_out_time": self.auto_clock_out_time,
            "max_leave_days": str(self.max_leave_days),
        }
        if self.has_office_location:
            out["office_latitude"] = repr(self.office_latitude)
            out["office_longitude"] = repr(self.office_longitude)
        return out

    @property
    def has_office_location(self) -> bool:
        return self.office_latitude is not None and self.office_longitude is not None

    def resolve_windows(self) -> TimeWindows:
        return TimeWindows(
            clock_in_start=_resolve("clock_in_start", self.clock_in_start, constants.DEFAULT_CLOCK_IN_START),
            clock_in_end=_resolve("clock_in_end", self.clock_in_end, constants.DEFAULT_CLOCK_IN_END),
            late_threshold=_resolve("late_threshold", self.late_threshold, constants.DEFAULT_LATE_THRESHOLD),
            clock_out_start=_resolve("clock_out_start", self.clock_out_start, constants.DEFAULT_CLOCK_OUT_START),
            clock_out_end=_resolve("clock_out_end", self.clock_out_end, constants.DEFAULT_CLOCK_OUT_END),
            auto_clock_out_time=_resolve(
                "auto_clock_out_time", self.auto_clock_out_time, constants.DEFAULT_AUTO_CLOCK_OUT_TIME
            ),
        )


def _resolve(name: str, value: str, default: str) -> int:
    try:
        return minutes_since_midnight(value)
    except ConfigError as e:
        logger.warning("Setting %s: %s; using default %s", name, e, default)
        return minutes_since_midnight(default)
