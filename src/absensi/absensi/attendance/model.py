from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..geofence.service import GeoPoint


@dataclass(frozen=True)
class ClockLocation:
    """Location reported by the client at clock-in/clock-out."""

    label: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def point(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class NewAttendance:
    user_id: int
    work_date: date
    clock_in: datetime
    status: AttendanceStatus
    clock_in_location: Optional[str] = None
    clock_in_lat: Optional[float] = None
    clock_in_lng: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ClockOutPatch:
    clock_out: datetime
    status: AttendanceStatus
    work_hours: float
    clock_out_location: Optional[str] = None
    clock_out_lat: Optional[float] = None
    clock_out_lng: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row.

    ``work_date`` is the local calendar day of ``clock_in`` and, together with
    ``user_id``, unique in the store. ``clock_out`` is None while the record is open.
    """

    record_id: int
    user_id: int
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    status: AttendanceStatus
    work_hours: Optional[float] = None
    notes: Optional[str] = None
    clock_in_location: Optional[str] = None
    clock_in_lat: Optional[float] = None
    clock_in_lng: Optional[float] = None
    clock_out_location: Optional[str] = None
    clock_out_lat: Optional[float] = None
    clock_out_lng: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.record_id,
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat(),
            "clock_in": self.clock_in.isoformat(),
            "clock_out": self.clock_out.isoformat() if self.clock_out else None,
            "status": self.status.value,
            "work_hours": self.work_hours,
            "notes": self.notes,
            "clock_in_location": self.clock_in_location,
            "clock_in_lat": self.clock_in_lat,
            "clock_in_lng": self.clock_in_lng,
            "clock_out_location": self.clock_out_location,
            "clock_out_lat": self.clock_out_lat,
            "clock_out_lng": self.clock_out_lng,
        }
