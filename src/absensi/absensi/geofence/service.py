from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import LocationRequired, OutOfGeofence
from ..settings.model import SystemSettings


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance using the haversine formula."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def is_within_radius(point: GeoPoint, office: GeoPoint, max_radius: float) -> bool:
    """Inclusive: a point exactly on the boundary passes."""
    return distance_meters(point.latitude, point.longitude, office.latitude, office.longitude) <= max_radius


class GeofenceValidator:
    @staticmethod
    def is_enforced(settings: SystemSettings) -> bool:
        return settings.enable_location_tracking and settings.has_office_location

    def require_location(self, settings: SystemSettings, point: Optional[GeoPoint]) -> None:
        if self.is_enforced(settings) and point is None:
            raise LocationRequired("Location is required to clock in. Please enable GPS and try again.")

    def validate(self, settings: SystemSettings, point: GeoPoint) -> Optional[float]:
        """Check ``point`` against the office radius.

        Returns the distance in meters, or None when tracking is disabled or
        no office location is configured.
        """

        if not self.is_enforced(settings):
            return None

        office = GeoPoint(float(settings.office_latitude), float(settings.office_longitude))
        max_radius = float(settings.max_radius_meters)
        distance = distance_meters(point.latitude, point.longitude, office.latitude, office.longitude)
        if not is_within_radius(point, office, max_radius):
            raise OutOfGeofence(distance, max_radius)
        return distance
