from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP-style code the controllers reply with and
    ``payload`` holds extra response fields (e.g. the conflicting record).
    """

    status_code = 400

    def __init__(self, message: str, *, payload: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.payload: dict[str, Any] = dict(payload or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when no authenticated user is attached to the request."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class ConfigError(DomainError):
    """Raised when a settings value cannot be parsed."""

    status_code = 500


class LocationRequired(DomainError):
    status_code = 400


class OutOfGeofence(DomainError):
    status_code = 403

    def __init__(self, distance_meters: float, max_radius: float):
        super().__init__(
            f"You are outside the office area ({round(distance_meters)}m from the office, maximum {max_radius:g}m)",
            payload={"distance_meters": round(distance_meters), "max_radius": max_radius},
        )
        self.distance_meters = distance_meters
        self.max_radius = max_radius


class DuplicateClockIn(DomainError):
    status_code = 409

    def __init__(self, existing_record: Any = None):
        super().__init__(
            "You already clocked in today",
            payload={"existing_record": _record_payload(existing_record)},
        )
        self.existing_record = existing_record


class AlreadyClockedOut(DomainError):
    status_code = 409

    def __init__(self, existing_record: Any = None):
        super().__init__(
            "You already clocked out today",
            payload={"existing_record": _record_payload(existing_record)},
        )
        self.existing_record = existing_record


class NoOpenRecord(DomainError):
    status_code = 400

    def __init__(self, message: str = "You have not clocked in today. Please clock in first."):
        super().__init__(message)


class Conflict(DomainError):
    """Storage-level uniqueness violation."""

    status_code = 409


class StorageError(DomainError):
    """Infrastructure failure while reading or writing the store."""

    status_code = 500


def _record_payload(record: Any) -> Optional[dict[str, Any]]:
    if record is None:
        return None
    clock_in = getattr(record, "clock_in", None)
    clock_out = getattr(record, "clock_out", None)
    return {
        "clock_in": clock_in.isoformat() if clock_in else None,
        "clock_out": clock_out.isoformat() if clock_out else None,
    }
