"""Helpers shared by the JSON controllers."""
from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from .datetime_utils import parse_iso_date
from .validators import coerce_float, validate_coordinates

logger = logging.getLogger(__name__)


def current_user_id() -> int:
    if "user_id" not in session:
        raise AuthenticationError("Unauthorized")
    return int(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Unknown role")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current_user_id()
            if current_role() not in roles:
                raise AuthorizationError("Forbidden")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def date_arg(name: str, default: Optional[date] = None) -> date:
    value = request.args.get(name)
    if not value:
        if default is None:
            raise ValidationError(f"Missing parameter {name}")
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}, expected YYYY-MM-DD")


def coordinates_from(body: dict[str, Any]) -> tuple[Optional[float], Optional[float]]:
    latitude = coerce_float(body.get("latitude"), "latitude")
    longitude = coerce_float(body.get("longitude"), "longitude")
    validate_coordinates(latitude, longitude)
    return latitude, longitude


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"success": False, "error": str(e), **e.payload}), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404, 405, ...).
        code = getattr(e, "code", None)
        if isinstance(code, int) and code < 500:
            return jsonify({"success": False, "error": getattr(e, "description", str(e))}), code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "Internal server error"}), 500
