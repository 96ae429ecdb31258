from __future__ import annotations

from typing import Optional

import click
from flask import Flask, jsonify, request

from ..common.datetime_utils import local_date
from ..common.http import (
    coordinates_from,
    current_role,
    current_user_id,
    date_arg,
    json_body,
    login_required,
    roles_required,
)
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import ClockLocation
from .sweeper import SweepResult

_REVIEWER_ROLES = (Role.ADMIN, Role.MANAGER)


def _sweep_payload(result: SweepResult) -> dict:
    return {
        "success": True,
        "message": result.message,
        "processed_count": result.processed_count,
        "failed_ids": list(result.failed_ids),
        "skipped_reason": result.skipped_reason,
        "timestamp": result.timestamp.isoformat() if result.timestamp else None,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _today():
        return local_date(container.clock.now(), container.local_timezone)

    def _location() -> ClockLocation:
        body = json_body()
        latitude, longitude = coordinates_from(body)
        label: Optional[str] = (body.get("location") or "").strip() or None
        return ClockLocation(label=label, latitude=latitude, longitude=longitude)

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        result = service.clock_in(current_user_id(), _location())
        return (
            jsonify(
                {
                    "success": True,
                    "data": result.record.to_dict(),
                    "server_time": result.server_time.isoformat(),
                    "server_date": result.server_date.isoformat(),
                    "status_assigned": result.status_assigned.value,
                    "message": result.message,
                }
            ),
            201,
        )

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        result = service.clock_out(current_user_id(), _location())
        return jsonify(
            {
                "success": True,
                "data": result.record.to_dict(),
                "server_time": result.server_time.isoformat(),
                "server_date": result.server_date.isoformat(),
                "work_hours": result.work_hours,
                "is_early_leave": result.is_early_leave,
                "final_status": result.final_status.value,
                "message": result.message,
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        record = service.get_today_record(current_user_id())
        return jsonify({"success": True, "data": record.to_dict() if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        try:
            limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
        except ValueError:
            raise ValidationError("Invalid limit")
        records = service.get_history(current_user_id(), limit=max(1, min(limit, 366)))
        return jsonify({"success": True, "data": [r.to_dict() for r in records]})

    @app.route("/api/attendance/period", methods=["GET"], endpoint="attendance_period")
    @login_required
    def attendance_period():
        today = _today()
        start = date_arg("start", today.replace(day=1))
        end = date_arg("end", today)

        user_id = current_user_id()
        requested = request.args.get("user_id", type=int)
        if requested is not None and requested != user_id:
            if current_role() not in _REVIEWER_ROLES:
                raise AuthorizationError("You can only view your own attendance")
            user_id = requested

        report = container.period_service.period(user_id=user_id, start=start, end=end, today=today)
        return jsonify({"success": True, "data": report.to_dict()})

    @app.route("/api/attendance/overview", methods=["GET"], endpoint="attendance_overview")
    @roles_required(*_REVIEWER_ROLES)
    def attendance_overview():
        today = _today()
        work_date = date_arg("date", today)
        rows = container.period_service.daily_overview(
            work_date=work_date,
            today=today,
            department=request.args.get("department") or None,
        )
        return jsonify({"success": True, "date": work_date.isoformat(), "data": [r.to_dict() for r in rows]})

    @app.route("/api/admin/auto-clock-out", methods=["POST"], endpoint="admin_auto_clock_out")
    @roles_required(Role.ADMIN)
    def admin_auto_clock_out():
        return jsonify(_sweep_payload(container.sweeper.sweep()))

    @app.cli.command("auto-clock-out")
    def auto_clock_out_command():
        """Close today's open attendance records after the configured cutoff."""
        result = container.sweeper.sweep()
        click.echo(result.message)
        for record_id in result.failed_ids:
            click.echo(f"failed: attendance id={record_id}", err=True)
