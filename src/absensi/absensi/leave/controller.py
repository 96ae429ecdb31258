from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import local_date, parse_iso_date
from ..common.http import current_role, current_user_id, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    def _body_date(body: dict, name: str):
        try:
            return parse_iso_date(str(body.get(name) or ""))
        except ValueError:
            raise ValidationError(f"Invalid {name}, expected YYYY-MM-DD")

    @app.route("/api/leave", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        leaves = service.list_my_requests(current_user_id())
        return jsonify({"success": True, "data": [leave.to_dict() for leave in leaves]})

    @app.route("/api/leave", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        body = json_body()
        leave = service.submit_leave(
            current_role=current_role(),
            user_id=current_user_id(),
            start_date=_body_date(body, "start_date"),
            end_date=_body_date(body, "end_date"),
            leave_type=str(body.get("leave_type") or ""),
            reason=str(body.get("reason") or ""),
        )
        return jsonify({"success": True, "data": leave.to_dict()}), 201

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def approve_leave(request_id: int):
        leave = service.approve_leave(
            current_role=current_role(),
            decided_by=current_user_id(),
            request_id=request_id,
            admin_note=str(json_body().get("admin_note") or ""),
        )
        return jsonify({"success": True, "data": leave.to_dict()})

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def reject_leave(request_id: int):
        leave = service.reject_leave(
            current_role=current_role(),
            decided_by=current_user_id(),
            request_id=request_id,
            admin_note=str(json_body().get("admin_note") or ""),
        )
        return jsonify({"success": True, "data": leave.to_dict()})

    @app.route("/api/leave/quota", methods=["GET"], endpoint="leave_quota")
    @login_required
    def leave_quota():
        year = request.args.get("year", type=int) or local_date(container.clock.now(), container.local_timezone).year
        quota = service.remaining_quota(current_user_id(), year)
        return jsonify(
            {
                "success": True,
                "year": quota.year,
                "max_days": quota.max_days,
                "used_days": quota.used_days,
                "remaining_days": quota.remaining_days,
            }
        )
