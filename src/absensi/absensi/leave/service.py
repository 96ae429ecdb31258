from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ..audit.model import AuditEntry
from ..audit.service import AuditLogger
from ..common.validators import require_non_empty
from ..core.enums import AuditAction, LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..settings.repository import SettingsProvider
from .model import LeaveRequest
from .repository import LeaveRepository

_DECIDER_ROLES = {Role.ADMIN, Role.MANAGER}
_REQUESTER_ROLES = {Role.EMPLOYEE, Role.MANAGER}


@dataclass(frozen=True)
class LeaveQuota:
    year: int
    max_days: int
    used_days: int

    @property
    def remaining_days(self) -> int:
        return max(0, self.max_days - self.used_days)


def days_within_year(leave: LeaveRequest, year: int) -> int:
    start = max(leave.start_date, date(year, 1, 1))
    end = min(leave.end_date, date(year, 12, 31))
    return max(0, (end - start).days + 1)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, settings: SettingsProvider, audit: AuditLogger):
        self._leaves = leaves
        self._settings = settings
        self._audit = audit

    @staticmethod
    def _parse_leave_type(value: str) -> LeaveType:
        try:
            return LeaveType((value or "").strip().lower())
        except ValueError:
            raise ValidationError("Unknown leave type")

    def remaining_quota(self, user_id: int, year: int) -> LeaveQuota:
        """Annual leave (cuti) quota; sick leave and permission do not consume it."""

        approved = self._leaves.find_approved_overlapping(
            start_date=date(year, 1, 1),
            end_date=date(year, 12, 31),
            user_id=int(user_id),
            leave_type=LeaveType.ANNUAL,
        )
        used = sum(days_within_year(leave, year) for leave in approved)
        return LeaveQuota(year=year, max_days=self._settings.get().max_leave_days, used_days=used)

    def submit_leave(
        self,
        *,
        current_role: Role,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: str,
    ) -> LeaveRequest:
        if current_role not in _REQUESTER_ROLES:
            raise AuthorizationError("You are not allowed to submit leave requests")

        if end_date < start_date:
            raise ValidationError("End date must be on or after the start date")

        kind = self._parse_leave_type(leave_type)
        reason = require_non_empty(reason, "Reason")

        if kind == LeaveType.ANNUAL:
            quota = self.remaining_quota(user_id, start_date.year)
            requested = (end_date - start_date).days + 1
            if requested > quota.remaining_days:
                raise ValidationError(
                    f"Not enough annual leave: requested {requested} days, {quota.remaining_days} remaining"
                )

        leave = self._leaves.create(
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            leave_type=kind,
            reason=reason,
        )
        self._audit.record(
            AuditEntry(
                user_id=int(user_id),
                action=AuditAction.LEAVE_SUBMIT,
                target_table="leave_requests",
                target_id=leave.request_id,
                new_data=leave.to_dict(),
                description=f"Leave request {kind.value} {start_date.isoformat()}..{end_date.isoformat()}",
            )
        )
        return leave

    def _decide(
        self,
        *,
        current_role: Role,
        decided_by: int,
        request_id: int,
        status: RequestStatus,
        admin_note: str,
    ) -> LeaveRequest:
        if current_role not in _DECIDER_ROLES:
            raise AuthorizationError("You are not allowed to review leave requests")

        leave = self._leaves.get_by_id(int(request_id))
        if not leave:
            raise ValidationError("Leave request not found")
        if leave.status != RequestStatus.PENDING:
            raise ValidationError("Leave request has already been processed")

        ok = self._leaves.decide(
            request_id=int(request_id),
            status=status,
            decided_by=int(decided_by),
            admin_note=(admin_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Leave request has already been processed")

        decided = self._leaves.get_by_id(int(request_id)) or leave
        action = AuditAction.LEAVE_APPROVE if status == RequestStatus.APPROVED else AuditAction.LEAVE_REJECT
        self._audit.record(
            AuditEntry(
                user_id=int(decided_by),
                action=action,
                target_table="leave_requests",
                target_id=leave.request_id,
                old_data=leave.to_dict(),
                new_data=decided.to_dict(),
                description=f"Leave request {leave.request_id} {status.value}",
            )
        )
        return decided

    def approve_leave(self, *, current_role: Role, decided_by: int, request_id: int, admin_note: str = "") -> LeaveRequest:
        return self._decide(
            current_role=current_role,
            decided_by=decided_by,
            request_id=request_id,
            status=RequestStatus.APPROVED,
            admin_note=admin_note,
        )

    def reject_leave(self, *, current_role: Role, decided_by: int, request_id: int, admin_note: str = "") -> LeaveRequest:
        return self._decide(
            current_role=current_role,
            decided_by=decided_by,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            admin_note=admin_note,
        )

    def list_my_requests(self, user_id: int, *, limit: int = 200) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id), limit=limit)
