from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
    ) -> LeaveRequest:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a pending request to approved/rejected; False if it was not pending."""

        raise NotImplementedError

    def find_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError
