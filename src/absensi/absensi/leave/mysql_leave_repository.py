from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    id, user_id, start_date, end_date, leave_type, reason, status,
    created_at, decided_by, decided_at, admin_note
"""


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        leave_type=LeaveType(r["leave_type"]),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        created_at=from_db_datetime(r.get("created_at")),
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=from_db_datetime(r.get("decided_at")),
        admin_note=r.get("admin_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, leave_type, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, leave_type.value, reason, RequestStatus.PENDING.value),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (request_id,))
            row = fetchone(cur)
            if not row:
                raise StorageError(f"Leave request {request_id} not found after insert")
            return _to_leave(row)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=UTC_TIMESTAMP(), admin_note=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    admin_note,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def find_approved_overlapping(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["status=%s", "start_date <= %s", "end_date >= %s"]
        params: list[object] = [RequestStatus.APPROVED.value, end_date, start_date]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if leave_type is not None:
            clauses.append("leave_type=%s")
            params.append(leave_type.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY start_date ASC
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int, *, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_leave(r) for r in fetchall(cur)]
