from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    optional_float,
    to_db_datetime,
)
from .model import AttendanceRecord, ClockOutPatch, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    id, user_id, work_date, clock_in, clock_out, status, work_hours, notes,
    clock_in_location, clock_in_lat, clock_in_lng,
    clock_out_location, clock_out_lat, clock_out_lng
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in=from_db_datetime(r["clock_in"]),
        clock_out=from_db_datetime(r.get("clock_out")),
        status=AttendanceStatus(r["status"]),
        work_hours=optional_float(r.get("work_hours")),
        notes=r.get("notes"),
        clock_in_location=r.get("clock_in_location"),
        clock_in_lat=optional_float(r.get("clock_in_lat")),
        clock_in_lng=optional_float(r.get("clock_in_lng")),
        clock_out_location=r.get("clock_out_location"),
        clock_out_lat=optional_float(r.get("clock_out_lat")),
        clock_out_lng=optional_float(r.get("clock_out_lng")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_by_id(self, cur, record_id: int) -> AttendanceRecord:
        cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (record_id,))
        row = fetchone(cur)
        if not row:
            raise StorageError(f"Attendance record {record_id} not found after write")
        return _to_record(row)

    def find_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def insert(self, record: NewAttendance) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    user_id, work_date, clock_in, status, notes,
                    clock_in_location, clock_in_lat, clock_in_lng
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.user_id,
                    record.work_date,
                    to_db_datetime(record.clock_in),
                    record.status.value,
                    record.notes,
                    record.clock_in_location,
                    record.clock_in_lat,
                    record.clock_in_lng,
                ),
            )
            return self._get_by_id(cur, int(cur.lastrowid))

    def update_clock_out(self, record_id: int, patch: ClockOutPatch) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            # clock_out IS NULL keeps a record from being closed twice.
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, status=%s, work_hours=%s, notes=%s,
                    clock_out_location=%s, clock_out_lat=%s, clock_out_lng=%s
                WHERE id=%s AND clock_out IS NULL
                """,
                (
                    to_db_datetime(patch.clock_out),
                    patch.status.value,
                    patch.work_hours,
                    patch.notes,
                    patch.clock_out_location,
                    patch.clock_out_lat,
                    patch.clock_out_lng,
                    int(record_id),
                ),
            )
            if cur.rowcount == 0:
                return None
            return self._get_by_id(cur, int(record_id))

    def query_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY work_date ASC, user_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_all_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE work_date=%s AND clock_out IS NULL
                ORDER BY clock_in ASC
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]
