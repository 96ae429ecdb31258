from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository


def _to_profile(row: Dict[str, Any]) -> Profile:
    return Profile(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        role=Role(row["role"]),
        department=row.get("department"),
        join_date=row.get("join_date"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, department, join_date, is_active
                FROM profiles
                WHERE user_id=%s
                """,
                (user_id,),
            )
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_active(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, department, join_date, is_active
                FROM profiles
                WHERE is_active=1 AND role=%s
                ORDER BY full_name ASC
                """,
                (Role.EMPLOYEE.value,),
            )
            return [_to_profile(r) for r in fetchall(cur)]
