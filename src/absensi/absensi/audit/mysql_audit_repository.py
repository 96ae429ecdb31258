from __future__ import annotations

import json

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import AuditEntry
from .repository import AuditLogRepository


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, entry: AuditEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(user_id, action, target_table, target_id, description, old_data, new_data)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.user_id,
                    entry.action.value,
                    entry.target_table,
                    entry.target_id,
                    entry.description,
                    json.dumps(entry.old_data) if entry.old_data is not None else None,
                    json.dumps(entry.new_data) if entry.new_data is not None else None,
                ),
            )
