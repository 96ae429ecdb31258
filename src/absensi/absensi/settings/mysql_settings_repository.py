from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SystemSettings
from .repository import SettingsProvider


class MySQLSettingsRepository(SettingsProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> SystemSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT `key`, `value` FROM system_settings")
            rows = fetchall(cur)
        return SystemSettings.from_mapping({r["key"]: r["value"] for r in rows})
