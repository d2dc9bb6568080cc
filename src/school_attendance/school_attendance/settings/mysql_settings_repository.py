from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import DEFAULT_SETTINGS, SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_all(self) -> dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_key, setting_value FROM app_settings")
            rows = fetchall(cur)

        settings = dict(DEFAULT_SETTINGS)
        settings.update({r["setting_key"]: r.get("setting_value") or "" for r in rows})
        return settings
