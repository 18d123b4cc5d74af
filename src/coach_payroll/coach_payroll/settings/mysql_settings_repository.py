from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_decimal
from .model import Settings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[Settings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT coach_monthly_fee, base_days, global_payment_day, updated_at
                FROM system_settings
                ORDER BY settings_id
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return Settings(
                monthly_fee=to_decimal(r["coach_monthly_fee"]),
                base_days=int(r["base_days"]),
                payment_day=int(r["global_payment_day"]),
                updated_at=r.get("updated_at"),
            )
