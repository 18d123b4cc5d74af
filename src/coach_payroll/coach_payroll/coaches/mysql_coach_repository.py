from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Coach
from .repository import CoachRepository


def _to_coach(r: dict) -> Coach:
    return Coach(
        coach_id=int(r["coach_id"]),
        full_name=r["full_name"],
        is_active=bool(r["is_active"]),
    )


class MySQLCoachRepository(CoachRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, coach_id: int) -> Optional[Coach]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT coach_id, full_name, is_active FROM coaches WHERE coach_id=%s",
                (int(coach_id),),
            )
            r = fetchone(cur)
            return _to_coach(r) if r else None

    def list_all_including_archived(self) -> Sequence[Coach]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT coach_id, full_name, is_active FROM coaches ORDER BY coach_id")
            return [_to_coach(r) for r in fetchall(cur)]
