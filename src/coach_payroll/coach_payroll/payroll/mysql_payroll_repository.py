from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..core.exceptions import DistributionError, PeriodAlreadyPaidError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import BreakdownLine, Paid, PayrollRow, Pending
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, coach_id, period_month, total_amount, student_count, breakdown,
    status, calculated_at, paid_at, paid_by, notes
"""


def _to_row(r: dict) -> PayrollRow:
    raw = r.get("breakdown")
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    lines = json.loads(raw) if raw else []

    if PayrollStatus(r["status"]) == PayrollStatus.PAID:
        state = Paid(paid_at=r["paid_at"], paid_by=r.get("paid_by") or "", notes=r.get("notes"))
    else:
        state = Pending()

    return PayrollRow(
        payroll_id=int(r["payroll_id"]),
        coach_id=int(r["coach_id"]),
        period_month=r["period_month"],
        total_amount=to_decimal(r["total_amount"]),
        student_count=int(r["student_count"]),
        breakdown=tuple(BreakdownLine.from_dict(line) for line in lines),
        state=state,
        calculated_at=r.get("calculated_at"),
    )


def _lock_period(cur, period_month: str) -> list[PayrollRow]:
    # Row locks keep a concurrent distribution from passing the paid check.
    cur.execute(
        f"SELECT {_COLUMNS} FROM coach_payrolls WHERE period_month=%s ORDER BY coach_id FOR UPDATE",
        (period_month,),
    )
    return [_to_row(r) for r in fetchall(cur)]


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_period(self, period_month: str) -> Sequence[PayrollRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM coach_payrolls WHERE period_month=%s ORDER BY coach_id",
                (period_month,),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def get(self, *, coach_id: int, period_month: str) -> Optional[PayrollRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM coach_payrolls WHERE coach_id=%s AND period_month=%s",
                (int(coach_id), period_month),
            )
            r = fetchone(cur)
            return _to_row(r) if r else None

    def save_pending_rows(self, period_month: str, rows: Sequence[PayrollRow]) -> list[PayrollRow]:
        with db_cursor(self._conn_factory, isolation_level="READ COMMITTED") as (_, cur):
            stored = {row.coach_id: row for row in _lock_period(cur, period_month)}

            for row in rows:
                existing = stored.get(row.coach_id)
                if existing is not None and existing.is_paid:
                    continue
                cur.execute(
                    """
                    INSERT INTO coach_payrolls(
                        coach_id, period_month, total_amount, student_count, breakdown,
                        status, calculated_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        total_amount=VALUES(total_amount),
                        student_count=VALUES(student_count),
                        breakdown=VALUES(breakdown),
                        calculated_at=VALUES(calculated_at)
                    """,
                    (
                        int(row.coach_id),
                        period_month,
                        row.total_amount,
                        int(row.student_count),
                        json.dumps(row.breakdown_json(), ensure_ascii=False),
                        PayrollStatus.PENDING.value,
                        row.calculated_at,
                    ),
                )

            computed = {row.coach_id for row in rows}
            for coach_id, existing in stored.items():
                if existing.is_paid or coach_id in computed:
                    continue
                cur.execute(
                    "DELETE FROM coach_payrolls WHERE coach_id=%s AND period_month=%s AND status=%s",
                    (coach_id, period_month, PayrollStatus.PENDING.value),
                )

            cur.execute(
                f"SELECT {_COLUMNS} FROM coach_payrolls WHERE period_month=%s ORDER BY coach_id",
                (period_month,),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def any_paid(self, period_month: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM coach_payrolls WHERE period_month=%s AND status=%s",
                (period_month, PayrollStatus.PAID.value),
            )
            r = fetchone(cur)
            return bool(r and int(r["n"]) > 0)

    def mark_period_paid(
        self,
        *,
        period_month: str,
        paid_at: datetime,
        paid_by: str,
        notes: Optional[str] = None,
    ) -> list[PayrollRow]:
        with db_cursor(self._conn_factory, isolation_level="READ COMMITTED") as (_, cur):
            rows = _lock_period(cur, period_month)
            if any(r.is_paid for r in rows):
                raise PeriodAlreadyPaidError(period_month)
            if not rows:
                return []

            cur.execute(
                """
                UPDATE coach_payrolls
                SET status=%s, paid_at=%s, paid_by=%s, notes=%s
                WHERE period_month=%s AND status=%s
                """,
                (
                    PayrollStatus.PAID.value,
                    paid_at,
                    paid_by,
                    notes,
                    period_month,
                    PayrollStatus.PENDING.value,
                ),
            )
            if cur.rowcount != len(rows):
                # raising here makes db_cursor roll back the whole batch
                raise DistributionError(
                    f"Distribution of {period_month} updated {cur.rowcount} of {len(rows)} rows"
                )
            return [r.mark_paid(paid_at=paid_at, paid_by=paid_by, notes=notes) for r in rows]

    def pending_total(self) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COALESCE(SUM(total_amount), 0) AS total FROM coach_payrolls WHERE status=%s",
                (PayrollStatus.PENDING.value,),
            )
            r = fetchone(cur)
            return to_decimal(r["total"] if r else 0)
