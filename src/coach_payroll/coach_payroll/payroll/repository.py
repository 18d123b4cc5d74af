from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import PayrollRow


class PayrollRepository(Protocol):
    def list_by_period(self, period_month: str) -> Sequence[PayrollRow]:
        raise NotImplementedError

    def get(self, *, coach_id: int, period_month: str) -> Optional[PayrollRow]:
        raise NotImplementedError

    def save_pending_rows(self, period_month: str, rows: Sequence[PayrollRow]) -> list[PayrollRow]:
        """Upsert freshly calculated rows of one period in a single transaction.

        Rows already paid are never touched and are returned as stored.
        Pending rows of coaches absent from ``rows`` are removed.
        """

        raise NotImplementedError

    def any_paid(self, period_month: str) -> bool:
        raise NotImplementedError

    def mark_period_paid(
        self,
        *,
        period_month: str,
        paid_at: datetime,
        paid_by: str,
        notes: Optional[str] = None,
    ) -> list[PayrollRow]:
        """Flip every pending row of the period to paid, all-or-nothing.

        Raises PeriodAlreadyPaidError when any row of the period is already
        paid, and DistributionError when the batch could not be applied.
        Returns the rows that were transitioned.
        """

        raise NotImplementedError

    def pending_total(self) -> Decimal:
        raise NotImplementedError
