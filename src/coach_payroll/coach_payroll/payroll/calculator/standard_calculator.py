from __future__ import annotations

from datetime import date
from decimal import Decimal

from ...common.datetime_utils import inclusive_days
from ...settings.model import Settings
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: monthly_fee / base_days per student-day, both ends inclusive."""

    def daily_rate(self, settings: Settings) -> Decimal:
        return Decimal(settings.monthly_fee) / Decimal(int(settings.base_days))

    def days_worked(self, start: date, end: date) -> int:
        return inclusive_days(start, end)
