"""Payment cycle windows.

A period label ``YYYY-MM`` names the cycle that ends on that month's payment
day. The cycle starts the day after the previous month's payment day. Both
payment days are clamped to the length of their month, so a configured day
of 31 becomes Feb 28/29, Apr 30, and so on.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta

from ..common.datetime_utils import inclusive_days
from ..common.validators import parse_period_month, require_int_range


@dataclass(frozen=True)
class Cycle:
    period_month: str
    start: date
    end: date

    @property
    def days(self) -> int:
        return inclusive_days(self.start, self.end)

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end


def payment_date_for(year: int, month: int, payment_day: int) -> date:
    last_day = monthrange(year, month)[1]
    return date(year, month, min(int(payment_day), last_day))


def _previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def resolve_cycle(period_month: str, payment_day: int) -> Cycle:
    year, month = parse_period_month(period_month)
    payment_day = require_int_range(payment_day, "Payment day", 1, 31)

    end = payment_date_for(year, month, payment_day)
    prev_year, prev_month = _previous_month(year, month)
    start = payment_date_for(prev_year, prev_month, payment_day) + timedelta(days=1)
    return Cycle(period_month=f"{year:04d}-{month:02d}", start=start, end=end)


def current_cycle(today: date, payment_day: int) -> Cycle:
    """Cycle currently accruing: the one whose payment date is the first on or after today."""
    payment_day = require_int_range(payment_day, "Payment day", 1, 31)
    year, month = today.year, today.month
    if payment_date_for(year, month, payment_day) < today:
        year, month = _next_month(year, month)
    return resolve_cycle(f"{year:04d}-{month:02d}", payment_day)
