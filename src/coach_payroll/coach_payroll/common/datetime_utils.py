from __future__ import annotations

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from ..core.constants import DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def day_before(value: date) -> date:
    return value - timedelta(days=1)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; 0 when the range is inverted."""
    if start > end:
        return 0
    return (end - start).days + 1


def add_months(value: date, months: int) -> date:
    """Calendar month arithmetic, clamped to the target month's last day."""
    return value + relativedelta(months=months)
