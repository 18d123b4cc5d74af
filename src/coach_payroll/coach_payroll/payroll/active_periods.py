"""Billable sub-periods of a student's package inside one cycle.

A renewal paid after the package had already expired leaves a gap
``[previous_end_date, payment_date)`` that no coach is paid for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import day_before
from ..students.model import RenewalEvent, Student
from .cycle import Cycle


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class ActivePeriods:
    periods: list[DateRange] = field(default_factory=list)
    has_gaps: bool = False


def work_window(student: Student, cycle: Cycle) -> Optional[DateRange]:
    """Intersection of the package with the cycle, or None if they do not overlap."""
    start = max(student.package_start_date, cycle.start)
    end = min(student.package_end_date, cycle.end)
    if start > end:
        return None
    return DateRange(start, end)


def qualifying_gaps(renewals: Iterable[RenewalEvent], cycle: Cycle) -> list[RenewalEvent]:
    """Lapsed renewals whose gap [previous_end_date, payment_date) overlaps the cycle.

    A package that lapses in one cycle and is renewed in a later one still
    loses the lapsed days of the earlier cycle.
    """
    gaps = [
        r
        for r in renewals
        if r.has_gap and r.previous_end_date <= cycle.end and r.payment_date > cycle.start
    ]
    return sorted(gaps, key=lambda r: r.payment_date)


def split_active_periods(student: Student, cycle: Cycle, renewals: Iterable[RenewalEvent]) -> ActivePeriods:
    window = work_window(student, cycle)
    if window is None:
        return ActivePeriods()

    gaps = qualifying_gaps(renewals, cycle)
    if not gaps:
        return ActivePeriods(periods=[window], has_gaps=False)

    periods: list[DateRange] = []
    cursor = window.start
    for renewal in gaps:
        gap_start = renewal.previous_end_date
        gap_end = renewal.payment_date
        if cursor < gap_start:
            end = min(day_before(gap_start), window.end)
            if cursor <= end:
                periods.append(DateRange(cursor, end))
        cursor = max(cursor, gap_end)

    if cursor <= window.end:
        periods.append(DateRange(cursor, window.end))

    return ActivePeriods(periods=periods, has_gaps=True)
