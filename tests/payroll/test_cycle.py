from datetime import date

import pytest

from src.coach_payroll.coach_payroll.core.exceptions import ValidationError
from src.coach_payroll.coach_payroll.payroll.cycle import current_cycle, payment_date_for, resolve_cycle


def test_cycle_runs_from_day_after_previous_payment_day():
    cycle = resolve_cycle("2025-02", 28)

    assert cycle.period_month == "2025-02"
    assert cycle.start == date(2025, 1, 29)
    assert cycle.end == date(2025, 2, 28)
    assert cycle.days == 31


def test_january_rolls_back_to_previous_december():
    cycle = resolve_cycle("2025-01", 28)

    assert cycle.start == date(2024, 12, 29)
    assert cycle.end == date(2025, 1, 28)


@pytest.mark.parametrize(
    "period, payment_day, start, end",
    [
        ("2025-02", 31, date(2025, 2, 1), date(2025, 2, 28)),
        ("2025-03", 31, date(2025, 3, 1), date(2025, 3, 31)),
        ("2025-05", 31, date(2025, 5, 1), date(2025, 5, 31)),
        ("2024-03", 30, date(2024, 3, 1), date(2024, 3, 30)),
        ("2024-02", 30, date(2024, 1, 31), date(2024, 2, 29)),
    ],
)
def test_payment_day_is_clamped_to_month_length(period, payment_day, start, end):
    cycle = resolve_cycle(period, payment_day)

    assert (cycle.start, cycle.end) == (start, end)


def test_payment_date_for_clamps_day_31_in_april():
    assert payment_date_for(2025, 4, 31) == date(2025, 4, 30)


@pytest.mark.parametrize("period", ["2025-2", "2025-13", "2025-00", "25-02", "abc", "", "2025/02"])
def test_invalid_period_label_is_rejected(period):
    with pytest.raises(ValidationError):
        resolve_cycle(period, 28)


def test_invalid_payment_day_is_rejected():
    with pytest.raises(ValidationError):
        resolve_cycle("2025-02", 0)


@pytest.mark.parametrize(
    "today, period",
    [
        (date(2025, 2, 10), "2025-02"),
        (date(2025, 2, 28), "2025-02"),
        (date(2025, 3, 1), "2025-03"),
        (date(2025, 12, 29), "2026-01"),
    ],
)
def test_current_cycle_is_first_payment_date_on_or_after_today(today, period):
    cycle = current_cycle(today, 28)

    assert cycle.period_month == period
    assert cycle.contains(today)
