from datetime import date
from decimal import Decimal

from src.coach_payroll.coach_payroll.payroll.active_periods import split_active_periods, work_window
from src.coach_payroll.coach_payroll.payroll.cycle import resolve_cycle
from src.coach_payroll.coach_payroll.students.model import RenewalEvent, Student

CYCLE = resolve_cycle("2025-02", 28)


def _student(start, end):
    return Student(
        student_id=1,
        full_name="S",
        package_start_date=start,
        package_end_date=end,
        current_coach_id=1,
    )


def _renewal(previous_end, paid, new_end):
    return RenewalEvent(
        student_id=1,
        payment_date=paid,
        previous_end_date=previous_end,
        new_end_date=new_end,
        duration_months=1,
        amount=Decimal("1100.00"),
    )


def _ranges(active):
    return [(p.start, p.end) for p in active.periods]


def test_window_is_package_clamped_to_cycle():
    window = work_window(_student(date(2025, 1, 15), date(2025, 4, 15)), CYCLE)

    assert (window.start, window.end) == (date(2025, 1, 29), date(2025, 2, 28))


def test_package_outside_cycle_contributes_nothing():
    active = split_active_periods(_student(date(2025, 1, 1), date(2025, 1, 20)), CYCLE, [])

    assert active.periods == []
    assert active.has_gaps is False


def test_no_gap_gives_single_period():
    active = split_active_periods(_student(date(2025, 1, 15), date(2025, 2, 15)), CYCLE, [])

    assert _ranges(active) == [(date(2025, 1, 29), date(2025, 2, 15))]
    assert active.has_gaps is False


def test_gap_days_are_excluded():
    student = _student(date(2024, 12, 1), date(2025, 3, 10))
    renewal = _renewal(date(2025, 2, 1), date(2025, 2, 10), date(2025, 3, 10))

    active = split_active_periods(student, CYCLE, [renewal])

    assert active.has_gaps is True
    assert _ranges(active) == [
        (date(2025, 1, 29), date(2025, 1, 31)),
        (date(2025, 2, 10), date(2025, 2, 28)),
    ]
    for p in active.periods:
        assert not (p.start < date(2025, 2, 10) and p.end >= date(2025, 2, 1))


def test_gap_starting_before_window_moves_cursor_only():
    student = _student(date(2024, 12, 1), date(2025, 3, 5))
    renewal = _renewal(date(2025, 1, 20), date(2025, 2, 5), date(2025, 3, 5))

    active = split_active_periods(student, CYCLE, [renewal])

    assert _ranges(active) == [(date(2025, 2, 5), date(2025, 2, 28))]


def test_two_gaps_in_one_cycle():
    student = _student(date(2024, 12, 1), date(2025, 3, 20))
    renewals = [
        _renewal(date(2025, 2, 12), date(2025, 2, 20), date(2025, 3, 20)),
        _renewal(date(2025, 2, 1), date(2025, 2, 5), date(2025, 2, 12)),
    ]

    active = split_active_periods(student, CYCLE, renewals)

    assert _ranges(active) == [
        (date(2025, 1, 29), date(2025, 1, 31)),
        (date(2025, 2, 5), date(2025, 2, 11)),
        (date(2025, 2, 20), date(2025, 2, 28)),
    ]


def test_renewals_without_gap_or_outside_cycle_are_ignored():
    student = _student(date(2024, 12, 1), date(2025, 4, 1))
    renewals = [
        # paid before expiry: no gap
        _renewal(date(2025, 3, 1), date(2025, 2, 20), date(2025, 4, 1)),
        # lapsed renewal paid in a previous cycle
        _renewal(date(2025, 1, 2), date(2025, 1, 10), date(2025, 3, 1)),
    ]

    active = split_active_periods(student, CYCLE, renewals)

    assert _ranges(active) == [(date(2025, 1, 29), date(2025, 2, 28))]
    assert active.has_gaps is False


def test_gap_renewed_in_next_cycle_still_excludes_lapsed_days():
    # lapsed 2025-01-20, renewed 2025-02-05; January cycle calculated after the renewal
    january = resolve_cycle("2025-01", 28)
    student = _student(date(2024, 12, 1), date(2025, 3, 5))
    renewal = _renewal(date(2025, 1, 20), date(2025, 2, 5), date(2025, 3, 5))

    active = split_active_periods(student, january, [renewal])

    assert active.has_gaps is True
    assert _ranges(active) == [(date(2024, 12, 29), date(2025, 1, 19))]
    assert sum((p.end - p.start).days + 1 for p in active.periods) == 22


def test_gap_ending_on_cycle_start_does_not_touch_cycle():
    student = _student(date(2024, 12, 1), date(2025, 3, 29))
    renewal = _renewal(date(2025, 1, 10), date(2025, 1, 29), date(2025, 3, 29))

    active = split_active_periods(student, CYCLE, [renewal])

    assert _ranges(active) == [(date(2025, 1, 29), date(2025, 2, 28))]
    assert active.has_gaps is False
