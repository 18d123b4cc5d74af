from datetime import date

from src.coach_payroll.coach_payroll.payroll.timeline import build_ownership_timeline, owner_at
from src.coach_payroll.coach_payroll.students.model import TransferEvent

START = date(2025, 1, 29)
END = date(2025, 2, 28)


def _transfer(old, new, d):
    return TransferEvent(student_id=1, old_coach_id=old, new_coach_id=new, transfer_date=d)


def _spans(intervals):
    return [(i.coach_id, i.start, i.end, i.days) for i in intervals]


def test_no_transfers_gives_whole_window_to_current_coach():
    intervals = build_ownership_timeline(START, END, 7, [])

    assert _spans(intervals) == [(7, START, END, 31)]


def test_mid_cycle_transfer_splits_at_transfer_date():
    intervals = build_ownership_timeline(START, END, 2, [_transfer(1, 2, date(2025, 2, 10))])

    assert _spans(intervals) == [
        (1, date(2025, 1, 29), date(2025, 2, 9), 12),
        (2, date(2025, 2, 10), date(2025, 2, 28), 19),
    ]


def test_owner_comes_from_log_not_current_coach():
    # Transfer happened after the window; the student still belonged to coach 1.
    transfers = [_transfer(1, 2, date(2025, 3, 5))]

    assert owner_at(START, 2, transfers) == 1
    assert _spans(build_ownership_timeline(START, END, 2, transfers)) == [(1, START, END, 31)]


def test_transfer_before_window_sets_owner():
    transfers = [_transfer(1, 2, date(2024, 12, 1)), _transfer(2, 3, date(2025, 1, 5))]

    assert owner_at(START, 3, transfers) == 3


def test_transfer_on_first_day_produces_no_empty_interval():
    intervals = build_ownership_timeline(START, END, 2, [_transfer(1, 2, START)])

    assert _spans(intervals) == [(2, START, END, 31)]


def test_same_day_double_transfer_skips_inverted_range():
    transfers = [_transfer(1, 2, date(2025, 2, 10)), _transfer(2, 3, date(2025, 2, 10))]

    intervals = build_ownership_timeline(START, END, 3, transfers)

    assert _spans(intervals) == [
        (1, date(2025, 1, 29), date(2025, 2, 9), 12),
        (3, date(2025, 2, 10), date(2025, 2, 28), 19),
    ]


def test_unsorted_input_is_ordered_by_date():
    transfers = [_transfer(2, 1, date(2025, 2, 20)), _transfer(1, 2, date(2025, 2, 5))]

    intervals = build_ownership_timeline(START, END, 1, transfers)

    assert [i.coach_id for i in intervals] == [1, 2, 1]
    assert sum(i.days for i in intervals) == 31


def test_intervals_are_contiguous_and_cover_window():
    transfers = [
        _transfer(1, 2, date(2025, 2, 1)),
        _transfer(2, 3, date(2025, 2, 14)),
        _transfer(3, 1, date(2025, 2, 27)),
    ]

    intervals = build_ownership_timeline(START, END, 1, transfers)

    assert intervals[0].start == START
    assert intervals[-1].end == END
    for prev, nxt in zip(intervals, intervals[1:]):
        assert (nxt.start - prev.end).days == 1


def test_inverted_window_is_empty():
    assert build_ownership_timeline(END, START, 1, []) == []
