from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.coach_payroll.coach_payroll.coaches.model import Coach
from src.coach_payroll.coach_payroll.core.enums import PayrollStatus
from src.coach_payroll.coach_payroll.core.exceptions import (
    DistributionError,
    PeriodAlreadyPaidError,
    SettingsMissingError,
    ValidationError,
)
from src.coach_payroll.coach_payroll.payroll.service import PayrollService
from src.coach_payroll.coach_payroll.settings.model import Settings
from src.coach_payroll.coach_payroll.students.model import RenewalEvent, Student, TransferEvent
from tests.fakes import FakeCoachRepo, FakePayrollRepo, FakeSettingsRepo, FakeStudentRepo

SETTINGS = Settings(monthly_fee=Decimal("1100.00"), base_days=31, payment_day=28)
NOW = datetime(2025, 3, 1, 9, 0, 0)


def _student(student_id, coach_id, start=date(2025, 1, 15), end=date(2025, 4, 15)):
    return Student(
        student_id=student_id,
        full_name=f"Student {student_id}",
        package_start_date=start,
        package_end_date=end,
        current_coach_id=coach_id,
    )


def _build(settings=SETTINGS, transfers=(), renewals=()):
    coaches = FakeCoachRepo([Coach(1, "A"), Coach(2, "B"), Coach(3, "Ghost")])
    students = FakeStudentRepo([_student(1, 1), _student(2, 2)], transfers, renewals)
    payrolls = FakePayrollRepo()
    service = PayrollService(FakeSettingsRepo(settings), coaches, students, payrolls, clock=lambda: NOW)
    return service, payrolls, students


def test_calculate_creates_one_pending_row_per_coach_including_ghost():
    service, payrolls, _ = _build()

    rows = service.calculate_payroll("2025-02")

    assert [r.coach_id for r in rows] == [1, 2, 3]
    assert [r.total_amount for r in rows] == [Decimal("1100.00"), Decimal("1100.00"), Decimal("0.00")]
    assert all(r.status == PayrollStatus.PENDING for r in rows)
    assert all(r.calculated_at == NOW for r in rows)
    assert rows[2].student_count == 0


def test_recalculation_is_idempotent():
    service, payrolls, _ = _build()

    first = [r.to_dict() for r in service.calculate_payroll("2025-02")]
    second = [r.to_dict() for r in service.calculate_payroll("2025-02")]

    assert first == second
    assert len(payrolls.all_rows()) == 3


def test_recalculation_overwrites_pending_rows():
    service, payrolls, students = _build()
    service.calculate_payroll("2025-02")

    students.transfers.append(
        TransferEvent(student_id=1, old_coach_id=1, new_coach_id=2, transfer_date=date(2025, 2, 10))
    )
    rows = {r.coach_id: r for r in service.calculate_payroll("2025-02")}

    assert rows[1].total_amount == Decimal("425.81")
    assert rows[2].total_amount == Decimal("1774.19")
    assert len(payrolls.all_rows()) == 3


def test_gap_days_are_not_paid():
    renewal = RenewalEvent(
        student_id=1,
        payment_date=date(2025, 2, 10),
        previous_end_date=date(2025, 2, 1),
        new_end_date=date(2025, 3, 10),
        duration_months=1,
        amount=Decimal("1100.00"),
    )
    service, _, _ = _build(renewals=[renewal])

    rows = {r.coach_id: r for r in service.calculate_payroll("2025-02")}

    line = rows[1].breakdown[0]
    assert line.has_gaps is True
    assert line.days_worked == 22
    assert line.amount == Decimal("780.65")


def test_paid_rows_are_never_recalculated():
    service, payrolls, students = _build()
    service.calculate_payroll("2025-02")
    service.distribute_payroll("2025-02", paid_by="Admin")
    before = [r.to_dict() for r in payrolls.all_rows()]

    students.transfers.append(
        TransferEvent(student_id=1, old_coach_id=1, new_coach_id=2, transfer_date=date(2025, 2, 10))
    )
    rows = service.calculate_payroll("2025-02")

    assert [r.to_dict() for r in rows] == before
    assert all(r.is_paid for r in rows)


def test_distribute_marks_every_row_paid():
    service, payrolls, _ = _build()
    service.calculate_payroll("2025-02")

    result = service.distribute_payroll("2025-02", paid_by="Admin")

    assert result.success is True
    assert result.processed_count == 3
    assert result.total_amount == Decimal("2200.00")
    assert [d.coach_id for d in result.details] == [1, 2, 3]
    assert all(r.is_paid and r.state.paid_by == "Admin" and r.state.paid_at == NOW for r in payrolls.all_rows())
    assert service.is_period_locked("2025-02") is True


def test_second_distribution_is_a_conflict_and_changes_nothing():
    service, payrolls, _ = _build()
    service.calculate_payroll("2025-02")
    service.distribute_payroll("2025-02", paid_by="Admin")
    before = [r.to_dict() for r in payrolls.all_rows()]

    with pytest.raises(PeriodAlreadyPaidError) as exc:
        service.distribute_payroll("2025-02", paid_by="Someone else")

    assert exc.value.period_month == "2025-02"
    assert [r.to_dict() for r in payrolls.all_rows()] == before


def test_failed_distribution_rolls_back_every_row():
    service, payrolls, _ = _build()
    service.calculate_payroll("2025-02")
    payrolls.fail_on_coach_id = 2

    with pytest.raises(DistributionError):
        service.distribute_payroll("2025-02", paid_by="Admin")

    assert not any(r.is_paid for r in payrolls.all_rows())
    assert service.is_period_locked("2025-02") is False


def test_empty_period_distribution_succeeds_with_zero():
    service, _, _ = _build()

    result = service.distribute_payroll("2025-05", paid_by="Admin")

    assert result.success is True
    assert result.processed_count == 0
    assert result.total_amount == Decimal("0.00")
    assert result.details == ()


@pytest.mark.parametrize("period", ["2025-2", "02-2025", "2025-13", ""])
def test_invalid_period_is_rejected_before_any_work(period):
    service, payrolls, _ = _build()

    with pytest.raises(ValidationError):
        service.calculate_payroll(period)
    with pytest.raises(ValidationError):
        service.distribute_payroll(period, paid_by="Admin")
    with pytest.raises(ValidationError):
        service.is_period_locked(period)

    assert payrolls.save_calls == 0


def test_blank_payer_is_rejected():
    service, _, _ = _build()

    with pytest.raises(ValidationError):
        service.distribute_payroll("2025-02", paid_by="  ")


def test_missing_settings_is_fatal():
    service, payrolls, _ = _build(settings=None)

    with pytest.raises(SettingsMissingError):
        service.calculate_payroll("2025-02")
    assert payrolls.save_calls == 0


def test_pending_total_sums_unpaid_rows():
    service, _, _ = _build()
    service.calculate_payroll("2025-01")
    service.calculate_payroll("2025-02")
    service.distribute_payroll("2025-01", paid_by="Admin")

    assert service.pending_total() == Decimal("2200.00")


def test_estimate_current_cycle_does_not_persist():
    service, payrolls, _ = _build()

    cycle, rows = service.estimate_current_cycle(date(2025, 2, 10))

    assert cycle.period_month == "2025-02"
    assert [r.total_amount for r in rows] == [Decimal("1100.00"), Decimal("1100.00"), Decimal("0.00")]
    assert payrolls.save_calls == 0
    assert payrolls.all_rows() == []
