from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional

from ..coaches.repository import CoachRepository
from ..common.datetime_utils import now_local
from ..common.logging_config import get_logger
from ..common.validators import require_non_empty, require_period_month
from ..core.exceptions import DistributionError, DomainError, PeriodAlreadyPaidError, SettingsMissingError
from ..settings.model import Settings
from ..settings.repository import SettingsRepository
from ..students.repository import StudentRepository
from .aggregator import CoachPayrollDraft, PayrollAggregator
from .calculator.base import PayrollCalculator
from .cycle import Cycle, current_cycle, resolve_cycle
from .model import DistributionDetail, DistributionResult, PayrollRow, round_money
from .repository import PayrollRepository

logger = get_logger("payroll.service")


class PayrollService:
    """Calculates, stores and distributes coach payroll per period."""

    def __init__(
        self,
        settings: SettingsRepository,
        coaches: CoachRepository,
        students: StudentRepository,
        payrolls: PayrollRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        aggregator: Optional[PayrollAggregator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._settings = settings
        self._coaches = coaches
        self._students = students
        self._payrolls = payrolls
        self._aggregator = aggregator or PayrollAggregator(calculator)
        self._clock = clock

    def _load_settings(self) -> Settings:
        settings = self._settings.get()
        if settings is None:
            raise SettingsMissingError(
                "System settings row is missing; run the database bootstrap before calculating payroll"
            )
        return settings

    def _aggregate(self, cycle: Cycle, settings: Settings) -> list[CoachPayrollDraft]:
        transfers = defaultdict(list)
        for event in self._students.list_transfers():
            transfers[event.student_id].append(event)
        renewals = defaultdict(list)
        for event in self._students.list_renewals():
            renewals[event.student_id].append(event)

        return self._aggregator.aggregate(
            cycle=cycle,
            settings=settings,
            coaches=self._coaches.list_all_including_archived(),
            students=self._students.list_all_including_archived(),
            transfers_by_student=transfers,
            renewals_by_student=renewals,
        )

    def calculate_payroll(self, period_month: str) -> list[PayrollRow]:
        period = require_period_month(period_month)
        settings = self._load_settings()
        cycle = resolve_cycle(period, settings.payment_day)

        calculated_at = self._clock()
        rows = [d.to_row(calculated_at=calculated_at) for d in self._aggregate(cycle, settings)]
        saved = self._payrolls.save_pending_rows(period, rows)

        paid = sum(1 for r in saved if r.is_paid)
        logger.info(
            "payroll %s calculated for cycle %s..%s: %d rows (%d already paid), total %s",
            period,
            cycle.start,
            cycle.end,
            len(saved),
            paid,
            sum((r.total_amount for r in saved), Decimal("0")),
        )
        return saved

    def distribute_payroll(self, period_month: str, paid_by: str, notes: Optional[str] = None) -> DistributionResult:
        period = require_period_month(period_month)
        paid_by = require_non_empty(paid_by, "Paid by")

        try:
            rows = self._payrolls.mark_period_paid(
                period_month=period,
                paid_at=self._clock(),
                paid_by=paid_by,
                notes=(notes or "").strip() or None,
            )
        except PeriodAlreadyPaidError:
            logger.warning("distribution of %s refused: period already paid", period)
            raise
        except DomainError:
            logger.exception("distribution of %s rolled back", period)
            raise
        except Exception as e:
            logger.exception("distribution of %s rolled back", period)
            raise DistributionError(f"Distribution of {period} failed and was rolled back: {e}") from e

        total = round_money(sum((r.total_amount for r in rows), Decimal("0")))
        if not rows:
            logger.info("distribution of %s: no pending rows", period)
            return DistributionResult(
                success=True,
                message=f"No pending payroll for {period}",
                processed_count=0,
                total_amount=total,
            )

        logger.info("distribution of %s by %s: %d rows, total %s", period, paid_by, len(rows), total)
        return DistributionResult(
            success=True,
            message=f"{len(rows)} coach payrolls for {period} marked as paid",
            processed_count=len(rows),
            total_amount=total,
            details=tuple(
                DistributionDetail(coach_id=r.coach_id, payroll_id=r.payroll_id, amount=r.total_amount, status=r.status)
                for r in rows
            ),
        )

    def is_period_locked(self, period_month: str) -> bool:
        return self._payrolls.any_paid(require_period_month(period_month))

    def list_period(self, period_month: str) -> list[PayrollRow]:
        return list(self._payrolls.list_by_period(require_period_month(period_month)))

    def pending_total(self) -> Decimal:
        return round_money(self._payrolls.pending_total())

    def estimate_current_cycle(self, today: Optional[date] = None) -> tuple[Cycle, list[PayrollRow]]:
        """Preview of the running cycle; nothing is stored."""
        settings = self._load_settings()
        cycle = current_cycle(today or self._clock().date(), settings.payment_day)
        return cycle, [d.to_row() for d in self._aggregate(cycle, settings)]
