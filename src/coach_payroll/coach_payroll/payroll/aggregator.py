from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ..coaches.model import Coach
from ..settings.model import Settings
from ..students.model import RenewalEvent, Student, TransferEvent
from .active_periods import split_active_periods
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .cycle import Cycle
from .model import BreakdownLine, PayrollRow, SubPeriod, round_money
from .timeline import build_ownership_timeline, sort_transfers


@dataclass
class _StudentLine:
    student_id: int
    student_name: Optional[str]
    has_gaps: bool
    days_worked: int = 0
    amount: Decimal = Decimal("0")
    sub_periods: list[SubPeriod] = field(default_factory=list)

    def to_breakdown(self) -> BreakdownLine:
        return BreakdownLine(
            student_id=self.student_id,
            student_name=self.student_name,
            amount=round_money(self.amount),
            days_worked=self.days_worked,
            sub_periods=tuple(sorted(self.sub_periods, key=lambda p: p.start)),
            has_gaps=self.has_gaps,
        )


@dataclass
class CoachPayrollDraft:
    """Unrounded per-coach accumulation for one cycle."""

    coach_id: int
    period_month: str
    lines: dict[int, _StudentLine] = field(default_factory=dict)
    total: Decimal = Decimal("0")

    @property
    def student_count(self) -> int:
        return len(self.lines)

    def add(self, student: Student, *, has_gaps: bool, sub_period: SubPeriod, amount: Decimal) -> None:
        line = self.lines.get(student.student_id)
        if line is None:
            line = _StudentLine(student_id=student.student_id, student_name=student.full_name, has_gaps=has_gaps)
            self.lines[student.student_id] = line
        line.days_worked += sub_period.days_worked
        line.amount += amount
        line.sub_periods.append(sub_period)
        self.total += amount

    def to_row(self, *, calculated_at: Optional[datetime] = None) -> PayrollRow:
        breakdown = tuple(self.lines[sid].to_breakdown() for sid in sorted(self.lines))
        return PayrollRow(
            coach_id=self.coach_id,
            period_month=self.period_month,
            total_amount=round_money(self.total),
            student_count=self.student_count,
            breakdown=breakdown,
            calculated_at=calculated_at,
        )


class PayrollAggregator:
    """Combines gap splitting and ownership splitting per student, then sums per coach."""

    def __init__(self, calculator: Optional[PayrollCalculator] = None):
        self._calculator = calculator or StandardPayrollCalculator()

    def aggregate(
        self,
        *,
        cycle: Cycle,
        settings: Settings,
        coaches: Iterable[Coach],
        students: Iterable[Student],
        transfers_by_student: Mapping[int, Sequence[TransferEvent]],
        renewals_by_student: Mapping[int, Sequence[RenewalEvent]],
    ) -> list[CoachPayrollDraft]:
        drafts: dict[int, CoachPayrollDraft] = {}

        # Every active coach gets a row, even with zero students.
        for coach in coaches:
            if coach.is_active:
                drafts[coach.coach_id] = CoachPayrollDraft(coach.coach_id, cycle.period_month)

        for student in sorted(students, key=lambda s: s.student_id):
            active = split_active_periods(student, cycle, renewals_by_student.get(student.student_id, ()))
            if not active.periods:
                continue

            transfers = sort_transfers(transfers_by_student.get(student.student_id, ()))
            for period in active.periods:
                for interval in build_ownership_timeline(
                    period.start, period.end, student.current_coach_id, transfers
                ):
                    days = self._calculator.days_worked(interval.start, interval.end)
                    draft = drafts.get(interval.coach_id)
                    if draft is None:
                        # archived coach that still owned the student during this cycle
                        draft = CoachPayrollDraft(interval.coach_id, cycle.period_month)
                        drafts[interval.coach_id] = draft
                    draft.add(
                        student,
                        has_gaps=active.has_gaps,
                        sub_period=SubPeriod(interval.start, interval.end, days),
                        amount=self._calculator.amount_for(settings, days),
                    )

        return [drafts[cid] for cid in sorted(drafts)]
