from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.constants import MONEY_QUANTUM
from ..core.enums import PayrollStatus
from ..core.exceptions import PayrollLockedError


def round_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SubPeriod:
    start: date
    end: date
    days_worked: int

    def to_dict(self) -> dict:
        return {
            "start_date": format_iso_date(self.start),
            "end_date": format_iso_date(self.end),
            "days_worked": self.days_worked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SubPeriod":
        return cls(
            start=parse_iso_date(data["start_date"]),
            end=parse_iso_date(data["end_date"]),
            days_worked=int(data["days_worked"]),
        )


@dataclass(frozen=True)
class BreakdownLine:
    """One student's contribution to one coach's payroll for a period."""

    student_id: int
    amount: Decimal
    days_worked: int
    sub_periods: tuple[SubPeriod, ...] = ()
    has_gaps: bool = False
    student_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "amount": str(self.amount),
            "days_worked": self.days_worked,
            "periods": [p.to_dict() for p in self.sub_periods],
            "has_gaps": self.has_gaps,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BreakdownLine":
        return cls(
            student_id=int(data["student_id"]),
            student_name=data.get("student_name"),
            amount=Decimal(str(data["amount"])),
            days_worked=int(data["days_worked"]),
            sub_periods=tuple(SubPeriod.from_dict(p) for p in data.get("periods") or []),
            has_gaps=bool(data.get("has_gaps", False)),
        )


@dataclass(frozen=True)
class Pending:
    status = PayrollStatus.PENDING


@dataclass(frozen=True)
class Paid:
    paid_at: datetime
    paid_by: str
    notes: Optional[str] = None
    status = PayrollStatus.PAID


PayrollState = Union[Pending, Paid]


@dataclass(frozen=True)
class PayrollRow:
    """Stored payroll of one coach for one period.

    The state is a one-way latch: Pending -> Paid, never back.
    """

    coach_id: int
    period_month: str
    total_amount: Decimal
    student_count: int
    breakdown: tuple[BreakdownLine, ...] = ()
    state: PayrollState = field(default_factory=Pending)
    payroll_id: Optional[int] = None
    calculated_at: Optional[datetime] = None

    @property
    def status(self) -> PayrollStatus:
        return self.state.status

    @property
    def is_paid(self) -> bool:
        return isinstance(self.state, Paid)

    def mark_paid(self, *, paid_at: datetime, paid_by: str, notes: Optional[str] = None) -> "PayrollRow":
        if self.is_paid:
            raise PayrollLockedError(
                f"Payroll of coach {self.coach_id} for {self.period_month} is already paid"
            )
        return replace(self, state=Paid(paid_at=paid_at, paid_by=paid_by, notes=notes))

    def breakdown_json(self) -> list[dict]:
        return [line.to_dict() for line in self.breakdown]

    def to_dict(self) -> dict:
        paid = self.state if isinstance(self.state, Paid) else None
        return {
            "payroll_id": self.payroll_id,
            "coach_id": self.coach_id,
            "period_month": self.period_month,
            "total_amount": str(self.total_amount),
            "student_count": self.student_count,
            "breakdown": self.breakdown_json(),
            "status": self.status.value,
            "calculated_at": self.calculated_at.isoformat() if self.calculated_at else None,
            "paid_at": paid.paid_at.isoformat() if paid else None,
            "paid_by": paid.paid_by if paid else None,
        }


@dataclass(frozen=True)
class DistributionDetail:
    coach_id: int
    payroll_id: Optional[int]
    amount: Decimal
    status: PayrollStatus = PayrollStatus.PAID


@dataclass(frozen=True)
class DistributionResult:
    success: bool
    message: str
    processed_count: int
    total_amount: Decimal
    details: tuple[DistributionDetail, ...] = ()

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "processed_count": self.processed_count,
            "total_amount": str(self.total_amount),
            "details": [
                {
                    "coach_id": d.coach_id,
                    "payroll_id": d.payroll_id,
                    "amount": str(d.amount),
                    "status": d.status.value,
                }
                for d in self.details
            ],
        }
