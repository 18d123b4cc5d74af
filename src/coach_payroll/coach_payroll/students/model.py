from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_iso_date


@dataclass(frozen=True)
class Student:
    """Domain entity: a student and the bounds of their paid package.

    ``current_coach_id`` is a cached projection of the transfer log; payroll
    never trusts it for past periods.
    """

    student_id: int
    full_name: str
    package_start_date: date
    package_end_date: date
    current_coach_id: int
    package_months: int = 1
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "package_start_date": format_iso_date(self.package_start_date),
            "package_end_date": format_iso_date(self.package_end_date),
            "current_coach_id": self.current_coach_id,
            "package_months": self.package_months,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class TransferEvent:
    """Append-only log entry: new coach owns the student from transfer_date (inclusive)."""

    student_id: int
    old_coach_id: int
    new_coach_id: int
    transfer_date: date
    transfer_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "transfer_id": self.transfer_id,
            "student_id": self.student_id,
            "old_coach_id": self.old_coach_id,
            "new_coach_id": self.new_coach_id,
            "transfer_date": format_iso_date(self.transfer_date),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class RenewalEvent:
    """Append-only log entry for a package payment/renewal.

    A gap exists when the package lapsed before it was renewed
    (previous_end_date < payment_date).
    """

    student_id: int
    payment_date: date
    previous_end_date: Optional[date]
    new_end_date: date
    duration_months: int
    amount: Decimal
    renewal_id: Optional[int] = None
    notes: Optional[str] = None
    recorded_by: Optional[str] = None

    @property
    def has_gap(self) -> bool:
        return self.previous_end_date is not None and self.previous_end_date < self.payment_date

    def to_dict(self) -> dict:
        return {
            "renewal_id": self.renewal_id,
            "student_id": self.student_id,
            "payment_date": format_iso_date(self.payment_date),
            "previous_end_date": format_iso_date(self.previous_end_date) if self.previous_end_date else None,
            "new_end_date": format_iso_date(self.new_end_date),
            "package_duration_months": self.duration_months,
            "amount": str(self.amount),
            "has_gap": self.has_gap,
            "notes": self.notes,
            "recorded_by": self.recorded_by,
        }
