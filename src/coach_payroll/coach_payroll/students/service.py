from __future__ import annotations

from datetime import date
from typing import Optional, Union

from ..coaches.repository import CoachRepository
from ..common.datetime_utils import add_months, today_local
from ..common.logging_config import get_logger
from ..common.validators import require_int_range, require_positive_amount
from ..core.constants import DEFAULT_PAYER, MAX_PACKAGE_MONTHS, MIN_PACKAGE_MONTHS
from ..core.enums import RenewalMode
from ..core.exceptions import NotFoundError, ValidationError
from .model import RenewalEvent, Student, TransferEvent
from .repository import StudentRepository

logger = get_logger("students.service")


class StudentLifecycleService:
    """Use cases that append to the transfer and renewal logs read by payroll."""

    def __init__(self, students: StudentRepository, coaches: CoachRepository):
        self._students = students
        self._coaches = coaches

    def _require_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def transfer_coach(
        self,
        *,
        student_id: int,
        new_coach_id: int,
        transfer_date: date,
        notes: Optional[str] = None,
    ) -> TransferEvent:
        student = self._require_student(student_id)

        coach = self._coaches.get_by_id(int(new_coach_id))
        if not coach:
            raise NotFoundError(f"Coach {new_coach_id} not found")
        if not coach.is_active:
            raise ValidationError("Cannot transfer a student to an archived coach")
        if coach.coach_id == student.current_coach_id:
            raise ValidationError("Student is already assigned to this coach")

        event = TransferEvent(
            student_id=student.student_id,
            old_coach_id=student.current_coach_id,
            new_coach_id=coach.coach_id,
            transfer_date=transfer_date,
            notes=(notes or "").strip() or None,
        )
        transfer_id = self._students.record_transfer(event)
        logger.info(
            "student %s transferred from coach %s to coach %s on %s",
            student.student_id,
            event.old_coach_id,
            event.new_coach_id,
            transfer_date,
        )
        return TransferEvent(
            transfer_id=transfer_id,
            student_id=event.student_id,
            old_coach_id=event.old_coach_id,
            new_coach_id=event.new_coach_id,
            transfer_date=event.transfer_date,
            notes=event.notes,
        )

    def renew_package(
        self,
        *,
        student_id: int,
        months: int,
        amount,
        payment_date: Optional[date] = None,
        today: Optional[date] = None,
        notes: Optional[str] = None,
        recorded_by: str = DEFAULT_PAYER,
    ) -> RenewalEvent:
        student = self._require_student(student_id)
        months = require_int_range(months, "Package months", MIN_PACKAGE_MONTHS, MAX_PACKAGE_MONTHS)
        price = require_positive_amount(amount, "Amount")

        today = today or today_local()
        payment_date = payment_date or today

        # An expired package restarts from today; a running one is extended.
        base = today if student.package_end_date < today else student.package_end_date
        event = RenewalEvent(
            student_id=student.student_id,
            payment_date=payment_date,
            previous_end_date=student.package_end_date,
            new_end_date=add_months(base, months),
            duration_months=months,
            amount=price,
            notes=(notes or "").strip() or None,
            recorded_by=recorded_by,
        )
        renewal_id = self._students.record_renewal(event, package_months=months)
        if event.has_gap:
            logger.info(
                "student %s renewed after lapse: gap %s..%s is not billable",
                student.student_id,
                event.previous_end_date,
                event.payment_date,
            )
        else:
            logger.info("student %s renewed until %s", student.student_id, event.new_end_date)

        return RenewalEvent(
            renewal_id=renewal_id,
            student_id=event.student_id,
            payment_date=event.payment_date,
            previous_end_date=event.previous_end_date,
            new_end_date=event.new_end_date,
            duration_months=event.duration_months,
            amount=event.amount,
            notes=event.notes,
            recorded_by=event.recorded_by,
        )

    def archive_student(self, *, student_id: int, leave_date: date) -> Student:
        student = self._require_student(student_id)
        if leave_date < student.package_start_date:
            raise ValidationError("Leave date cannot be before the package start date")

        if not self._students.archive(student_id=student.student_id, leave_date=leave_date):
            raise ValidationError("Archiving the student failed")
        logger.info("student %s archived, package ends %s", student.student_id, leave_date)
        return self._require_student(student.student_id)

    def smart_renew(
        self,
        *,
        student_id: int,
        mode: Union[RenewalMode, str],
        amount=None,
        months: Optional[int] = None,
        payment_date: Optional[date] = None,
        today: Optional[date] = None,
        notes: Optional[str] = None,
        recorded_by: str = DEFAULT_PAYER,
    ) -> RenewalEvent:
        """Renew with duration and price taken from the last payment where the mode says so."""
        try:
            mode = RenewalMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown renewal mode {mode!r}")

        student = self._require_student(student_id)
        last = self.last_payment(student.student_id)

        if mode == RenewalMode.QUICK:
            if last is None:
                raise ValidationError(
                    "No previous payment found; use price_update or package_switch instead"
                )
            amount, months = last.amount, last.duration_months
        elif mode == RenewalMode.PRICE_UPDATE:
            months = last.duration_months if last else student.package_months
        elif months is None:
            raise ValidationError("Package months is required for a package switch")

        event = self.renew_package(
            student_id=student.student_id,
            months=months,
            amount=amount,
            payment_date=payment_date,
            today=today,
            notes=notes,
            recorded_by=recorded_by,
        )
        logger.info("student %s smart renewal mode=%s", student.student_id, mode.value)
        return event

    def last_payment(self, student_id: int) -> Optional[RenewalEvent]:
        student = self._require_student(student_id)
        renewals = self._students.list_renewals(student.student_id)
        if not renewals:
            return None
        return max(renewals, key=lambda r: (r.payment_date, r.renewal_id or 0))

    def transfer_history(self, student_id: int) -> list[TransferEvent]:
        student = self._require_student(student_id)
        return list(self._students.list_transfers(student.student_id))

    def payment_history(self, student_id: int) -> list[RenewalEvent]:
        """Payments of one student, newest first."""
        student = self._require_student(student_id)
        renewals = self._students.list_renewals(student.student_id)
        return sorted(renewals, key=lambda r: (r.payment_date, r.renewal_id or 0), reverse=True)
