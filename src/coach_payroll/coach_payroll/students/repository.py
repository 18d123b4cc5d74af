from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import RenewalEvent, Student, TransferEvent


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_all_including_archived(self) -> Sequence[Student]:
        """Archived students are included: historical payroll must still pay for them."""

        raise NotImplementedError

    def list_transfers(self, student_id: Optional[int] = None) -> Sequence[TransferEvent]:
        """Transfer log, oldest first. Without student_id the whole log is returned."""

        raise NotImplementedError

    def list_renewals(self, student_id: Optional[int] = None) -> Sequence[RenewalEvent]:
        """Renewal/payment log, oldest payment first. Without student_id the whole log is returned."""

        raise NotImplementedError

    def record_transfer(self, event: TransferEvent) -> int:
        """Append the event and move the cached current coach, atomically."""

        raise NotImplementedError

    def record_renewal(self, event: RenewalEvent, *, package_months: int) -> int:
        """Append the event and move package_end_date to event.new_end_date, atomically."""

        raise NotImplementedError

    def archive(self, *, student_id: int, leave_date: date) -> bool:
        raise NotImplementedError
