"""Coach ownership reconstruction from the transfer log.

The student's current coach is only a cached projection; for any past window
the owner is derived from ``TransferEvent`` records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import day_before, inclusive_days
from ..students.model import TransferEvent


@dataclass(frozen=True)
class OwnershipInterval:
    coach_id: int
    start: date
    end: date

    @property
    def days(self) -> int:
        return inclusive_days(self.start, self.end)


def sort_transfers(transfers: Iterable[TransferEvent]) -> list[TransferEvent]:
    # sorted() is stable, so same-day transfers keep their log order
    return sorted(transfers, key=lambda t: t.transfer_date)


def owner_at(work_start: date, current_coach_id: int, transfers: Sequence[TransferEvent]) -> int:
    """Coach responsible for the student on work_start.

    Transfers must be sorted ascending by date.
    """
    before = [t for t in transfers if t.transfer_date < work_start]
    if before:
        return before[-1].new_coach_id
    if transfers:
        return transfers[0].old_coach_id
    return current_coach_id


def build_ownership_timeline(
    work_start: date,
    work_end: date,
    current_coach_id: int,
    transfers: Iterable[TransferEvent],
) -> list[OwnershipInterval]:
    """Split [work_start, work_end] into contiguous per-coach intervals."""
    if work_start > work_end:
        return []

    ordered = sort_transfers(transfers)
    first_owner = owner_at(work_start, current_coach_id, ordered)
    relevant = [t for t in ordered if work_start <= t.transfer_date <= work_end]

    if not relevant:
        return [OwnershipInterval(first_owner, work_start, work_end)]

    candidates = [OwnershipInterval(first_owner, work_start, day_before(relevant[0].transfer_date))]
    for current, following in zip(relevant, relevant[1:]):
        candidates.append(
            OwnershipInterval(current.new_coach_id, current.transfer_date, day_before(following.transfer_date))
        )
    last = relevant[-1]
    candidates.append(OwnershipInterval(last.new_coach_id, last.transfer_date, work_end))

    # Same-day transfers and a transfer on work_start yield empty ranges.
    return [i for i in candidates if i.start <= i.end]
