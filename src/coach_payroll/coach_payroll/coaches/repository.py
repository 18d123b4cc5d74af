from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Coach


class CoachRepository(Protocol):
    def get_by_id(self, coach_id: int) -> Optional[Coach]:
        raise NotImplementedError

    def list_all_including_archived(self) -> Sequence[Coach]:
        """Full roster; payroll for past periods must still see archived coaches."""

        raise NotImplementedError
