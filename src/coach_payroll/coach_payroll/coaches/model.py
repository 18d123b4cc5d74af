from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coach:
    """Domain entity: a coach. Archived coaches keep is_active=False."""

    coach_id: int
    full_name: str
    is_active: bool = True
