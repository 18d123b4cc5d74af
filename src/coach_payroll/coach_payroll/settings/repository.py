from __future__ import annotations

from typing import Optional, Protocol

from .model import Settings


class SettingsRepository(Protocol):
    def get(self) -> Optional[Settings]:
        """Return the single settings row, or None if it was never bootstrapped."""

        raise NotImplementedError
