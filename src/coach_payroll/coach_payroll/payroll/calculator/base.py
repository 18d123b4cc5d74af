from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

from ...settings.model import Settings


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for coach compensation)."""

    @abstractmethod
    def daily_rate(self, settings: Settings) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def days_worked(self, start: date, end: date) -> int:
        raise NotImplementedError

    def amount_for(self, settings: Settings, days: int) -> Decimal:
        """Unrounded amount for a number of worked days."""
        return self.daily_rate(settings) * Decimal(int(days))
