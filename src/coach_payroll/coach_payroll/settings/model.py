from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.validators import require_int_range
from ..core.constants import MAX_BASE_DAYS, MIN_BASE_DAYS
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Settings:
    """Global business settings row. Read-only to the payroll engine."""

    monthly_fee: Decimal
    base_days: int
    payment_day: int
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.monthly_fee is None or Decimal(self.monthly_fee) < 0:
            raise ValidationError("Monthly fee must be zero or positive")
        require_int_range(self.base_days, "Base days", MIN_BASE_DAYS, MAX_BASE_DAYS)
        require_int_range(self.payment_day, "Payment day", 1, 31)
