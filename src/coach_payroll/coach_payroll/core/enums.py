from __future__ import annotations

from enum import Enum


class PayrollStatus(str, Enum):
    """Persisted status of a coach payroll row. PAID is terminal."""

    PENDING = "pending"
    PAID = "paid"


class RenewalMode(str, Enum):
    """How a renewal picks its duration and price.

    QUICK repeats the last payment, PRICE_UPDATE keeps the duration with a new
    price, PACKAGE_SWITCH sets both.
    """

    QUICK = "quick"
    PRICE_UPDATE = "price_update"
    PACKAGE_SWITCH = "package_switch"
