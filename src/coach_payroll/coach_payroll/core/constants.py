"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Default system settings row created by the environment bootstrap.
DEFAULT_MONTHLY_FEE = Decimal("1100.00")
DEFAULT_BASE_DAYS = 31
DEFAULT_PAYMENT_DAY = 28

MIN_BASE_DAYS = 28
MAX_BASE_DAYS = 31

MIN_PACKAGE_MONTHS = 1
MAX_PACKAGE_MONTHS = 12

MONEY_QUANTUM = Decimal("0.01")
DATE_FORMAT = "%Y-%m-%d"

DEFAULT_PAYER = "Admin"
