from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_int_range(value: int, field_name: str, low: int, high: int) -> int:
    number = require_int(value, field_name)
    if number < low or number > high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def require_positive_amount(value, field_name: str) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, AttributeError):
        raise ValidationError(f"{field_name} is not a valid amount")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def parse_period_month(value: str) -> tuple[int, int]:
    """Validate a YYYY-MM period label and return (year, month)."""
    m = _PERIOD_RE.match((value or "").strip())
    if not m:
        raise ValidationError(f"Invalid period {value!r}, expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"Invalid period {value!r}, month must be 01-12")
    return year, month


def require_period_month(value: str) -> str:
    year, month = parse_period_month(value)
    return f"{year:04d}-{month:02d}"


def optional_iso_date(value, field_name: str) -> Optional[date]:
    """Parse an optional YYYY-MM-DD string; blank means None."""
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def require_iso_date(value, field_name: str) -> date:
    parsed = optional_iso_date(value, field_name)
    if parsed is None:
        raise ValidationError(f"{field_name} is required")
    return parsed
