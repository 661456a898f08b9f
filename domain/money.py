"""
Domain: money helpers.

All currency values are `Decimal`. Raw form/API input is coerced here before
it reaches any calculation: anything that is not a finite number becomes 0.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coerce_amount(value: Any) -> Decimal:
    """
    Coerce user input to a finite Decimal, falling back to 0.

    Examples:
        coerce_amount("12.50")  -> Decimal("12.50")
        coerce_amount("")       -> Decimal("0")
        coerce_amount("abc")    -> Decimal("0")
        coerce_amount(None)     -> Decimal("0")
    """

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def require_non_negative(name: str, value: Decimal) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
