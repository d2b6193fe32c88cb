"""
Decimal helpers for money and rates
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Tuple

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def quantize(value: Decimal) -> Decimal:
    """Round half-up to 2 decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def coerce_amount(value: Any) -> Tuple[Decimal, bool]:
    """
    Parse a non-negative amount.

    Returns (amount, clamped). None maps to 0 without being treated as
    malformed; negatives, NaN/Infinity and non-numeric input clamp to 0.
    """
    if value is None or value == "":
        return ZERO, False
    if isinstance(value, bool):
        return ZERO, True
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO, True
    if not amount.is_finite() or amount < 0:
        return ZERO, True
    return amount, False


def coerce_signed(value: Any) -> Tuple[Decimal, bool]:
    """Like coerce_amount but keeps the sign (reversed charges can be negative)."""
    if value is None or value == "":
        return ZERO, False
    if isinstance(value, bool):
        return ZERO, True
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO, True
    if not amount.is_finite():
        return ZERO, True
    return amount, False
