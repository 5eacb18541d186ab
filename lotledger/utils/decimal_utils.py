"""Helpers for Decimal normalization."""

from collections.abc import Iterable
from decimal import Decimal

SATOSHI = Decimal("0.00000001")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, JSON payloads or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sum_decimals(values: Iterable[Decimal]) -> Decimal:
    """Return the exact sum of Decimal values (0 when empty)."""
    return sum(values, Decimal("0"))


def format_amount(amount: Decimal, places: int = 8) -> str:
    """Format an amount with a fixed number of fraction digits.

    Args:
        amount: Amount to format.
        places: Number of fraction digits to keep.

    Returns:
        str: Fixed-point representation, e.g. ``1.00000000``.
    """
    quantum = Decimal(1).scaleb(-places)
    return f"{amount.quantize(quantum):f}"


__all__ = [
    "SATOSHI",
    "coerce_decimal",
    "sum_decimals",
    "format_amount",
]
