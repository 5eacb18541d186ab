"""Tests for Decimal helpers."""

from decimal import Decimal

from lotledger.utils.decimal_utils import (
    coerce_decimal,
    format_amount,
    sum_decimals,
)


def test_coerce_decimal_avoids_float_noise():
    """Floats should go through their string form."""
    assert coerce_decimal(0.1) == Decimal("0.1")
    assert coerce_decimal(None) == Decimal("0")
    assert coerce_decimal("2.5") == Decimal("2.5")


def test_sum_decimals_of_nothing_is_zero():
    """An empty sum should still be a Decimal."""
    assert sum_decimals([]) == Decimal("0")
    assert isinstance(sum_decimals([]), Decimal)


def test_format_amount_uses_fixed_places():
    """Formatting should not depend on the Decimal exponent."""
    assert format_amount(Decimal("1")) == "1.00000000"
    assert format_amount(Decimal("1.0")) == format_amount(Decimal("1.00000000"))
    assert format_amount(Decimal("2.5"), 2) == "2.50"
