"""Money helpers shared by the calculators."""

from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Two amounts closer than this are considered equal.
BALANCE_TOLERANCE = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def amounts_equal(left: Decimal, right: Decimal) -> bool:
    """Return True if two amounts differ by less than one cent."""
    return abs(left - right) < BALANCE_TOLERANCE
