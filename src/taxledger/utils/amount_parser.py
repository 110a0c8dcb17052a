"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str, allow_negative: bool = True) -> Decimal:
    """Parse an amount string into a Decimal.

    Accepts "1234.5", "$1,234.50", "-12" and accounting-style negatives
    such as "(12.00)". No rounding is applied.

    Args:
        amount_str: Amount string
        allow_negative: Reject negative amounts when False

    Returns:
        Decimal amount

    Raises:
        ValueError: If the string is empty, not a number, or negative when
            negatives are not allowed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()
    is_negative = text.startswith("(") and text.endswith(")")
    if is_negative:
        text = text[1:-1]
    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if is_negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount '{amount_str}' cannot be negative")
    return amount
