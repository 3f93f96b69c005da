"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money amount into a Decimal rounded to cents.

    Handles "1234.5", "$1,234.50" and "(12.00)" (negative in parentheses).

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
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

    amount = amount.quantize(Decimal("0.01"))
    return -amount if is_negative else amount


def parse_percentage(value: str) -> Decimal:
    """Parse a percentage such as "16" or "16%" into a Decimal in [0, 100].

    Raises:
        ValueError: If the value is not a number or out of range
    """
    text = (value or "").strip().rstrip("%").strip()
    try:
        percentage = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse percentage '{value}'")
    if not percentage.is_finite() or percentage < 0 or percentage > 100:
        raise ValueError(f"Percentage must be between 0 and 100, got '{value}'")
    return percentage
