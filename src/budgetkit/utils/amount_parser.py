"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")

    if is_negative:
        amount = -amount
    return amount


# Cents are stored in signed 64-bit integer columns
_MIN_MINOR_UNITS = -(2**63)
_MAX_MINOR_UNITS = 2**63 - 1


def to_minor_units(amount: Decimal) -> int:
    """Convert a decimal amount to integer cents, rounding half up.

    Raises:
        ValueError: If the amount does not fit a signed 64-bit cent value
    """
    try:
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        raise ValueError(f"Amount {amount} is out of range") from e
    if not _MIN_MINOR_UNITS <= cents <= _MAX_MINOR_UNITS:
        raise ValueError(f"Amount {amount} is out of range")
    return cents


def parse_amount_minor_units(amount_str: Optional[str]) -> Optional[int]:
    """Parse an amount string into cents, or None if it cannot be read.

    Used for staged import rows where an unreadable amount is not an error.
    """
    if amount_str is None:
        return None
    try:
        return to_minor_units(parse_amount(amount_str))
    except (ValueError, InvalidOperation):
        return None


def format_minor_units(amount: int) -> str:
    """Render cents as a signed dollar string, e.g. -4250 -> "-$42.50"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${Decimal(abs(amount)) / 100:,.2f}"
