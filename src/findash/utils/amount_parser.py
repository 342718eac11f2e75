"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

ORE_PER_KRONA = 100


def parse_amount(amount_str: str) -> int:
    """Parse a kronor amount string into whole öre.

    Handles various formats:
    - "123.45" and "123,45"
    - "1 234,50 kr", "1234 SEK"
    - "1,234.56"

    Amounts are magnitudes, so a leading minus sign is rejected.

    Args:
        amount_str: Amount string

    Returns:
        Amount in öre

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"(?i)\s*(kr|sek)\.?$", "", amount_str.strip())
    cleaned = re.sub(r"\s+", "", cleaned)

    # "1,234.56" uses comma for thousands; "1234,56" uses it as decimal mark
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount '{amount_str}' must not be negative")

    ore = (amount * ORE_PER_KRONA).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(ore)


def round_half_up(numerator: int, denominator: int = 1) -> int:
    """Divide non-negative integers, rounding halves away from zero."""
    return (2 * numerator + denominator) // (2 * denominator)


def format_ore(amount: int) -> str:
    """Render öre as a kronor string, e.g. 123456 -> '1 234,56 kr'."""
    kronor, ore = divmod(amount, ORE_PER_KRONA)
    grouped = f"{kronor:,}".replace(",", " ")
    return f"{grouped},{ore:02d} kr"
