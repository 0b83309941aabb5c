"""Amount parsing and fixed-point money helpers."""

from decimal import Decimal, InvalidOperation, ROUND_DOWN
import re

from fintrack.domain.errors import ValidationError

CENTS = Decimal("0.01")
# Numeric(12, 2) columns hold at most ten integer digits
MAX_AMOUNT = Decimal("1e10")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45" / "R$ 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    cleaned = amount_str.strip()

    is_negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1]

    # Currency symbols, then thousands separators
    cleaned = re.sub(r"R\$|[$€£¥]", "", cleaned)
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def to_money(value, field_name: str = "amount") -> Decimal:
    """Convert a value to a two-place Decimal without rounding.

    Binary floats are refused outright, and so is anything carrying
    sub-cent precision or more integer digits than a money column holds.

    Raises:
        ValidationError: If the value is not an exact money amount
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValidationError(f"{field_name} must be a decimal string, not {type(value).__name__}")
    if isinstance(value, str):
        value = parse_amount(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValidationError(f"{field_name} is not a valid amount: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} is not a valid amount: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"{field_name} is too large: {value} (limit {MAX_AMOUNT:,.0f})")
    quantized = amount.quantize(CENTS)
    if quantized != amount:
        raise ValidationError(f"{field_name} has more than two decimal places: {value}")
    return quantized


def to_positive_money(value, field_name: str = "amount") -> Decimal:
    """Like ``to_money`` but rejects zero and negative amounts."""
    amount = to_money(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def format_amount(amount: Decimal) -> str:
    """Render an amount as a decimal string with exactly two fraction digits."""
    return str(Decimal(amount).quantize(CENTS))


def split_amount(total: Decimal, parts: int) -> list[Decimal]:
    """Divide ``total`` into ``parts`` cent-exact shares.

    The leftover cents go to the leading shares, one each, so the shares
    always sum to ``total``: 100.00 / 3 -> [33.34, 33.33, 33.33].

    Raises:
        ValidationError: If parts < 1 or a share would be zero
    """
    if parts < 1:
        raise ValidationError("Cannot split an amount into fewer than one part")
    total = to_money(total)
    sign = -1 if total < 0 else 1
    cents = int(abs(total) / CENTS)
    base, remainder = divmod(cents, parts)
    if base == 0:
        raise ValidationError(f"Amount {format_amount(total)} is too small to split into {parts} parts")
    shares = []
    for index in range(parts):
        share_cents = base + (1 if index < remainder else 0)
        shares.append((Decimal(share_cents) * CENTS * sign).quantize(CENTS, rounding=ROUND_DOWN))
    return shares
