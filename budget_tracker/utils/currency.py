from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from budget_tracker.utils.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int/str/float/Decimal to a Decimal rounded to cents.

    Floats go through str() so 0.1 becomes Decimal('0.10'), not its binary
    expansion. Raises ValidationError for anything unparseable.
    """
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number.")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount out of range: {value!r}") from None


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """Format an amount as currency string, e.g. '$1,234.56'."""
    return f"{symbol}{amount:,.2f}"
