"""Amount parsing and formatting."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Optional


CENTS = Decimal("0.01")

# Largest amount the form accepts
MAX_AMOUNT = Decimal("999999999999.99")


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a user- or store-supplied amount.

    Returns None for anything that is not a finite number: empty text,
    garbage, NaN, infinities and booleans.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except (InvalidOperation, ValueError):
            return None
    if not amount.is_finite():
        return None
    return amount


def quantize_amount(amount: Decimal) -> Decimal:
    """Round to cents. Precision grows with the amount so quantize never overflows."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    """Two decimals, no currency sign: 50.5 -> '50.50'."""
    return str(quantize_amount(amount))


def format_money(amount: Decimal) -> str:
    """Dollar-sign format used for the balance: '$80.00', '-$12.50'."""
    if amount < 0:
        return f"-${format_amount(-amount)}"
    return f"${format_amount(amount)}"
