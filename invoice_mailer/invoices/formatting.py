"""Number formatting shared by the PDF layout and the email body."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

DEFAULT_CURRENCY_SYMBOL = "₹"

_CENTS = Decimal("0.01")


def to_decimal(value: object) -> Decimal:
    """Coerce *value* to ``Decimal`` without going through binary floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(str(value))


def format_amount(value: object) -> str:
    """Return *value* with exactly two decimal digits, e.g. ``"100.00"``."""
    return str(to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_currency(value: object, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Return *value* prefixed with *symbol*, e.g. ``100 -> "₹100.00"``."""
    return f"{symbol}{format_amount(value)}"


def format_quantity(value: object) -> str:
    return format_amount(value)


def format_rate(value: object) -> str:
    """Return a percentage without trailing zeros (``18.50 -> "18.5"``)."""
    rate = to_decimal(value)
    if rate == rate.to_integral_value():
        return str(rate.quantize(Decimal(1)))
    return format(rate.normalize(), "f")
