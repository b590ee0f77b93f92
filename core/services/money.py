"""
Money Utilities - Safe Decimal operations for monetary values.

Catalog prices arrive either as numbers (29.99) or as display strings
("$29.99"); everything here normalises to Decimal.
"""
import math
import re
from decimal import Context, Decimal, ROUND_HALF_UP, InvalidOperation, MAX_EMAX, MIN_EMIN, localcontext
from typing import Iterable, Optional, Union

from core.config import DEFAULT_CURRENCY

Numeric = Union[str, int, float, Decimal]

# Default precision for money operations (2 decimal places)
MONEY_PRECISION = Decimal("0.01")

# Line totals and cart sums stay exact for any price that fits a float
MONEY_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP, Emax=MAX_EMAX, Emin=MIN_EMIN)

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
}

# Everything except ASCII digits and the decimal point
_PRICE_STRIP_RE = re.compile(r"[^0-9.]")
_LEADING_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


def to_decimal(value: Union[Numeric, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            # Use string representation to preserve precision
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def parse_price(value) -> Optional[Decimal]:
    """
    Normalise a catalog price to a Decimal.

    Strings have every character other than digits and "." stripped, then
    the leading number is read ("$1,299.99" -> 1299.99, "1.2.3" -> 1.2).
    Numbers pass through unchanged, sign included. Amounts beyond the float
    range cannot be sent to the SPA and are treated as unreadable.

    Args:
        value: Price as a string, int, float or Decimal

    Returns:
        Decimal amount, or None when no finite number can be read
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(_PRICE_STRIP_RE.sub("", value))
        if not match:
            return None
        amount = Decimal(match.group())
    elif isinstance(value, (int, float, Decimal)):
        amount = to_decimal(value)
    else:
        return None

    if not amount.is_finite() or not math.isfinite(float(amount)):
        return None
    return amount


def round_money(value: Union[Numeric, None]) -> Decimal:
    """
    Round monetary value to cents (ROUND_HALF_UP).

    Precision grows with the amount so large totals never overflow the
    quantize step. Non-finite input rounds to zero.
    """
    amount = to_decimal(value)
    if not amount.is_finite():
        return Decimal("0")
    with localcontext(MONEY_CONTEXT) as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Numeric, factor: Numeric) -> Decimal:
    """Exact multiplication of monetary value by a factor."""
    return MONEY_CONTEXT.multiply(to_decimal(value), to_decimal(factor))


def sum_money(values: Iterable[Numeric]) -> Decimal:
    """Exact sum of monetary values."""
    total = Decimal("0")
    for value in values:
        total = MONEY_CONTEXT.add(total, to_decimal(value))
    return total


def to_float(value: Union[Numeric, None]) -> float:
    """
    Convert Decimal to float for JSON serialization.

    Use only at API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def to_json_number(value: Union[Numeric, None]) -> Optional[float]:
    """to_float for response bodies; None when the amount overflows a float."""
    result = to_float(value)
    return result if math.isfinite(result) else None


def format_price(value, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format a price for display.

    Args:
        value: Price in any form accepted by parse_price, or a computed total
        currency: Currency code (USD, EUR, ...)

    Returns:
        Display string such as "$29.99"; unreadable prices render as zero
    """
    if isinstance(value, Decimal) and value.is_finite():
        # Totals may exceed the float range a single price is held to
        amount = value
    else:
        amount = parse_price(value)
    if amount is None:
        amount = Decimal("0")

    symbol = CURRENCY_SYMBOLS.get(currency)
    formatted = f"{round_money(amount):,.2f}"
    if symbol:
        return f"{symbol}{formatted}"
    return f"{formatted} {currency}"
