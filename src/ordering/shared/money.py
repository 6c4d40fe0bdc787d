"""Exact money arithmetic for order totals and refunds.

Amounts are stored as floats on the aggregates. Every comparison and sum goes
through ``Decimal`` quantized to cents so that binary rounding can neither let
a refund slip fractionally over the limit nor misclassify a full refund as
partial.
"""

import math
import os
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Integer digits accepted in a requested amount. Anything longer is not money.
MAX_AMOUNT_DIGITS = 64

CURRENCY_SYMBOL = os.environ.get("STORE_CURRENCY_SYMBOL", "£")


def to_money(value) -> Decimal:
    """Convert a stored or requested amount to a cent-precision Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.10")``
    rather than its binary expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Amount must be finite, got {value!r}")
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return _quantize(amount, ROUND_HALF_UP)


def _quantize(amount: Decimal, rounding=ROUND_HALF_UP) -> Decimal:
    """Quantize to cents with enough precision for every integer digit."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=rounding)


def parse_amount(value) -> Decimal:
    """Parse a requested amount without rounding it.

    Rejects booleans, non-numeric and non-finite input, and anything with
    sub-cent precision, so the value compared against a limit is exactly the
    value that will be recorded.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError("Amount must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Amount must be a finite number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError("Amount must be a number") from exc
    if not amount.is_finite():
        raise ValueError("Amount must be a finite number")
    if amount.adjusted() >= MAX_AMOUNT_DIGITS:
        raise ValueError("Amount is out of range")
    if amount.as_tuple().exponent < -2 and amount != _quantize(amount):
        raise ValueError("Amount cannot have more than 2 decimal places")
    return _quantize(amount)


def to_float(amount: Decimal) -> float:
    """Storage representation of a cent-precision amount."""
    return float(_quantize(amount))


def format_money(value, symbol: str | None = None) -> str:
    """Render an amount with two decimals, e.g. ``£40.00``."""
    sym = CURRENCY_SYMBOL if symbol is None else symbol
    return f"{sym}{to_money(value):.2f}"
