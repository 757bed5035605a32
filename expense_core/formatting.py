"""Display helpers shared by the presentation shells."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

# Leading numeric text, the way a browser's parseFloat reads it.
NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# From 1e21 upward a browser's toFixed falls back to exponent notation.
FIXED_NOTATION_DIGITS = 21


def format_amount(amount: str) -> str:
    """Render an amount string with exactly two decimals, or "NaN" if it is not numeric."""
    match = NUMERIC_PREFIX.match(amount or "")
    if not match:
        return "NaN"
    value = Decimal(match.group(1))
    if value and value.adjusted() >= FIXED_NOTATION_DIGITS:
        return _exponent_form(float(value))
    try:
        value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return amount.strip()
    return f"{value:.2f}"


def _exponent_form(number: float) -> str:
    if number in (float("inf"), float("-inf")):
        return "Infinity" if number > 0 else "-Infinity"
    return repr(number)
