"""
Monetary amount normalization shared by every boundary a quotation amount crosses.

normalize_amount() is the single coercion rule for the entry form, the SDK client,
the inbound request schemas and the database column type. It never raises: any
missing or malformed value becomes 0.0.
"""
import math
import re
from decimal import Decimal
from typing import Any

from app.core.config import settings

# Leading float literal, same grammar as JavaScript parseFloat(): ASCII digits only
_LEADING_FLOAT_RE = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
}


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def parse_leading_float(text: str) -> float | None:
    """Parse the longest float literal at the start of text. Returns None if there is none."""
    match = _LEADING_FLOAT_RE.match(text.strip())
    if match is None:
        return None
    return float(match.group(0))


def normalize_amount(value: Any) -> float:
    """
    Coerce any value to a finite float amount.

    None, NaN, infinities, empty or unparsable strings and unconvertible objects
    all map to 0.0. Numbers pass through unchanged (negatives are not clamped).
    Strings use leading-float parsing, so "12.5 USD" is 12.5 and "$12" is 0.0.
    Idempotent: normalize_amount(normalize_amount(x)) == normalize_amount(x).
    """
    if value is None:
        return 0.0

    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return 0.0
        return _finite_or_zero(number)

    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")

    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return 0.0
        parsed = parse_leading_float(trimmed)
        if parsed is None:
            return 0.0
        return _finite_or_zero(parsed)

    # Arbitrary objects: whatever their __float__ raises, the amount is 0
    try:
        number = float(value)
    except Exception:
        return 0.0
    return _finite_or_zero(number)


def is_normalized_amount(value: Any) -> bool:
    """True if value is already a float that normalize_amount would return unchanged."""
    return isinstance(value, float) and math.isfinite(value)


def format_currency(amount: Any, currency: str | None = None) -> str:
    """Display form of an amount, e.g. $1,234.50. Malformed amounts display as $0.00."""
    code = (currency or settings.CURRENCY or "USD").upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    value = normalize_amount(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"
