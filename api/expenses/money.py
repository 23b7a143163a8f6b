"""
Money codec.

Amounts live in memory as an integer count of minor units (cents). The store
holds them in a NUMERIC(14,2) column (as `Decimal`), the wire carries them as a
decimal string with exactly two fractional digits ("12.30").

No binary floating point is involved at any step. Input with more than two
fractional digits is rounded half-up to the nearest cent, never truncated.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import InvalidAmountError

MINOR_UNITS = 100
# NUMERIC(14,2): 12 integer digits + 2 fractional digits.
MAX_MINOR_UNITS = 10**14 - 1

_AMOUNT_RE = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")
_CENT = Decimal("0.01")


def _to_minor(value: Decimal) -> int:
    if not value.is_finite():
        raise InvalidAmountError(f"amount must be finite, got {value}")
    if value and value.adjusted() >= 12:
        raise InvalidAmountError(f"amount {value} is out of range")
    cents = int(value.quantize(_CENT, rounding=ROUND_HALF_UP).scaleb(2))
    if abs(cents) > MAX_MINOR_UNITS:
        raise InvalidAmountError(f"amount {value} is out of range")
    return cents


def parse_amount(text: str) -> int:
    """
    Parse a wire amount ("12.30", " 12.3 ", "-0.5", ".99", "7.") into cents.
    """
    if not isinstance(text, str):
        raise InvalidAmountError(f"amount must be a decimal string, got {type(text).__name__}")
    raw = text.strip()
    if not _AMOUNT_RE.match(raw):
        raise InvalidAmountError(f"malformed amount {text!r}")
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"malformed amount {text!r}") from exc
    return _to_minor(value)


def format_amount(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    units, rest = divmod(abs(cents), MINOR_UNITS)
    return f"{sign}{units}.{rest:02d}"


def encode(cents: int) -> Decimal:
    """
    Storage value for an amount in cents.
    """
    if isinstance(cents, bool) or not isinstance(cents, int):
        raise InvalidAmountError(f"amount must be an integer count of cents, got {cents!r}")
    if abs(cents) > MAX_MINOR_UNITS:
        raise InvalidAmountError(f"amount {cents} cents is out of range")
    return Decimal(cents).scaleb(-2)


def decode(value: Decimal | int | str) -> int:
    """
    Cents from a storage value. `int` values are whole currency units.
    """
    if isinstance(value, str):
        return parse_amount(value)
    if isinstance(value, bool):
        raise InvalidAmountError(f"unsupported amount value {value!r}")
    if isinstance(value, int):
        return _to_minor(Decimal(value))
    if isinstance(value, Decimal):
        return _to_minor(value)
    raise InvalidAmountError(f"unsupported amount value {value!r}")
