"""Locale-aware parsing of currency magnitudes.

Statement exports mix conventions: ``"1 234,56"`` (space grouping, comma
decimal), ``"1.234,56"`` (dot grouping, comma decimal) and ``"1234.56"``.
:func:`parse_amount` disambiguates them by the trailing separator: a comma
followed by one or two digits at the end of the value is a decimal comma.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")
_DECIMAL_COMMA_RE = re.compile(r",\d{1,2}$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
# 1,234 / 1,234,567.89: comma as thousands grouping with a dot decimal.
_COMMA_GROUPED_RE = re.compile(r"^[+-]?\d{1,3}(?:,\d{3})+(?:\.\d+)?$")

_CENT = Decimal("0.01")


def parse_amount(value: Any) -> float:
    """Parse a raw cell into a float, returning ``math.nan`` when unparseable.

    Numeric cells pass through. Strings have all whitespace removed (spaces
    and non-breaking spaces serve as thousands separators). If the remainder
    ends in a comma and 1-2 digits, dots are dropped as grouping and the comma
    becomes the decimal point. Otherwise the value must be a plain dot-decimal
    literal, optionally grouped with commas.
    """

    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int | float | Decimal):
        return float(value)
    if not isinstance(value, str):
        return math.nan

    s = _WHITESPACE_RE.sub("", value)
    if not s:
        return math.nan

    if _DECIMAL_COMMA_RE.search(s):
        s = s.replace(".", "").replace(",", ".", 1)
    elif _COMMA_GROUPED_RE.match(s):
        s = s.replace(",", "")

    if not _NUMBER_RE.match(s):
        return math.nan
    try:
        return float(s)
    except (ValueError, OverflowError):
        return math.nan


def round2(value: float) -> float:
    """Round half-up to 2 decimals, normalizing ``-0.0`` to ``0.0``."""

    if not math.isfinite(value):
        return value
    try:
        q = Decimal(repr(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return round(value, 2)
    return float(q) + 0.0


__all__ = ["parse_amount", "round2"]
