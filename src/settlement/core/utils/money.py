"""
Money parsing, rounding and formatting helpers.

Amounts are plain floats throughout the engines. These helpers give them
the product's conventions: shorthand input such as ``"50k"`` or ``"2.5M"``,
half-up rounding to whole dollars and ``$1,234,567`` display strings.
"""
from __future__ import annotations

import math
import re
from typing import Any, Optional

MAX_MONEY_VALUE = 1_000_000_000

_SHORTHAND_RE = re.compile(r"^([0-9]+\.?[0-9]*)\s*([kmKM])$")
_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


def parse_money_input(raw: Any) -> Optional[float]:
    """Parse a money value that may use shorthand notation.

    ``"50k"`` -> 50000, ``"2.5m"`` -> 2500000, ``"$2,000,000"`` -> 2000000.
    Returns ``None`` for empty or unparseable input. Numbers pass through.
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    if text in {"", "$"}:
        return None
    cleaned = text.replace("$", "").replace(",", "")
    match = _SHORTHAND_RE.match(cleaned)
    if match:
        return float(match.group(1)) * _MULTIPLIERS[match.group(2).lower()]
    try:
        return float(cleaned)
    except ValueError:
        return None


def round_money(value: float) -> int:
    """Round to the nearest whole unit, halves rounding up.

    Python's ``round`` uses banker's rounding; settlement figures are
    rounded half-up so 2.5 becomes 3 and -2.5 becomes -2.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot round non-finite amount {value!r}")
    return int(math.floor(value + 0.5))


def format_money(value: Optional[float]) -> str:
    """Format as a whole-dollar amount with thousands separators."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "$0"
    return f"${round_money(value):,}"
