"""
Numeric helpers shared by ingestion and the scoring core.

``round_half_up`` is used wherever a figure is rounded to a whole number.
Python's built-in ``round()`` rounds halves to even (``round(80.5) == 80``),
which would move scores sitting exactly on a half across the 60/80 level
thresholds; halves always round toward +inf here.
"""

from __future__ import annotations

import math
from typing import Any


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Non-finite input (NaN, or an intermediate that overflowed to +/-inf)
    has no integer value and returns 0.
    """
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def coerce_float(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely-typed cell or option value to a finite float.

    Blank strings, ``None``, booleans, unparsable text, NaN and infinities
    all become ``default``. Thousands separators (``"1,250"``) are accepted.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return default
        try:
            result = float(text)
        except ValueError:
            return default
    if not math.isfinite(result):
        return default
    return result


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
