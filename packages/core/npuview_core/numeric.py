"""Numeric guards for ratio computations."""

from __future__ import annotations

import math


def finite_or_default(value: float, default: float = 0.0) -> float:
    """Return ``value`` when finite, otherwise ``default``.

    Applied where a ratio is computed so NaN/Inf never reaches formatted
    strings or graph series.
    """
    if math.isfinite(value):
        return value
    return default


def round_half_away(value: float) -> int:
    if value < 0:
        return -int(math.floor(-value + 0.5))
    return int(math.floor(value + 0.5))
