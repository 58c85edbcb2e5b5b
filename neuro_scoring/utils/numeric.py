# neuro_scoring/utils/numeric.py
from __future__ import annotations

import math


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""
    return max(lower, min(upper, value))


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round halves away from zero for positive values (1.25 -> 1.3),
    unlike the built-in banker's rounding.
    """
    factor = 10.0 ** digits
    return math.floor(value * factor + 0.5) / factor


def euclidean(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x2 - x1, y2 - y1)
