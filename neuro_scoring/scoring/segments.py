# neuro_scoring/scoring/segments.py
"""Settling exclusion and worst-segment helpers for the final scorer."""
from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from ..config import ScoringPolicy
from ..strategies import DispersionStatistic


def settling_count(n: int, policy: ScoringPolicy) -> int:
    """Number of leading samples treated as the settling period."""
    return max(policy.min_settling_samples, int(math.floor(n * policy.settling_fraction)))


def settled_slice(values: np.ndarray, policy: ScoringPolicy) -> np.ndarray:
    """``values`` with the settling period removed (may be empty)."""
    return values[settling_count(len(values), policy):]


def split_segments(values: np.ndarray, size: int) -> List[np.ndarray]:
    """Consecutive full segments of ``size`` elements; a trailing remainder is dropped."""
    return [values[start:start + size] for start in range(0, len(values) - size + 1, size)]


def segment_statistics(
    values: np.ndarray,
    size: int,
    statistic: DispersionStatistic,
) -> List[float]:
    return [statistic.compute(segment) for segment in split_segments(values, size)]


def worst_average(stats: Sequence[float], fraction: float) -> float:
    """
    Mean of the worst ``ceil(len * fraction)`` statistics (at least one).

    Larger statistics are worse. Returns 0.0 for an empty sequence.
    """
    if not stats:
        return 0.0
    ordered = sorted(stats, reverse=True)
    count = max(1, int(math.ceil(len(ordered) * fraction)))
    return float(np.mean(ordered[:count]))
