# neuro_scoring/strategies/statistics.py
"""
Dispersion statistics measuring how much a landmark trace moves.

Position statistics work on point arrays of shape ``(n, 2)``; delta
statistics on 1-D arrays of frame-to-frame distances. Larger always means
more movement.

Example:
    >>> import numpy as np
    >>> from neuro_scoring.strategies import PositionRmsStatistic
    >>> points = np.array([[0.5, 0.5], [0.52, 0.5], [0.48, 0.5]])
    >>> PositionRmsStatistic().compute(points)  # ~0.0163
"""
from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class DispersionStatistic(ABC):
    """Strategy interface for the core movement statistic."""

    # 2 for point arrays, 1 for delta arrays
    input_width: int = 2

    @abstractmethod
    def compute(self, values: np.ndarray) -> float:
        """Return the statistic for ``values`` (0.0 for an empty array)."""
        raise NotImplementedError

    @abstractmethod
    def get_description(self) -> str:
        raise NotImplementedError


def _squared_distance_from_centroid(points: np.ndarray) -> np.ndarray:
    centroid = points.mean(axis=0)
    return ((points - centroid) ** 2).sum(axis=1)


class PositionVarianceStatistic(DispersionStatistic):
    """Population variance of (x, y) around the mean, summed over both axes."""

    input_width = 2

    def compute(self, values: np.ndarray) -> float:
        if len(values) == 0:
            return 0.0
        with np.errstate(over="ignore", invalid="ignore"):
            return float(_squared_distance_from_centroid(values).mean())

    def get_description(self) -> str:
        return "PositionVariance"


class PositionRmsStatistic(DispersionStatistic):
    """RMS displacement of points from their centroid."""

    input_width = 2

    def compute(self, values: np.ndarray) -> float:
        if len(values) == 0:
            return 0.0
        with np.errstate(over="ignore", invalid="ignore"):
            return float(np.sqrt(_squared_distance_from_centroid(values).mean()))

    def get_description(self) -> str:
        return "PositionRMS"


class DeltaRmsStatistic(DispersionStatistic):
    """Root mean square of frame-to-frame deltas."""

    input_width = 1

    def compute(self, values: np.ndarray) -> float:
        if len(values) == 0:
            return 0.0
        with np.errstate(over="ignore", invalid="ignore"):
            return float(np.sqrt(np.mean(np.square(values))))

    def get_description(self) -> str:
        return "DeltaRMS"


class DeltaMeanStatistic(DispersionStatistic):
    """Mean frame-to-frame delta."""

    input_width = 1

    def compute(self, values: np.ndarray) -> float:
        if len(values) == 0:
            return 0.0
        with np.errstate(over="ignore", invalid="ignore"):
            return float(np.mean(values))

    def get_description(self) -> str:
        return "DeltaMean"


def axis_variances(points: np.ndarray) -> tuple[float, float]:
    """Separate population variances of x and y (0.0 below two points)."""
    if len(points) < 2:
        return 0.0, 0.0
    with np.errstate(over="ignore", invalid="ignore"):
        variances = points.var(axis=0)
    return float(variances[0]), float(variances[1])
