# neuro_scoring/strategies/curves.py
"""
Response curves mapping a movement statistic onto the 0-100 score scale.

All curves are monotonically decreasing in the statistic and clamp their
output to [0, 100]. A non-finite statistic (overflowing outliers) maps to
the minimum score.

Calibration of the canonical sigmoids (k=200):

    motor, midpoint 0.02 (wrist RMS from centroid)
        RMS 0.0015 -> ~98   near the landmark noise floor
        RMS 0.005  -> ~95   physiological tremor
        RMS 0.015  -> ~73   mild tremor
        RMS 0.03   -> ~12   moderate tremor

    ocular, midpoint 0.012 (RMS of gaze deltas)
        RMS 0.003 -> ~86    smooth pursuit
        RMS 0.008 -> ~69    mild irregularity
        RMS 0.02  -> ~17    marked irregularity
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod

from ..config.constants import ScoringConstants
from ..utils import clamp

# exp() overflows just above 709
_MAX_EXPONENT = 700.0


def clamp_score(value: float) -> float:
    return clamp(value, ScoringConstants.MIN_SCORE, ScoringConstants.MAX_SCORE)


class ResponseCurve(ABC):
    """Strategy interface for statistic -> score mapping."""

    def score(self, statistic: float) -> float:
        if math.isnan(statistic) or math.isinf(statistic):
            return ScoringConstants.MIN_SCORE
        return clamp_score(self._map(statistic))

    @abstractmethod
    def _map(self, statistic: float) -> float:
        raise NotImplementedError

    @abstractmethod
    def get_description(self) -> str:
        raise NotImplementedError


class SigmoidCurve(ResponseCurve):
    """``100 / (1 + e^(k * (s - midpoint)))``; the midpoint scores 50."""

    def __init__(self, steepness: float, midpoint: float) -> None:
        self.steepness = steepness
        self.midpoint = midpoint

    def _map(self, statistic: float) -> float:
        exponent = self.steepness * (statistic - self.midpoint)
        if exponent > _MAX_EXPONENT:
            return 0.0
        return 100.0 / (1.0 + math.exp(exponent))

    def get_description(self) -> str:
        return f"Sigmoid(k={self.steepness}, midpoint={self.midpoint})"


class LinearScaleCurve(ResponseCurve):
    """``100 - s * scale_factor``."""

    def __init__(self, scale_factor: float) -> None:
        self.scale_factor = scale_factor

    def _map(self, statistic: float) -> float:
        return 100.0 - statistic * self.scale_factor

    def get_description(self) -> str:
        return f"Linear(scale={self.scale_factor})"


class LogMeanCurve(ResponseCurve):
    """
    ``((log10(s) + offset) / span) * 100``.

    With the default anchors (offset 3.5, span -2.5) a mean delta of 1e-6
    or less scores 100 and 10^-3.5 or more scores 0. A zero statistic
    scores 100.
    """

    def __init__(self, offset: float, span: float) -> None:
        self.offset = offset
        self.span = span

    def _map(self, statistic: float) -> float:
        if statistic <= 0.0:
            return ScoringConstants.MAX_SCORE
        return ((math.log10(statistic) + self.offset) / self.span) * 100.0

    def get_description(self) -> str:
        return f"Log(offset={self.offset}, span={self.span})"
