"""Movement statistics and response curves selected by the scoring policy."""
from __future__ import annotations

from ..config import ScoringPolicy, ValidationMessages
from .curves import (
    LinearScaleCurve,
    LogMeanCurve,
    ResponseCurve,
    SigmoidCurve,
    clamp_score,
)
from .statistics import (
    DeltaMeanStatistic,
    DeltaRmsStatistic,
    DispersionStatistic,
    PositionRmsStatistic,
    PositionVarianceStatistic,
    axis_variances,
)

_STATISTICS = {
    "position_rms": PositionRmsStatistic,
    "position_variance": PositionVarianceStatistic,
    "delta_rms": DeltaRmsStatistic,
    "delta_mean": DeltaMeanStatistic,
}


def build_statistic(policy: ScoringPolicy) -> DispersionStatistic:
    """Instantiate the statistic named by ``policy.statistic``."""
    try:
        return _STATISTICS[policy.statistic]()
    except KeyError:
        raise ValueError(ValidationMessages.UNKNOWN_STATISTIC.format(policy.statistic)) from None


def build_curve(policy: ScoringPolicy) -> ResponseCurve:
    """Instantiate the response curve named by ``policy.curve``."""
    if policy.curve == "sigmoid":
        return SigmoidCurve(policy.sigmoid_steepness, policy.sigmoid_midpoint)
    if policy.curve == "linear":
        return LinearScaleCurve(policy.linear_scale_factor)
    if policy.curve == "log":
        return LogMeanCurve(policy.log_offset, policy.log_span)
    raise ValueError(ValidationMessages.UNKNOWN_CURVE.format(policy.curve))


__all__ = [
    "DispersionStatistic",
    "PositionRmsStatistic",
    "PositionVarianceStatistic",
    "DeltaRmsStatistic",
    "DeltaMeanStatistic",
    "axis_variances",
    "ResponseCurve",
    "SigmoidCurve",
    "LinearScaleCurve",
    "LogMeanCurve",
    "clamp_score",
    "build_statistic",
    "build_curve",
]
