# neuro_scoring/scoring/live.py
"""Frame-by-frame live score for on-screen feedback."""
from __future__ import annotations

import numpy as np

from ..buffer import SampleBuffer
from ..config import ScoringConstants, ScoringPolicy
from ..strategies import build_curve, build_statistic, clamp_score
from .segments import settled_slice


class LiveScorer:
    """
    Rolling score recomputed after every appended sample.

    Trailing mode (motor) scores only the last ``live_window`` samples.
    Cumulative mode (ocular) scores all settled samples so far and blends in
    the trailing window, so a subject who steadies after a jittery start
    recovers, but never above the cumulative score plus
    ``live_recovery_margin``.
    """

    def __init__(self, policy: ScoringPolicy) -> None:
        self.policy = policy
        self.statistic = build_statistic(policy)
        self.curve = build_curve(policy)

    def score(self, buffer: SampleBuffer) -> float:
        return self.score_values(buffer.snapshot())

    def score_values(self, values: np.ndarray) -> float:
        policy = self.policy
        if len(values) < policy.live_min_samples:
            return ScoringConstants.NEUTRAL_SCORE

        if not policy.live_cumulative:
            window = values[-policy.live_window:]
            return self.curve.score(self.statistic.compute(window))

        settled = settled_slice(values, policy)
        if len(settled) < policy.min_settled_samples:
            return ScoringConstants.NEUTRAL_SCORE

        cumulative = self.curve.score(self.statistic.compute(settled))
        recent = self.curve.score(self.statistic.compute(settled[-policy.live_window:]))
        blended = (1.0 - policy.live_recent_weight) * cumulative + policy.live_recent_weight * recent
        return clamp_score(min(blended, cumulative + policy.live_recovery_margin))
