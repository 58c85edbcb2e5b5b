# neuro_scoring/scoring/final.py
"""
Authoritative end-of-session score.

Steps:
  1. drop the settling period (neutral 50 if too little data remains)
  2. cumulative statistic over the settled sequence
  3. blend with the mean of the worst segments
  4. map the penalized statistic through the response curve

The worst-segment blend keeps one prolonged tremor burst from being diluted
by an otherwise steady recording, while a single outlier frame cannot
dominate because the burst is blended rather than taken outright.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..config import ScoringConstants, ScoringPolicy
from ..strategies import build_curve, build_statistic
from .segments import segment_statistics, settled_slice, worst_average

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalScore:
    """Final score plus the intermediate statistics it was derived from."""

    score: float
    sample_count: int
    settled_count: int = 0
    segment_count: int = 0
    cumulative_statistic: float = 0.0
    worst_statistic: float = 0.0
    penalized_statistic: float = 0.0
    # False when the neutral short circuit was taken
    sufficient: bool = False
    was_skipped: bool = False

    @classmethod
    def skipped(cls) -> FinalScore:
        """A skipped task is an absence of data, never rewarded."""
        return cls(score=ScoringConstants.MIN_SCORE, sample_count=0, was_skipped=True)

    @classmethod
    def neutral(cls, sample_count: int, settled_count: int = 0) -> FinalScore:
        return cls(
            score=ScoringConstants.NEUTRAL_SCORE,
            sample_count=sample_count,
            settled_count=settled_count,
        )


class FinalScorer:
    """Computes the final score over a complete buffer snapshot."""

    def __init__(self, policy: ScoringPolicy) -> None:
        self.policy = policy
        self.statistic = build_statistic(policy)
        self.curve = build_curve(policy)

    def score(self, values: np.ndarray) -> FinalScore:
        """
        Score a complete buffer snapshot.

        Pure and deterministic for the same input.

        Args:
            values: Points of shape (n, 2) or 1-D deltas, in arrival order

        Returns:
            FinalScore with the score and its intermediate statistics
        """
        policy = self.policy
        n = len(values)
        if n < policy.min_final_samples:
            logger.debug("Final score neutral: %s samples < %s", n, policy.min_final_samples)
            return FinalScore.neutral(n)

        settled = settled_slice(values, policy)
        if len(settled) < policy.min_settled_samples:
            logger.debug("Final score neutral: only %s settled samples", len(settled))
            return FinalScore.neutral(n, len(settled))

        cumulative = self.statistic.compute(settled)
        segment_stats = segment_statistics(settled, policy.segment_size, self.statistic)

        worst = cumulative
        penalized = cumulative
        if len(segment_stats) >= policy.min_segments:
            worst = worst_average(segment_stats, policy.worst_fraction)
            penalized = cumulative * (1.0 - policy.worst_weight) + worst * policy.worst_weight

        final = self.curve.score(penalized)
        logger.debug(
            "Final score %.2f (cumulative=%.6f, worst=%.6f, segments=%s)",
            final,
            cumulative,
            worst,
            len(segment_stats),
        )
        return FinalScore(
            score=final,
            sample_count=n,
            settled_count=len(settled),
            segment_count=len(segment_stats),
            cumulative_statistic=cumulative,
            worst_statistic=worst,
            penalized_statistic=penalized,
            sufficient=True,
        )
