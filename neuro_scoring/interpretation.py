# neuro_scoring/interpretation.py
"""Human-readable bands for task scores, as shown on the results dashboard and report."""
from __future__ import annotations

from typing import Iterable, Optional

from .utils import round_half_up


def score_label(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Moderate"
    return "Needs Attention"


def clinical_classification(score: float) -> str:
    if score >= 80:
        return "Within Normal Limits"
    if score >= 60:
        return "Largely Normal"
    if score >= 40:
        return "Some Concerns Noted"
    return "Further Evaluation Recommended"


def overall_score(scores: Iterable[float]) -> Optional[int]:
    """Rounded mean of the task scores; None when there are none."""
    values = list(scores)
    if not values:
        return None
    return int(round_half_up(sum(values) / len(values)))
