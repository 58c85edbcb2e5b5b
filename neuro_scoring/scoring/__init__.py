"""Live and final scorers."""

from .final import FinalScore, FinalScorer
from .live import LiveScorer
from .segments import (
    segment_statistics,
    settled_slice,
    settling_count,
    split_segments,
    worst_average,
)

__all__ = [
    "FinalScore",
    "FinalScorer",
    "LiveScorer",
    "segment_statistics",
    "settled_slice",
    "settling_count",
    "split_segments",
    "worst_average",
]
