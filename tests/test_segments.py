import numpy as np

from neuro_scoring.config import ScoringPolicy
from neuro_scoring.scoring import settled_slice, settling_count, split_segments, worst_average


def test_settling_count():
    policy = ScoringPolicy()
    assert settling_count(300, policy) == 60
    assert settling_count(10, policy) == 5
    assert settling_count(0, policy) == 5


def test_settled_slice_may_be_empty():
    policy = ScoringPolicy()
    assert len(settled_slice(np.zeros(3), policy)) == 0


def test_split_segments_drops_remainder():
    segments = split_segments(np.arange(70), 30)
    assert len(segments) == 2
    assert segments[1][0] == 30
    assert split_segments(np.arange(29), 30) == []


def test_worst_average():
    assert worst_average([1.0, 5.0, 3.0, 2.0], 0.25) == 5.0
    assert worst_average([1.0, 5.0, 3.0, 2.0, 4.0], 0.25) == 4.5
    assert worst_average([], 0.25) == 0.0
