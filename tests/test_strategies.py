import math

import numpy as np
import pytest

from neuro_scoring.config import ScoringPolicy
from neuro_scoring.domain import TaskType
from neuro_scoring.strategies import (
    DeltaMeanStatistic,
    DeltaRmsStatistic,
    LinearScaleCurve,
    LogMeanCurve,
    PositionRmsStatistic,
    PositionVarianceStatistic,
    SigmoidCurve,
    axis_variances,
    build_curve,
    build_statistic,
)


SQUARE = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, 2.0], [2.0, 2.0]])


def test_position_variance_and_rms():
    assert PositionVarianceStatistic().compute(SQUARE) == pytest.approx(2.0)
    assert PositionRmsStatistic().compute(SQUARE) == pytest.approx(math.sqrt(2.0))


def test_delta_statistics():
    deltas = np.array([3.0, 4.0])
    assert DeltaRmsStatistic().compute(deltas) == pytest.approx(math.sqrt(12.5))
    assert DeltaMeanStatistic().compute(deltas) == pytest.approx(3.5)


def test_empty_input_is_zero():
    assert PositionRmsStatistic().compute(np.empty((0, 2))) == 0.0
    assert DeltaRmsStatistic().compute(np.empty(0)) == 0.0


def test_axis_variances():
    var_x, var_y = axis_variances(np.array([[0.0, 0.0], [2.0, 4.0]]))
    assert var_x == pytest.approx(1.0)
    assert var_y == pytest.approx(4.0)
    assert axis_variances(np.array([[0.5, 0.5]])) == (0.0, 0.0)


def test_sigmoid_curve():
    curve = SigmoidCurve(200.0, 0.02)
    assert curve.score(0.02) == pytest.approx(50.0)
    assert curve.score(0.0) == pytest.approx(100.0 / (1.0 + math.exp(-4.0)))
    assert curve.score(10.0) == 0.0


def test_curves_are_monotonically_decreasing():
    stats = np.linspace(0.0, 0.1, 50)
    for curve in (SigmoidCurve(200.0, 0.02), LinearScaleCurve(8000.0), LogMeanCurve(3.5, -2.5)):
        scores = [curve.score(s) for s in stats]
        assert all(a >= b for a, b in zip(scores, scores[1:]))
        assert all(0.0 <= s <= 100.0 for s in scores)


def test_non_finite_statistic_scores_minimum():
    curve = SigmoidCurve(200.0, 0.02)
    assert curve.score(float("nan")) == 0.0
    assert curve.score(float("inf")) == 0.0


def test_linear_curve_clamps():
    curve = LinearScaleCurve(8000.0)
    assert curve.score(0.005) == pytest.approx(60.0)
    assert curve.score(1.0) == 0.0


def test_log_curve_anchors():
    curve = LogMeanCurve(3.5, -2.5)
    assert curve.score(0.0) == 100.0
    assert curve.score(1e-6) == pytest.approx(100.0)
    assert curve.score(10 ** -3.5) == pytest.approx(0.0)
    assert curve.score(1e-5) == pytest.approx(60.0)


def test_build_from_policy():
    motor = ScoringPolicy.for_task(TaskType.MOTOR)
    ocular = ScoringPolicy.for_task(TaskType.OCULAR)
    assert isinstance(build_statistic(motor), PositionRmsStatistic)
    assert isinstance(build_statistic(ocular), DeltaRmsStatistic)
    assert isinstance(build_curve(motor), SigmoidCurve)
    assert isinstance(build_curve(motor.with_overrides(curve="linear")), LinearScaleCurve)


def test_unknown_strategy_names():
    with pytest.raises(ValueError):
        build_statistic(ScoringPolicy(statistic="jerk"))
    with pytest.raises(ValueError):
        build_curve(ScoringPolicy(curve="cubic"))


def test_descriptions():
    assert PositionRmsStatistic().get_description() == "PositionRMS"
    assert PositionVarianceStatistic().get_description() == "PositionVariance"
    assert DeltaRmsStatistic().get_description() == "DeltaRMS"
    assert DeltaMeanStatistic().get_description() == "DeltaMean"
    assert SigmoidCurve(200.0, 0.012).get_description() == "Sigmoid(k=200.0, midpoint=0.012)"
    assert LinearScaleCurve(8000.0).get_description() == "Linear(scale=8000.0)"
    assert LogMeanCurve(3.5, -2.5).get_description() == "Log(offset=3.5, span=-2.5)"
