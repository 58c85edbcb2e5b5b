from typing import List, Optional

import numpy as np
import pytest

from neuro_scoring.config import SessionConfig
from neuro_scoring.domain import Detection, Landmark, LandmarkKind, TaskType
from neuro_scoring.observers import SessionObserver
from neuro_scoring.replay import SimulatedClock
from neuro_scoring.session import TaskSession


def noisy_points(sigma: float, n: int, seed: int = 0, center=(0.5, 0.5)) -> np.ndarray:
    """Gaussian wrist jitter around ``center`` with per-axis std ``sigma``."""
    rng = np.random.default_rng(seed)
    return np.asarray(center) + rng.normal(0.0, sigma, size=(n, 2))


def hand_detections(points) -> List[Detection]:
    return [Detection.hand(float(x), float(y)) for x, y in points]


def face_detection(
    cx: float,
    cy: float,
    with_iris: bool = False,
    with_nose: bool = True,
) -> Detection:
    """Face with eye corners centred on (cx, cy); optional iris and nose tip."""
    landmarks = {
        33: Landmark(cx - 0.10, cy),
        133: Landmark(cx - 0.04, cy),
        362: Landmark(cx + 0.04, cy),
        263: Landmark(cx + 0.10, cy),
    }
    if with_iris:
        landmarks[468] = Landmark(cx - 0.07, cy)
        landmarks[473] = Landmark(cx + 0.07, cy)
    if with_nose:
        landmarks[1] = Landmark(cx, cy + 0.08)
    return Detection(LandmarkKind.FACE, landmarks)


class RecordingObserver(SessionObserver):
    """Collects every notification for assertions."""

    def __init__(self) -> None:
        self.transitions = []
        self.live_scores: List[float] = []
        self.results = []

    def on_state_change(self, session, previous, current) -> None:
        self.transitions.append((previous, current))

    def on_live_score(self, session, score) -> None:
        self.live_scores.append(score)

    def on_complete(self, session, result) -> None:
        self.results.append(result)


def tracking_session(
    task_type: TaskType,
    clock: Optional[SimulatedClock] = None,
    **overrides,
) -> TaskSession:
    """Session already in TRACKING (countdown disabled)."""
    overrides.setdefault("countdown_s", 0.0)
    overrides.setdefault("seed", 7)
    config = SessionConfig.for_task(task_type, **overrides)
    session = TaskSession(config, clock=clock or SimulatedClock())
    session.model_ready()
    session.start()
    return session


@pytest.fixture
def clock() -> SimulatedClock:
    return SimulatedClock()


@pytest.fixture
def motor_config() -> SessionConfig:
    return SessionConfig.for_task(TaskType.MOTOR, seed=1)


@pytest.fixture
def ocular_config() -> SessionConfig:
    return SessionConfig.for_task(TaskType.OCULAR, seed=1)


@pytest.fixture
def recorder() -> RecordingObserver:
    return RecordingObserver()
