"""Enumerations shared across the scoring engine."""
from __future__ import annotations

from enum import Enum


class TaskType(Enum):
    """Assessment task scored by the engine."""

    MOTOR = "motor"
    OCULAR = "ocular"


class SessionState(Enum):
    """Lifecycle of one task attempt."""

    LOADING = "loading"
    READY = "ready"
    COUNTDOWN = "countdown"
    TRACKING = "tracking"
    DONE = "done"


class LandmarkKind(Enum):
    """Landmark set delivered by the detection model."""

    HAND = "hand"
    FACE = "face"


class GazeConfidence(Enum):
    """Which landmark tier produced a gaze estimate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
