"""Domain models for landmark streams and task results."""

from .enums import GazeConfidence, LandmarkKind, SessionState, TaskType
from .landmarks import Detection, GazeEstimate, Landmark
from .results import TaskResult

__all__ = [
    "GazeConfidence",
    "LandmarkKind",
    "SessionState",
    "TaskType",
    "Detection",
    "GazeEstimate",
    "Landmark",
    "TaskResult",
]
