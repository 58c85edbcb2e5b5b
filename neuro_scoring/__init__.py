# neuro_scoring/__init__.py
"""
Neuro Scoring Package.

Contains:
- Sample buffer and dispersion statistics
- Live and final stability scorers (settling, worst-segment penalty)
- Gaze estimation and target proximity tracking
- Task session state machine with cancellable drivers
- Landmark/result IO, interpretation bands and plotting (optional)
"""

from .config import ScoringPolicy, SessionConfig, ConfigBuilder
from .domain import Detection, Landmark, SessionState, TaskResult, TaskType
from .buffer import SampleBuffer
from .scoring import FinalScorer, LiveScorer
from .session import SessionStateError, TaskSession
from .replay import replay_session
from .interpretation import clinical_classification, overall_score, score_label

__all__ = [
    "ScoringPolicy",
    "SessionConfig",
    "ConfigBuilder",
    "Detection",
    "Landmark",
    "SessionState",
    "TaskResult",
    "TaskType",
    "SampleBuffer",
    "FinalScorer",
    "LiveScorer",
    "SessionStateError",
    "TaskSession",
    "replay_session",
    "clinical_classification",
    "overall_score",
    "score_label",
]
