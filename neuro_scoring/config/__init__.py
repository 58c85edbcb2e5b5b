"""Configuration and constants for the scoring engine."""

from .config import ScoringPolicy, SessionConfig
from .constants import (
    GazeConstants,
    HandConstants,
    ScoringConstants,
    SessionConstants,
    ValidationMessages,
)
from .config_builder import ConfigBuilder

__all__ = [
    "ScoringPolicy",
    "SessionConfig",
    "GazeConstants",
    "HandConstants",
    "ScoringConstants",
    "SessionConstants",
    "ValidationMessages",
    "ConfigBuilder",
]
