# neuro_scoring/observers.py
"""
Observer pattern for session lifecycle events.

Decouples the session state machine from logging and result recording.

Example:
    >>> from neuro_scoring.observers import LoggingReporter, ResultRecorder
    >>> session = TaskSession(SessionConfig.for_task(TaskType.MOTOR))
    >>> session.register_observer(LoggingReporter())
    >>> session.register_observer(ResultRecorder("results/history.csv"))
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import pandas as pd

from .domain import SessionState, TaskResult

if TYPE_CHECKING:
    from .session import TaskSession

logger = logging.getLogger(__name__)


class SessionObserver(ABC):
    """
    Abstract base class for session observers.

    Observers are notified on state transitions, live score updates and
    completion. An observer raising an exception is logged and skipped; it
    never interrupts the session.
    """

    @abstractmethod
    def on_state_change(
        self,
        session: "TaskSession",
        previous: SessionState,
        current: SessionState,
    ) -> None:
        pass

    @abstractmethod
    def on_live_score(self, session: "TaskSession", score: float) -> None:
        pass

    @abstractmethod
    def on_complete(self, session: "TaskSession", result: TaskResult) -> None:
        pass


class LoggingReporter(SessionObserver):
    """Reports lifecycle events through ``logging``."""

    def __init__(self, log_live_scores: bool = False) -> None:
        self.log_live_scores = log_live_scores

    def on_state_change(self, session, previous, current) -> None:
        logger.info(
            "%s task: %s -> %s (restarts=%s)",
            session.task_type.value,
            previous.value,
            current.value,
            session.restart_count,
        )

    def on_live_score(self, session, score) -> None:
        if self.log_live_scores:
            logger.debug("%s live score %.1f", session.task_type.value, score)

    def on_complete(self, session, result) -> None:
        if result.was_skipped:
            logger.info("%s task skipped", result.task_type.value)
            return
        logger.info(
            "%s task complete: score=%.1f samples=%s on_target=%s",
            result.task_type.value,
            result.score,
            result.sample_count,
            result.on_target_percent,
        )


class ResultRecorder(SessionObserver):
    """
    Appends one row per completed result to a CSV file.

    Example:
        >>> recorder = ResultRecorder("logs/results.csv")
        >>> session.register_observer(recorder)
    """

    COLUMNS = [
        "completed_at",
        "task_type",
        "score",
        "sample_count",
        "on_target_percent",
        "was_skipped",
        "restart_count",
    ]

    def __init__(self, log_file: str) -> None:
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def on_state_change(self, session, previous, current) -> None:
        pass

    def on_live_score(self, session, score) -> None:
        pass

    def on_complete(self, session, result) -> None:
        row: Dict[str, Any] = {
            "completed_at": result.completed_at.isoformat(),
            "task_type": result.task_type.value,
            "score": result.score,
            "sample_count": result.sample_count,
            "on_target_percent": result.on_target_percent,
            "was_skipped": result.was_skipped,
            "restart_count": result.restart_count,
        }
        frame = pd.DataFrame([row], columns=self.COLUMNS)
        write_header = not self.log_file.exists()
        frame.to_csv(self.log_file, mode="a", header=write_header, index=False)

    def load(self) -> pd.DataFrame:
        """All recorded results (empty frame if nothing was recorded yet)."""
        if not self.log_file.exists():
            return pd.DataFrame(columns=self.COLUMNS)
        return pd.read_csv(self.log_file)
