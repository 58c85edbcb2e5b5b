# neuro_scoring/replay.py
"""Drive a task session over a recorded detection stream on a simulated clock."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .config import SessionConfig
from .domain import Detection, SessionState, TaskResult
from .observers import SessionObserver
from .session import TaskSession

logger = logging.getLogger(__name__)


class SimulatedClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def replay_session(
    detections: Iterable[Optional[Detection]],
    config: SessionConfig,
    fps: float = 30.0,
    observers: Optional[List[SessionObserver]] = None,
) -> TaskResult:
    """
    Run one full attempt: model ready, start, countdown, then one recorded
    detection per frame at ``fps`` until the duration timer ends the task.

    A recording shorter than the task finishes early with what was
    collected.

    Args:
        detections: One entry per video frame, None for frames without detection
        config: Session configuration of the task
        fps: Frame rate of the recording
        observers: Optional SessionObserver instances to register

    Returns:
        TaskResult of the attempt
    """
    if fps <= 0:
        raise ValueError("fps must be > 0")
    clock = SimulatedClock()
    session = TaskSession(config, clock=clock)
    for observer in observers or []:
        session.register_observer(observer)

    frame_interval = 1.0 / fps
    session.model_ready()
    session.start()
    while session.state is SessionState.COUNTDOWN:
        clock.advance(frame_interval)
        session.tick()

    frames = 0
    for detection in detections:
        if session.state is not SessionState.TRACKING:
            break
        session.process_frame(detection)
        frames += 1
        clock.advance(frame_interval)
        session.tick()

    if session.state is SessionState.TRACKING:
        logger.info("Recording ended after %s frames, finishing early", frames)
        session.finish_early()

    logger.info("Replayed %s frames at %.1f fps", frames, fps)
    return session.result
