# neuro_scoring/session.py
"""
Task session state machine.

    LOADING -> READY -> (COUNTDOWN) -> TRACKING -> DONE

  - restart():      COUNTDOWN / TRACKING / DONE -> READY, discards the buffer
  - skip():         any state before DONE -> DONE with the all-zero result
  - finish_early(): TRACKING -> DONE through the normal final scorer
  - duration timer: TRACKING -> DONE, same as finish_early()

Each attempt (entry into COUNTDOWN/TRACKING) owns a fresh buffer, proximity
tracker, target cell and ``CancellationToken``. Every terminal or restart
transition cancels the token before anything else, so no driver can touch
a buffer the host no longer considers active. The final scorer runs behind
a one-shot guard: the duration timer and finish_early() may both fire, only
the first produces the result.

Example:
    >>> session = TaskSession(SessionConfig.for_task(TaskType.MOTOR))
    >>> session.model_ready()
    >>> session.start()
    >>> # per video frame
    >>> session.process_frame(Detection.hand(x, y))
    >>> session.tick()
    >>> if session.state is SessionState.DONE:
    ...     result = session.result
"""
from __future__ import annotations

import logging
import math
import time
from typing import Callable, Dict, List, Optional

import numpy as np

from .buffer import SampleBuffer
from .config import HandConstants, SessionConfig
from .domain import (
    Detection,
    GazeConfidence,
    LandmarkKind,
    SessionState,
    TaskResult,
    TaskType,
)
from .drivers import CancellationToken, DeadlineDriver, FrameDriver, IntervalDriver, OneShotGuard
from .gaze import estimate_gaze
from .observers import SessionObserver
from .proximity import (
    CENTER_TARGET,
    Target,
    TargetCell,
    TargetProximityTracker,
    TargetRelocator,
    on_target_penalty_factor,
)
from .scoring import FinalScore, FinalScorer, LiveScorer
from .strategies import axis_variances
from .utils import euclidean, round_half_up

logger = logging.getLogger(__name__)


class SessionStateError(RuntimeError):
    """A command was issued in a state that does not accept it."""


class TaskSession:
    """One assessment task: buffer, scorers, drivers and lifecycle."""

    def __init__(
        self,
        config: SessionConfig,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config
        self.task_type = config.task_type
        self.live_scorer = LiveScorer(config.policy)
        self.final_scorer = FinalScorer(config.policy)

        self._clock = clock
        self._rng = rng if rng is not None else np.random.default_rng(config.seed)
        self._observers: List[SessionObserver] = []

        self._state = SessionState.LOADING
        self._closed = False
        self.restart_count = 0
        self.result: Optional[TaskResult] = None
        self.live_score: Optional[float] = None
        self.gaze_on_target = False

        self._token = CancellationToken()
        self._buffer: Optional[SampleBuffer] = None
        self._tracker: Optional[TargetProximityTracker] = None
        self._target_cell: Optional[TargetCell] = None
        self._previous_gaze: Optional[tuple] = None
        self._confidence_counts: Dict[GazeConfidence, int] = {}
        self._frame_driver: Optional[FrameDriver[Optional[Detection]]] = None
        self._countdown_driver: Optional[DeadlineDriver] = None
        self._target_driver: Optional[IntervalDriver] = None
        self._duration_driver: Optional[DeadlineDriver] = None
        self._finish_guard = OneShotGuard()
        self._tracking_started_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def register_observer(self, observer: SessionObserver) -> None:
        """
        Register an observer to receive session notifications.

        Args:
            observer: SessionObserver instance
        """
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, method: str, *args) -> None:
        for observer in list(self._observers):
            try:
                getattr(observer, method)(self, *args)
            except Exception:
                logger.warning(
                    "Observer %s failed on %s", type(observer).__name__, method, exc_info=True
                )

    # ------------------------------------------------------------------
    # Readouts
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def sample_count(self) -> int:
        return len(self._buffer) if self._buffer is not None else 0

    @property
    def buffer(self) -> Optional[SampleBuffer]:
        return self._buffer

    @property
    def target(self) -> Optional[Target]:
        if self._target_cell is None:
            return None
        return self._target_cell.read()

    @property
    def on_target_percent(self) -> Optional[int]:
        if self._tracker is None:
            return None
        return self._tracker.on_target_percent

    def time_left(self, now: Optional[float] = None) -> int:
        """Whole seconds of tracking left."""
        duration = self.config.duration_s
        if self._state is SessionState.DONE:
            return 0
        if self._state is not SessionState.TRACKING or self._tracking_started_at is None:
            return int(math.ceil(duration))
        now = self._clock() if now is None else now
        elapsed = math.floor(now - self._tracking_started_at)
        return int(max(0, math.ceil(duration - elapsed)))

    def countdown_value(self, now: Optional[float] = None) -> Optional[int]:
        """Seconds left on the pre-tracking countdown, None outside COUNTDOWN."""
        if self._state is not SessionState.COUNTDOWN or self._countdown_driver is None:
            return None
        now = self._clock() if now is None else now
        return int(math.ceil(self._countdown_driver.remaining(now)))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _require(self, command: str, *allowed: SessionState) -> None:
        if self._closed:
            raise SessionStateError(f"{command}: session is closed")
        if self._state not in allowed:
            raise SessionStateError(f"{command} not allowed in state {self._state.value}")

    def _set_state(self, new_state: SessionState) -> None:
        previous = self._state
        self._state = new_state
        logger.debug("%s session %s -> %s", self.task_type.value, previous.value, new_state.value)
        self._notify("on_state_change", previous, new_state)

    def model_ready(self) -> None:
        """The landmark model finished loading."""
        self._require("model_ready", SessionState.LOADING)
        self._set_state(SessionState.READY)

    def start(self, now: Optional[float] = None) -> None:
        """Begin an attempt: countdown first when configured, else tracking."""
        self._require("start", SessionState.READY)
        now = self._clock() if now is None else now
        self._token = CancellationToken()
        self.result = None
        if self.config.countdown_s > 0:
            deadline = now + self.config.countdown_s
            self._countdown_driver = DeadlineDriver(
                deadline, lambda: self._begin_tracking(deadline), self._token
            )
            self._set_state(SessionState.COUNTDOWN)
        else:
            self._begin_tracking(now)

    def _begin_tracking(self, now: float) -> None:
        token = self._token
        width = 2 if self.task_type is TaskType.MOTOR else 1
        self._buffer = SampleBuffer(width=width)
        self.live_score = None
        self.gaze_on_target = False
        self._previous_gaze = None
        self._confidence_counts = {c: 0 for c in GazeConfidence}
        self._finish_guard = OneShotGuard()
        self._tracking_started_at = now
        self._countdown_driver = None

        self._frame_driver = FrameDriver(self._handle_frame, token)
        self._duration_driver = DeadlineDriver(now + self.config.duration_s, self._finish, token)

        if self.task_type is TaskType.OCULAR:
            self._tracker = TargetProximityTracker(self.config.on_target_radius)
            self._target_cell = TargetCell(CENTER_TARGET)
            relocator = TargetRelocator(self._target_cell, self.config.target_margin, self._rng)
            self._target_driver = IntervalDriver(
                self.config.target_interval_s, relocator.relocate, token, now
            )

        logger.info(
            "%s tracking started (duration=%.1fs, restarts=%s, statistic=%s, curve=%s)",
            self.task_type.value,
            self.config.duration_s,
            self.restart_count,
            self.final_scorer.statistic.get_description(),
            self.final_scorer.curve.get_description(),
        )
        self._set_state(SessionState.TRACKING)

    def tick(self, now: Optional[float] = None) -> SessionState:
        """Advance the countdown, target relocation and duration timers."""
        if self._closed:
            return self._state
        now = self._clock() if now is None else now
        if self._state is SessionState.COUNTDOWN and self._countdown_driver is not None:
            self._countdown_driver.tick(now)
        if self._state is SessionState.TRACKING:
            if self._target_driver is not None:
                self._target_driver.tick(now)
            if self._duration_driver is not None:
                self._duration_driver.tick(now)
        return self._state

    def process_frame(self, detection: Optional[Detection]) -> Optional[float]:
        """
        Feed one detection cycle.

        Args:
            detection: Landmarks found in the frame. ``None`` means nothing
                was detected; the frame is skipped, never treated as zero
                motion.

        Returns:
            Current live score, or None outside TRACKING
        """
        if self._closed or self._state is not SessionState.TRACKING or self._frame_driver is None:
            return None
        self._frame_driver.push(detection)
        return self.live_score

    def finish_early(self) -> Optional[TaskResult]:
        """End tracking now and score what was collected."""
        if self._state is SessionState.DONE and not self._closed:
            return self.result
        self._require("finish_early", SessionState.TRACKING)
        return self._finish()

    def skip(self) -> TaskResult:
        """Abandon the task; yields the all-zero skipped result."""
        self._require(
            "skip",
            SessionState.LOADING,
            SessionState.READY,
            SessionState.COUNTDOWN,
            SessionState.TRACKING,
        )
        self._token.cancel()
        self._finish_guard.run(lambda: None)
        self._release()
        self.result = self._skipped_result()
        self._set_state(SessionState.DONE)
        self._notify("on_complete", self.result)
        return self.result

    def restart(self) -> None:
        """Stop all drivers, discard the attempt and return to READY."""
        self._require(
            "restart", SessionState.COUNTDOWN, SessionState.TRACKING, SessionState.DONE
        )
        self._token.cancel()
        self._release()
        self.result = None
        self.restart_count += 1
        logger.info("%s task restarted (count=%s)", self.task_type.value, self.restart_count)
        self._set_state(SessionState.READY)

    def close(self) -> None:
        """Unmount: stop all drivers and release the buffer."""
        self._token.cancel()
        self._release()
        self._closed = True
        logger.debug("%s session closed", self.task_type.value)

    def _release(self) -> None:
        self._buffer = None
        self._tracker = None
        self._target_cell = None
        self._frame_driver = None
        self._countdown_driver = None
        self._target_driver = None
        self._duration_driver = None
        self._tracking_started_at = None
        self._previous_gaze = None
        self.live_score = None
        self.gaze_on_target = False

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------

    def _handle_frame(self, detection: Optional[Detection]) -> None:
        if detection is None or detection.is_empty():
            return
        if self.task_type is TaskType.MOTOR:
            self._handle_hand(detection)
        else:
            self._handle_face(detection)

    def _handle_hand(self, detection: Detection) -> None:
        if detection.kind is not LandmarkKind.HAND:
            return
        wrist = detection.get(HandConstants.WRIST)
        if wrist is None or not wrist.is_finite():
            logger.debug("Skipping frame without a usable wrist landmark")
            return
        self._buffer.append((wrist.x, wrist.y))
        self._update_live_score()

    def _handle_face(self, detection: Detection) -> None:
        if detection.kind is not LandmarkKind.FACE:
            return
        token = self._token
        gaze = estimate_gaze(detection)
        if gaze is None or not (math.isfinite(gaze.x) and math.isfinite(gaze.y)):
            logger.debug("Skipping frame without a usable gaze estimate")
            return
        self._confidence_counts[gaze.confidence] += 1

        if self._previous_gaze is not None:
            px, py = self._previous_gaze
            self._buffer.append(euclidean(px, py, gaze.x, gaze.y))
            self._update_live_score()
            # an observer may have ended or restarted the attempt
            if token.cancelled:
                return
        self._previous_gaze = (gaze.x, gaze.y)

        target = self._target_cell.read()
        self.gaze_on_target = self._tracker.update(gaze.x, gaze.y, target)

    def _update_live_score(self) -> None:
        self.live_score = self.live_scorer.score(self._buffer)
        self._notify("on_live_score", self.live_score)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _finish(self) -> TaskResult:
        return self._finish_guard.run(self._complete)

    def _complete(self) -> TaskResult:
        self._token.cancel()
        snapshot = self._buffer.snapshot()
        final = self.final_scorer.score(snapshot)
        if self.task_type is TaskType.MOTOR:
            result = self._motor_result(snapshot, final)
        else:
            result = self._ocular_result(snapshot, final)
        self.result = result
        self._set_state(SessionState.DONE)
        self._notify("on_complete", result)
        return result

    def _series(self, snapshot: np.ndarray) -> tuple:
        n = self.config.series_length
        if n == 0:
            return ()
        tail = snapshot[-n:]
        if snapshot.ndim == 2:
            return tuple((float(x), float(y)) for x, y in tail)
        return tuple(float(d) for d in tail)

    @staticmethod
    def _final_stats(final: FinalScore) -> Dict[str, float]:
        return {
            "settled_count": final.settled_count,
            "segment_count": final.segment_count,
            "cumulative_statistic": final.cumulative_statistic,
            "worst_segment_statistic": final.worst_statistic,
            "penalized_statistic": final.penalized_statistic,
        }

    def _motor_result(self, snapshot: np.ndarray, final: FinalScore) -> TaskResult:
        variance_x, variance_y = axis_variances(snapshot)
        aux = {"variance_x": variance_x, "variance_y": variance_y}
        aux.update(self._final_stats(final))
        return TaskResult(
            task_type=self.task_type,
            score=round_half_up(final.score, 1),
            sample_count=len(snapshot),
            series=self._series(snapshot),
            aux_stats=aux,
            was_skipped=False,
            restart_count=self.restart_count,
        )

    def _ocular_result(self, deltas: np.ndarray, final: FinalScore) -> TaskResult:
        on_target = self._tracker.on_target_percent
        score = final.score
        if self.config.on_target_penalty and final.sufficient:
            score *= on_target_penalty_factor(on_target)
        aux = {
            "mean_delta": float(deltas.mean()) if len(deltas) else 0.0,
            "max_delta": float(deltas.max()) if len(deltas) else 0.0,
            "on_target_frames": self._tracker.on_target_frames,
            "total_frames": self._tracker.total_frames,
        }
        aux.update({f"{c.value}_confidence_frames": n for c, n in self._confidence_counts.items()})
        aux.update(self._final_stats(final))
        return TaskResult(
            task_type=self.task_type,
            score=round_half_up(score, 1),
            sample_count=len(deltas),
            series=self._series(deltas),
            aux_stats=aux,
            was_skipped=False,
            restart_count=self.restart_count,
            on_target_percent=on_target,
        )

    def _skipped_result(self) -> TaskResult:
        final = FinalScore.skipped()
        if self.task_type is TaskType.MOTOR:
            aux = {"variance_x": 0.0, "variance_y": 0.0}
            on_target = None
        else:
            aux = {"mean_delta": 0.0, "max_delta": 0.0}
            on_target = 0
        return TaskResult(
            task_type=self.task_type,
            score=final.score,
            sample_count=final.sample_count,
            series=(),
            aux_stats=aux,
            was_skipped=True,
            restart_count=self.restart_count,
            on_target_percent=on_target,
        )
