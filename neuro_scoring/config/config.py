# neuro_scoring/config/config.py
"""
Configuration classes for the scoring engine.

This module defines the parameters for:
  - the Scoring Policy (statistic, response curve, settling, worst-segment
    penalty, live scoring), one per task type
  - one task attempt (duration, countdown, target relocation, proximity)

Example:
    >>> from neuro_scoring.config import ScoringPolicy, SessionConfig
    >>> from neuro_scoring.domain import TaskType
    >>>
    >>> # Canonical motor configuration
    >>> cfg = SessionConfig.for_task(TaskType.MOTOR)
    >>>
    >>> # Linear variance mapping instead of the sigmoid
    >>> policy = ScoringPolicy.for_task(TaskType.MOTOR).with_overrides(
    ...     statistic="position_variance",
    ...     curve="linear",
    ... )
    >>> cfg = SessionConfig.for_task(TaskType.MOTOR, policy=policy, duration_s=30.0)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Literal, Optional

from ..domain.enums import TaskType
from .constants import ScoringConstants, SessionConstants, ValidationMessages

StatisticName = Literal["position_rms", "position_variance", "delta_rms", "delta_mean"]
CurveName = Literal["sigmoid", "linear", "log"]

# Position statistics need (x, y) points, delta statistics need gaze deltas
_STATISTIC_TASK: Dict[str, TaskType] = {
    "position_rms": TaskType.MOTOR,
    "position_variance": TaskType.MOTOR,
    "delta_rms": TaskType.OCULAR,
    "delta_mean": TaskType.OCULAR,
}


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Parameters shared by the live and final scorer of one task type.
    """

    # Dispersion statistic
    # - "position_rms":      RMS displacement of points from their centroid
    # - "position_variance": summed per-axis population variance of points
    # - "delta_rms":         RMS of frame-to-frame deltas
    # - "delta_mean":        mean frame-to-frame delta
    statistic: StatisticName = "position_rms"

    # Response curve mapping the statistic to [0, 100]
    # - "sigmoid": 100 / (1 + exp(k * (s - midpoint)))
    # - "linear":  100 - s * scale_factor
    # - "log":     ((log10(s) + offset) / span) * 100
    curve: CurveName = "sigmoid"

    sigmoid_steepness: float = ScoringConstants.MOTOR_SIGMOID_STEEPNESS
    sigmoid_midpoint: float = ScoringConstants.MOTOR_SIGMOID_MIDPOINT
    linear_scale_factor: float = ScoringConstants.LINEAR_SCALE_FACTOR
    log_offset: float = ScoringConstants.LOG_OFFSET
    log_span: float = ScoringConstants.LOG_SPAN

    # Settling exclusion: skip max(min_settling_samples, floor(n * fraction))
    settling_fraction: float = ScoringConstants.SETTLING_FRACTION
    min_settling_samples: int = ScoringConstants.MIN_SETTLING_SAMPLES

    # Below these counts the final scorer returns the neutral score
    min_final_samples: int = ScoringConstants.MIN_FINAL_SAMPLES
    min_settled_samples: int = ScoringConstants.MIN_SETTLED_SAMPLES

    # Worst-segment penalty
    segment_size: int = ScoringConstants.SEGMENT_SIZE
    min_segments: int = ScoringConstants.MIN_SEGMENTS
    worst_fraction: float = ScoringConstants.WORST_FRACTION
    worst_weight: float = ScoringConstants.WORST_WEIGHT

    # Live scoring
    # live_cumulative=False: score the trailing live_window samples only
    # live_cumulative=True:  blend the settled cumulative score with the
    #                        trailing window, capped at cumulative + margin
    live_min_samples: int = ScoringConstants.MOTOR_LIVE_MIN_SAMPLES
    live_window: int = ScoringConstants.LIVE_WINDOW
    live_cumulative: bool = False
    live_recent_weight: float = ScoringConstants.LIVE_RECENT_WEIGHT
    live_recovery_margin: float = ScoringConstants.LIVE_RECOVERY_MARGIN

    def __post_init__(self) -> None:
        if not 0.0 <= self.settling_fraction < 1.0:
            raise ValueError(ValidationMessages.INVALID_SETTLING_FRACTION)
        if self.segment_size < 2:
            raise ValueError(ValidationMessages.INVALID_SEGMENT_SIZE)
        if not 0.0 < self.worst_fraction <= 1.0:
            raise ValueError(ValidationMessages.INVALID_WORST_FRACTION)
        if not 0.0 <= self.worst_weight <= 1.0:
            raise ValueError(ValidationMessages.INVALID_WORST_WEIGHT)
        if self.live_window < 1:
            raise ValueError(ValidationMessages.INVALID_LIVE_WINDOW)
        if not 0.0 <= self.live_recent_weight <= 1.0:
            raise ValueError(ValidationMessages.INVALID_RECENT_WEIGHT)
        if self.sigmoid_steepness <= 0:
            raise ValueError(ValidationMessages.INVALID_STEEPNESS)
        if self.linear_scale_factor <= 0:
            raise ValueError(ValidationMessages.INVALID_SCALE_FACTOR)
        if self.log_span == 0:
            raise ValueError(ValidationMessages.INVALID_LOG_SPAN)

    @classmethod
    def for_task(cls, task_type: TaskType) -> ScoringPolicy:
        """Canonical policy for a task type."""
        if task_type is TaskType.MOTOR:
            return cls()
        return cls(
            statistic="delta_rms",
            sigmoid_steepness=ScoringConstants.OCULAR_SIGMOID_STEEPNESS,
            sigmoid_midpoint=ScoringConstants.OCULAR_SIGMOID_MIDPOINT,
            live_min_samples=ScoringConstants.OCULAR_LIVE_MIN_SAMPLES,
            live_cumulative=True,
        )

    def with_overrides(self, **changes: Any) -> ScoringPolicy:
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ScoringPolicy:
        return cls(**data)


@dataclass(frozen=True)
class SessionConfig:
    """
    Configuration of one task attempt.
    """

    task_type: TaskType
    # None selects the canonical policy of the task type
    policy: Optional[ScoringPolicy] = None

    # Tracking duration and pre-tracking countdown (seconds)
    duration_s: float = SessionConstants.TASK_DURATION_S
    countdown_s: float = SessionConstants.MOTOR_COUNTDOWN_S

    # Ocular target: relocation interval, placement margin, on-target radius
    target_interval_s: float = SessionConstants.TARGET_INTERVAL_S
    target_margin: float = SessionConstants.TARGET_MARGIN
    on_target_radius: float = SessionConstants.ON_TARGET_RADIUS

    # Discount the ocular final score when gaze was mostly off target
    on_target_penalty: bool = True

    # Number of trailing points/deltas kept in the result record
    series_length: int = SessionConstants.SERIES_LENGTH

    # Seed for target relocation (None = nondeterministic)
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.policy is None:
            object.__setattr__(self, "policy", ScoringPolicy.for_task(self.task_type))
        if self.duration_s <= 0:
            raise ValueError(ValidationMessages.INVALID_DURATION)
        if self.countdown_s < 0:
            raise ValueError(ValidationMessages.INVALID_COUNTDOWN)
        if self.target_interval_s <= 0:
            raise ValueError(ValidationMessages.INVALID_TARGET_INTERVAL)
        if self.on_target_radius <= 0:
            raise ValueError(ValidationMessages.INVALID_RADIUS)
        if not 0.0 <= self.target_margin < 0.5:
            raise ValueError(ValidationMessages.INVALID_TARGET_MARGIN)
        if self.series_length < 0:
            raise ValueError(ValidationMessages.INVALID_SERIES_LENGTH)
        expected = _STATISTIC_TASK.get(self.policy.statistic)
        if expected is not None and expected is not self.task_type:
            raise ValueError(
                ValidationMessages.STATISTIC_TASK_MISMATCH.format(
                    self.policy.statistic, self.task_type.value
                )
            )

    @classmethod
    def for_task(cls, task_type: TaskType, **overrides: Any) -> SessionConfig:
        """Canonical session configuration, with optional field overrides."""
        params: Dict[str, Any] = {
            "task_type": task_type,
            "policy": ScoringPolicy.for_task(task_type),
            "countdown_s": (
                SessionConstants.MOTOR_COUNTDOWN_S
                if task_type is TaskType.MOTOR
                else SessionConstants.OCULAR_COUNTDOWN_S
            ),
        }
        params.update(overrides)
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["task_type"] = self.task_type.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SessionConfig:
        params = dict(data)
        params["task_type"] = TaskType(params["task_type"])
        if params.get("policy") is not None:
            params["policy"] = ScoringPolicy.from_dict(params["policy"])
        return cls(**params)
