# neuro_scoring/config/constants.py
"""Scoring, gaze and session constants for the screening tasks."""

from __future__ import annotations


class ScoringConstants:
    """Canonical calibration of the scoring curves and final-score rules."""

    # Neutral readout when there is not enough signal to assess
    NEUTRAL_SCORE: float = 50.0
    MIN_SCORE: float = 0.0
    MAX_SCORE: float = 100.0

    # Motor task (wrist RMS displacement from centroid, normalized coords)
    # RMS ~0.0015 -> ~97, ~0.01 -> ~88, ~0.02 -> 50, ~0.04 -> ~2
    MOTOR_SIGMOID_STEEPNESS: float = 200.0
    MOTOR_SIGMOID_MIDPOINT: float = 0.02

    # Ocular task (RMS of frame-to-frame gaze deltas)
    OCULAR_SIGMOID_STEEPNESS: float = 200.0
    OCULAR_SIGMOID_MIDPOINT: float = 0.012

    # Linear variance mapping: 100 - variance * scale
    LINEAR_SCALE_FACTOR: float = 8000.0

    # Log mean-delta mapping: ((log10(mean) + offset) / span) * 100
    LOG_OFFSET: float = 3.5
    LOG_SPAN: float = -2.5

    # Settling exclusion
    SETTLING_FRACTION: float = 0.2
    MIN_SETTLING_SAMPLES: int = 5
    MIN_FINAL_SAMPLES: int = 10
    MIN_SETTLED_SAMPLES: int = 5

    # Worst-segment penalty
    SEGMENT_SIZE: int = 30
    MIN_SEGMENTS: int = 3
    WORST_FRACTION: float = 0.25
    WORST_WEIGHT: float = 0.3

    # Live scoring
    MOTOR_LIVE_MIN_SAMPLES: int = 15
    OCULAR_LIVE_MIN_SAMPLES: int = 10
    LIVE_WINDOW: int = 60
    LIVE_RECENT_WEIGHT: float = 0.5
    LIVE_RECOVERY_MARGIN: float = 5.0


class GazeConstants:
    """MediaPipe face-mesh indices and gaze validation bounds."""

    LEFT_IRIS: int = 468
    RIGHT_IRIS: int = 473
    LEFT_EYE_OUTER: int = 33
    LEFT_EYE_INNER: int = 133
    RIGHT_EYE_INNER: int = 362
    RIGHT_EYE_OUTER: int = 263
    NOSE_TIP: int = 1

    # Iris x relative to the eye width must fall inside [-0.2, 1.2]
    IRIS_RELATIVE_MIN: float = -0.2
    IRIS_RELATIVE_MAX: float = 1.2
    MIN_EYE_WIDTH: float = 0.001

    # Eyes sit above the nose tip
    NOSE_TO_EYE_OFFSET_Y: float = 0.05


class HandConstants:
    """MediaPipe hand-landmark indices."""

    WRIST: int = 0


class SessionConstants:
    """Timing defaults for one task attempt."""

    TASK_DURATION_S: float = 15.0
    MOTOR_COUNTDOWN_S: float = 3.0
    OCULAR_COUNTDOWN_S: float = 0.0

    TARGET_INTERVAL_S: float = 2.0
    TARGET_MARGIN: float = 0.15
    ON_TARGET_RADIUS: float = 0.15

    # Below this on-target percentage the ocular final score is discounted
    ON_TARGET_PENALTY_THRESHOLD: int = 50
    ON_TARGET_PENALTY_FLOOR: float = 0.6

    SERIES_LENGTH: int = 300


class ValidationMessages:
    """Standard validation and error messages."""

    INVALID_SETTLING_FRACTION = "settling_fraction must be in [0, 1)"
    INVALID_SEGMENT_SIZE = "segment_size must be >= 2"
    INVALID_WORST_FRACTION = "worst_fraction must be in (0, 1]"
    INVALID_WORST_WEIGHT = "worst_weight must be in [0, 1]"
    INVALID_LIVE_WINDOW = "live_window must be >= 1"
    INVALID_RECENT_WEIGHT = "live_recent_weight must be in [0, 1]"
    INVALID_STEEPNESS = "sigmoid_steepness must be > 0"
    INVALID_SCALE_FACTOR = "linear_scale_factor must be > 0"
    INVALID_LOG_SPAN = "log_span must be non-zero"
    INVALID_DURATION = "duration_s must be > 0"
    INVALID_COUNTDOWN = "countdown_s must be >= 0"
    INVALID_TARGET_INTERVAL = "target_interval_s must be > 0"
    INVALID_RADIUS = "on_target_radius must be > 0"
    INVALID_TARGET_MARGIN = "target_margin must be in [0, 0.5)"
    INVALID_SERIES_LENGTH = "series_length must be >= 0"
    MISSING_LANDMARK_COLUMNS = "Landmark TSV must contain columns: frame, landmark, x, y"
    UNKNOWN_STATISTIC = "Unknown statistic: {}"
    UNKNOWN_CURVE = "Unknown response curve: {}"
    STATISTIC_TASK_MISMATCH = "Statistic {} does not apply to the {} task"
