import logging
import math

import pytest

from conftest import RecordingObserver, face_detection, noisy_points, tracking_session
from neuro_scoring.config import HandConstants
from neuro_scoring.domain import Detection, Landmark, LandmarkKind, SessionState, TaskType
from neuro_scoring.observers import SessionObserver
from neuro_scoring.proximity import CENTER_TARGET
from neuro_scoring.replay import SimulatedClock
from neuro_scoring.session import SessionStateError, TaskSession

STEADY_MOTOR_SCORE = 98.2  # sigmoid(0) for the motor curve, one decimal
STEADY_OCULAR_SCORE = 91.7  # sigmoid(0) for the ocular curve, one decimal


def feed_hand(session, points):
    for x, y in points:
        session.process_frame(Detection.hand(float(x), float(y)))


def feed_face(session, cx, cy, frames):
    for _ in range(frames):
        session.process_frame(face_detection(cx, cy))


# ----------------------------------------------------------------------
# Lifecycle
# ----------------------------------------------------------------------


def test_initial_state_and_model_ready(motor_config, clock):
    session = TaskSession(motor_config, clock=clock)
    assert session.state is SessionState.LOADING
    with pytest.raises(SessionStateError):
        session.start()
    session.model_ready()
    assert session.state is SessionState.READY


def test_motor_countdown_then_tracking(motor_config, clock):
    session = TaskSession(motor_config, clock=clock)
    session.model_ready()
    session.start(now=0.0)
    assert session.state is SessionState.COUNTDOWN
    assert session.countdown_value(0.0) == 3
    assert session.process_frame(Detection.hand(0.5, 0.5)) is None

    session.tick(1.0)
    assert session.state is SessionState.COUNTDOWN
    assert session.countdown_value(1.0) == 2

    session.tick(3.0)
    assert session.state is SessionState.TRACKING
    assert session.sample_count == 0
    assert session.countdown_value(3.0) is None
    assert session.time_left(3.0) == 15
    assert session.time_left(4.5) == 14


def test_ocular_starts_tracking_immediately(ocular_config, clock):
    session = TaskSession(ocular_config, clock=clock)
    session.model_ready()
    session.start()
    assert session.state is SessionState.TRACKING
    assert session.target == CENTER_TARGET


def test_duration_timer_completes_task(clock):
    session = tracking_session(TaskType.MOTOR, clock)
    feed_hand(session, [(0.5, 0.5)] * 50)
    session.tick(14.9)
    assert session.state is SessionState.TRACKING
    session.tick(15.0)
    assert session.state is SessionState.DONE
    assert session.result.sample_count == 50
    assert session.time_left() == 0


def test_finish_early_scores_collected_samples():
    session = tracking_session(TaskType.MOTOR)
    feed_hand(session, [(0.5, 0.5)] * 100)
    result = session.finish_early()
    assert session.state is SessionState.DONE
    assert result.score == STEADY_MOTOR_SCORE
    assert result.sample_count == 100
    assert not result.was_skipped
    assert result.aux_stats["variance_x"] == 0.0
    assert "segment_count" in result.aux_stats


def test_timer_and_finish_early_produce_one_result(recorder):
    session = tracking_session(TaskType.MOTOR)
    session.register_observer(recorder)
    feed_hand(session, noisy_points(0.002, 60))
    first = session.finish_early()
    session.tick(100.0)
    second = session.finish_early()
    assert first is second
    assert len(recorder.results) == 1


def test_finish_early_outside_tracking(motor_config):
    session = TaskSession(motor_config)
    with pytest.raises(SessionStateError):
        session.finish_early()


def test_tracking_start_logs_scoring_strategies(caplog):
    with caplog.at_level(logging.INFO, logger="neuro_scoring.session"):
        tracking_session(TaskType.MOTOR)
    assert "statistic=PositionRMS" in caplog.text
    assert "curve=Sigmoid(k=200.0, midpoint=0.02)" in caplog.text


# ----------------------------------------------------------------------
# Frames
# ----------------------------------------------------------------------


def test_missing_frames_are_skipped():
    session = tracking_session(TaskType.MOTOR)
    session.process_frame(None)
    session.process_frame(Detection(LandmarkKind.HAND, {}))
    session.process_frame(Detection.hand(float("nan"), 0.5))
    session.process_frame(face_detection(0.5, 0.5))
    assert session.sample_count == 0
    session.process_frame(Detection.hand(0.5, 0.5))
    assert session.sample_count == 1


def test_motor_reads_wrist_landmark_only():
    session = tracking_session(TaskType.MOTOR)
    hand = {
        HandConstants.WRIST: Landmark(0.5, 0.5),
        9: Landmark(0.9, 0.1),
    }
    session.process_frame(Detection(LandmarkKind.HAND, {9: Landmark(0.9, 0.1)}))
    assert session.sample_count == 0
    session.process_frame(Detection(LandmarkKind.HAND, hand))
    assert session.sample_count == 1
    session.finish_early()
    assert session.result.series == ((0.5, 0.5),)


def test_live_score_neutral_until_enough_samples(recorder):
    session = tracking_session(TaskType.MOTOR)
    session.register_observer(recorder)
    feed_hand(session, [(0.5, 0.5)] * 14)
    assert session.live_score == 50.0
    feed_hand(session, [(0.5, 0.5)])
    assert session.live_score > 95.0
    assert len(recorder.live_scores) == 15


def test_series_keeps_trailing_samples():
    session = tracking_session(TaskType.MOTOR, series_length=5)
    points = [(0.5 + i * 0.001, 0.5) for i in range(20)]
    feed_hand(session, points)
    result = session.finish_early()
    assert len(result.series) == 5
    assert result.series[-1] == pytest.approx(points[-1])


# ----------------------------------------------------------------------
# Ocular
# ----------------------------------------------------------------------


def test_ocular_steady_gaze_on_target():
    session = tracking_session(TaskType.OCULAR)
    feed_face(session, 0.5, 0.5, 50)
    assert session.gaze_on_target
    result = session.finish_early()
    assert result.sample_count == 49
    assert result.on_target_percent == 100
    assert result.score == STEADY_OCULAR_SCORE
    assert result.aux_stats["medium_confidence_frames"] == 50
    assert result.aux_stats["mean_delta"] == 0.0


def test_ocular_off_target_is_penalized():
    session = tracking_session(TaskType.OCULAR)
    feed_face(session, 0.9, 0.9, 50)
    result = session.finish_early()
    assert result.on_target_percent == 0
    expected = 100.0 / (1.0 + math.exp(-2.4)) * 0.6
    assert result.score == pytest.approx(expected, abs=0.05)


def test_ocular_penalty_can_be_disabled():
    session = tracking_session(TaskType.OCULAR, on_target_penalty=False)
    feed_face(session, 0.9, 0.9, 50)
    assert session.finish_early().score == STEADY_OCULAR_SCORE


def test_ocular_neutral_score_is_not_penalized():
    session = tracking_session(TaskType.OCULAR)
    feed_face(session, 0.9, 0.9, 5)
    result = session.finish_early()
    assert result.on_target_percent == 0
    assert result.score == 50.0


def test_target_relocates_on_interval(clock):
    session = tracking_session(TaskType.OCULAR, clock)
    session.tick(1.9)
    assert session.target.generation == 0
    session.tick(2.0)
    target = session.target
    assert target.generation == 1
    assert 0.15 <= target.x <= 0.85
    assert 0.15 <= target.y <= 0.85


def test_first_face_frame_adds_no_delta():
    session = tracking_session(TaskType.OCULAR)
    feed_face(session, 0.5, 0.5, 1)
    assert session.sample_count == 0
    assert session.on_target_percent == 100


# ----------------------------------------------------------------------
# Skip, restart, close
# ----------------------------------------------------------------------


def test_skip_during_tracking(recorder):
    session = tracking_session(TaskType.MOTOR)
    session.register_observer(recorder)
    feed_hand(session, [(0.5, 0.5)] * 30)
    result = session.skip()
    assert session.state is SessionState.DONE
    assert result.was_skipped
    assert result.score == 0.0
    assert result.sample_count == 0
    assert result.series == ()
    assert session.buffer is None
    assert session.process_frame(Detection.hand(0.5, 0.5)) is None
    assert recorder.results == [result]


def test_skip_before_model_loaded(ocular_config):
    session = TaskSession(ocular_config)
    result = session.skip()
    assert result.was_skipped
    assert result.on_target_percent == 0


def test_skip_after_done_is_rejected():
    session = tracking_session(TaskType.MOTOR)
    session.finish_early()
    with pytest.raises(SessionStateError):
        session.skip()


def test_skip_wins_over_later_timer(clock):
    session = tracking_session(TaskType.MOTOR, clock)
    feed_hand(session, [(0.5, 0.5)] * 30)
    result = session.skip()
    session.tick(100.0)
    assert session.result is result


def test_restart_discards_attempt(clock):
    session = tracking_session(TaskType.MOTOR, clock)
    feed_hand(session, [(0.5, 0.5)] * 30)
    session.restart()
    assert session.state is SessionState.READY
    assert session.restart_count == 1
    assert session.buffer is None

    session.tick(100.0)
    assert session.state is SessionState.READY

    session.start(now=clock())
    assert session.sample_count == 0
    feed_hand(session, [(0.5, 0.5)] * 20)
    assert session.finish_early().restart_count == 1


def test_restart_from_done():
    session = tracking_session(TaskType.MOTOR)
    session.finish_early()
    session.restart()
    assert session.result is None
    assert session.state is SessionState.READY


def test_restart_not_allowed_in_ready(motor_config):
    session = TaskSession(motor_config)
    session.model_ready()
    with pytest.raises(SessionStateError):
        session.restart()


def test_close_stops_everything(clock):
    session = tracking_session(TaskType.MOTOR, clock)
    feed_hand(session, [(0.5, 0.5)] * 10)
    session.close()
    assert session.closed
    assert session.buffer is None
    assert session.tick(100.0) is SessionState.TRACKING
    assert session.process_frame(Detection.hand(0.5, 0.5)) is None
    with pytest.raises(SessionStateError):
        session.restart()


# ----------------------------------------------------------------------
# Observers
# ----------------------------------------------------------------------


class FailingObserver(SessionObserver):
    def on_state_change(self, session, previous, current):
        raise RuntimeError("boom")

    def on_live_score(self, session, score):
        raise RuntimeError("boom")

    def on_complete(self, session, result):
        raise RuntimeError("boom")


def test_failing_observer_does_not_break_session(motor_config, caplog):
    session = TaskSession(motor_config)
    session.register_observer(FailingObserver())
    recorder = RecordingObserver()
    session.register_observer(recorder)
    with caplog.at_level(logging.WARNING, logger="neuro_scoring.session"):
        session.model_ready()
    assert session.state is SessionState.READY
    assert recorder.transitions == [(SessionState.LOADING, SessionState.READY)]
    assert "FailingObserver" in caplog.text


def test_unregister_observer(motor_config, recorder):
    session = TaskSession(motor_config)
    session.register_observer(recorder)
    session.unregister_observer(recorder)
    session.model_ready()
    assert recorder.transitions == []


class CommandOnLiveScore(RecordingObserver):
    """Issues a session command from inside the live score notification."""

    def __init__(self, command, min_samples=1):
        super().__init__()
        self.command = command
        self.min_samples = min_samples

    def on_live_score(self, session, score):
        super().on_live_score(session, score)
        if session.state is SessionState.TRACKING and session.sample_count >= self.min_samples:
            getattr(session, self.command)()


def test_restart_from_live_score_callback():
    session = tracking_session(TaskType.OCULAR)
    session.register_observer(CommandOnLiveScore("restart"))
    feed_face(session, 0.5, 0.5, 2)
    assert session.state is SessionState.READY
    assert session.restart_count == 1
    assert session.target is None


def test_close_from_live_score_callback():
    session = tracking_session(TaskType.OCULAR)
    session.register_observer(CommandOnLiveScore("close"))
    feed_face(session, 0.5, 0.5, 3)
    assert session.closed
    assert session.buffer is None


def test_finish_from_live_score_callback_freezes_proximity():
    session = tracking_session(TaskType.OCULAR)
    session.register_observer(CommandOnLiveScore("finish_early", min_samples=12))
    feed_face(session, 0.5, 0.5, 12)
    # this frame completes the task; its gaze is off target
    feed_face(session, 0.9, 0.9, 1)
    result = session.result
    assert session.state is SessionState.DONE
    assert result.sample_count == 12
    assert result.on_target_percent == 100
    assert session.on_target_percent == 100
    assert result.aux_stats["total_frames"] == 12
