from datetime import datetime, timedelta

import pytest
from driver_monitor.config import ConfigError, MonitorConfig
from driver_monitor.event_log import EventLog
from driver_monitor.session import SessionOrchestrator
from driver_monitor.tests.synthetic import at_rest, bump_sample, frames, turn_sample
from driver_monitor.types import (
    EventKind,
    FaultKind,
    FrameSample,
    LoggedEvent,
    MotionSample,
    PositionSample,
    SensorFault,
    SessionState,
)


CFG = MonitorConfig()
N = CFG.distraction_threshold_frames


class FakeClock:
    def __init__(self, start=datetime(2024, 5, 1, 8, 0, 0)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


def _counters(s):
    return (s.speed_exceeded_count, s.harsh_count, s.bump_count, s.turn_count, s.distraction_count)


def _busy_session(s):
    """Drive one event of each kind except harsh through a running session."""
    for sample in at_rest():
        s.feed_motion(sample)
    s.feed_motion(bump_sample(1.0))
    for sample in at_rest(t0=1.02):
        s.feed_motion(sample)
    s.feed_motion(turn_sample(3.5))
    s.feed_position(PositionSample(0.0, 1.0, 2.0, 20.0))
    for f in frames(N):
        s.feed_frame(f)


class TestLifecycle:
    def test_starts_idle(self):
        s = SessionOrchestrator(CFG)
        assert s.state == SessionState.IDLE
        assert not s.is_running

    def test_idle_drops_samples(self):
        s = SessionOrchestrator(CFG)
        assert s.feed_motion(bump_sample(1.0)) == []
        assert s.feed_position(PositionSample(0.0, 1.0, 2.0, 30.0)) == []
        assert s.feed_frame(FrameSample(0.0, True)) == []
        assert _counters(s) == (0, 0, 0, 0, 0)
        assert s.current_speed_kmh == 0.0
        assert len(s.event_log) == 0

    def test_stop_freezes_counters(self):
        s = SessionOrchestrator(CFG)
        s.start()
        _busy_session(s)
        before = _counters(s)
        assert before == (1, 0, 1, 1, 1)
        s.stop()
        assert s.state == SessionState.IDLE
        for sample in at_rest(t0=10.0):
            assert s.feed_motion(sample) == []
        assert s.feed_motion(bump_sample(20.0)) == []
        assert s.feed_position(PositionSample(100.0, 1.0, 2.0, 40.0)) == []
        assert all(s.feed_frame(f) == [] for f in frames(2 * N, t0=100.0))
        assert _counters(s) == before

    def test_start_resets_everything(self):
        s = SessionOrchestrator(CFG)
        s.start()
        _busy_session(s)
        for f in frames(N - 1, face_present=False, t0=50.0):
            s.feed_frame(f)
        for f in frames(N - 1, t0=60.0):
            s.feed_frame(f)
        assert s.distraction.consecutive_frames == N - 1
        s.stop()
        s.start()
        assert _counters(s) == (0, 0, 0, 0, 0)
        assert s.motion.last_event_time is None
        assert s.speed.last_speed_event_time is None
        # the pending N-1 run does not carry over
        assert s.feed_frame(FrameSample(70.0, True)) == []
        assert s.distraction.consecutive_frames == 1
        # cooldowns are clear: an immediate speeding fix fires
        assert len(s.feed_position(PositionSample(0.5, 1.0, 2.0, 20.0))) == 1

    def test_double_start_equals_single_start(self):
        once = SessionOrchestrator(CFG)
        once.start()
        twice = SessionOrchestrator(CFG)
        twice.start()
        _busy_session(twice)
        twice.start()
        assert twice.is_running
        assert _counters(twice) == _counters(once) == (0, 0, 0, 0, 0)
        assert twice.distraction.consecutive_frames == 0
        assert twice.motion.last_event_time is None
        assert len(twice.event_log) == 0

    def test_stop_returns_summary(self):
        clock = FakeClock()
        s = SessionOrchestrator(CFG, clock=clock)
        assert s.stop() is None
        s.start()
        _busy_session(s)
        summary = s.stop()
        assert summary.started_at == datetime(2024, 5, 1, 8, 0, 0)
        assert summary.duration_s > 0
        assert summary.metrics.total_events == 4
        assert summary.metrics.speed_kmh == pytest.approx(72.0)
        assert s.current_speed_kmh == 0.0

    def test_invalid_config_fails_before_session(self):
        with pytest.raises(ConfigError):
            SessionOrchestrator(MonitorConfig(turn_threshold=-5))


class TestEventDelivery:
    def test_events_reach_sink_in_order(self):
        received = []
        s = SessionOrchestrator(CFG, sink=received.append, clock=FakeClock())
        s.start()
        _busy_session(s)
        assert [e.kind for e in received] == [
            EventKind.BUMP, EventKind.SHARP_TURN, EventKind.SPEED_EXCEEDED, EventKind.DISTRACTION,
        ]
        assert all(isinstance(e, LoggedEvent) for e in received)
        walls = [e.wall_time for e in received]
        assert walls == sorted(walls)
        assert s.event_log is None

    def test_feed_returns_logged_events(self):
        s = SessionOrchestrator(CFG)
        s.start()
        logged = s.feed_position(PositionSample(0.0, 10.0, 20.0, 15.0))
        assert len(logged) == 1
        assert logged[0].event.lat == 10.0
        assert s.event_log.events == logged
        assert s.coordinates == (10.0, 20.0)

    def test_default_sink_is_event_log(self):
        s = SessionOrchestrator(CFG)
        s.start()
        _busy_session(s)
        assert isinstance(s.event_log, EventLog)
        assert s.event_log.counts()[EventKind.BUMP] == 1

    def test_metrics_snapshot(self):
        s = SessionOrchestrator(CFG)
        s.start()
        _busy_session(s)
        m = s.metrics()
        assert m.state == SessionState.RUNNING
        assert (m.bump_count, m.turn_count, m.speed_exceeded_count, m.distraction_count) == (1, 1, 1, 1)
        assert m.total_events == 4


class TestFaults:
    def test_fault_forwarded_without_side_effects(self):
        faults = []
        s = SessionOrchestrator(CFG, on_fault=faults.append)
        s.start()
        _busy_session(s)
        before = _counters(s)
        fault = SensorFault("position", FaultKind.NO_FIX, "GPS unavailable")
        s.report_fault(fault)
        assert faults == [fault]
        assert s.speed.last_fault is fault
        assert _counters(s) == before
        assert s.is_running

    def test_fault_without_callback(self):
        s = SessionOrchestrator(CFG)
        s.report_fault(SensorFault("camera", FaultKind.PERMISSION_DENIED))
        assert s.speed.last_fault is None


class TestMalformedSamples:
    def test_bad_samples_do_not_stop_the_session(self):
        s = SessionOrchestrator(CFG)
        s.start()
        for sample in at_rest():
            s.feed_motion(sample)
        assert s.feed_motion(MotionSample(1.0, None)) == []
        assert s.feed_motion(MotionSample(1.02, (0.0, 0.0, 9.81), ("n/a", 0, 0))) == []
        assert s.feed_motion(MotionSample(1.04, {"x": 0, "y": 0, "z": 9.81}, 0.0)) == []
        assert s.feed_position(PositionSample(2.0, 1.0, 2.0, "13.9")) == []
        assert _counters(s) == (0, 0, 0, 0, 0)
        assert s.is_running
