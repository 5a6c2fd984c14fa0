"""Session orchestrator: owns start/stop and routes raw samples to the monitors."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from driver_monitor.config import MonitorConfig
from driver_monitor.distraction import DistractionMonitor
from driver_monitor.event_log import EventLog
from driver_monitor.motion import MotionClassifier
from driver_monitor.speed import SpeedMonitor
from driver_monitor.types import (
    FrameSample,
    LoggedEvent,
    MotionSample,
    PositionSample,
    SensorFault,
    SessionState,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionMetrics:
    """Point-in-time view of the running counters, as shown on a dashboard."""
    state: SessionState
    speed_kmh: float
    speed_exceeded_count: int
    harsh_count: int
    bump_count: int
    turn_count: int
    distraction_count: int

    @property
    def total_events(self) -> int:
        return (self.speed_exceeded_count + self.harsh_count + self.bump_count
                + self.turn_count + self.distraction_count)


@dataclass(frozen=True)
class SessionSummary:
    started_at: datetime
    stopped_at: datetime
    metrics: SessionMetrics

    @property
    def duration_s(self) -> float:
        return (self.stopped_at - self.started_at).total_seconds()


class SessionOrchestrator:
    """Single entry point for the sensor adapters.

    Samples fed while IDLE are dropped without error. Each start() builds
    fresh monitors, so nothing carries over between sessions.

    sink receives every LoggedEvent in emission order (default: an EventLog,
    available as .event_log). on_fault receives reported SensorFaults.
    clock supplies the wall time used to tag events.
    """

    def __init__(
        self,
        cfg: MonitorConfig = None,
        sink: Optional[Callable[[LoggedEvent], None]] = None,
        on_fault: Optional[Callable[[SensorFault], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if cfg is None:
            cfg = MonitorConfig()
        self.cfg = cfg
        self.event_log = EventLog() if sink is None else None
        self._sink = sink if sink is not None else self.event_log
        self._on_fault = on_fault
        self._clock = clock
        self._state = SessionState.IDLE
        self._started_at: Optional[datetime] = None
        self._new_monitors()

    def _new_monitors(self) -> None:
        self.motion = MotionClassifier(self.cfg)
        self.speed = SpeedMonitor(self.cfg)
        self.distraction = DistractionMonitor(self.cfg)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SessionState.RUNNING

    def start(self) -> None:
        """Begin a session. Calling it while already running restarts from a clean state."""
        self._new_monitors()
        if self.event_log is not None:
            self.event_log.clear()
        self._started_at = self._clock()
        self._state = SessionState.RUNNING
        logger.info("Monitoring session started")

    def stop(self) -> Optional[SessionSummary]:
        """End the session. Returns its summary, or None if no session was running."""
        if not self.is_running:
            return None
        self._state = SessionState.IDLE
        summary = SessionSummary(started_at=self._started_at, stopped_at=self._clock(), metrics=self.metrics())
        # no live reading once the GPS watch is gone
        self.speed.current_speed_kmh = 0.0
        logger.info("Monitoring session stopped after %.1f s with %d events",
                    summary.duration_s, summary.metrics.total_events)
        return summary

    # ── Inbound samples ───────────────────────────────────────────────────

    def _deliver(self, events: list) -> list:
        logged = []
        for event in events:
            entry = LoggedEvent(event=event, wall_time=self._clock())
            self._sink(entry)
            logged.append(entry)
        return logged

    def feed_motion(self, sample: MotionSample) -> list:
        if not self.is_running:
            return []
        return self._deliver(self.motion.on_sample(sample))

    def feed_position(self, sample: PositionSample) -> list:
        if not self.is_running:
            return []
        event = self.speed.on_sample(sample)
        return self._deliver([event] if event is not None else [])

    def feed_frame(self, sample: FrameSample) -> list:
        if not self.is_running:
            return []
        event = self.distraction.on_frame(sample)
        return self._deliver([event] if event is not None else [])

    def report_fault(self, fault: SensorFault) -> None:
        """Pass a sensor-adapter failure upward. Counters and monitor state are not affected."""
        logger.warning("%s sensor fault: %s %s", fault.source, fault.kind.value, fault.message)
        if fault.source == "position":
            self.speed.on_fault(fault)
        if self._on_fault is not None:
            self._on_fault(fault)

    # ── Read accessors ────────────────────────────────────────────────────

    @property
    def speed_exceeded_count(self) -> int:
        return self.speed.speed_exceeded_count

    @property
    def harsh_count(self) -> int:
        return self.motion.harsh_count

    @property
    def bump_count(self) -> int:
        return self.motion.bump_count

    @property
    def turn_count(self) -> int:
        return self.motion.turn_count

    @property
    def distraction_count(self) -> int:
        return self.distraction.distraction_count

    @property
    def current_speed_kmh(self) -> float:
        return self.speed.current_speed_kmh

    @property
    def coordinates(self) -> Optional[tuple]:
        return self.speed.coordinates

    def metrics(self) -> SessionMetrics:
        return SessionMetrics(
            state=self._state,
            speed_kmh=self.current_speed_kmh,
            speed_exceeded_count=self.speed_exceeded_count,
            harsh_count=self.harsh_count,
            bump_count=self.bump_count,
            turn_count=self.turn_count,
            distraction_count=self.distraction_count,
        )
