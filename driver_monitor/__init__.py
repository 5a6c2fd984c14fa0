"""Driving-behaviour event detection from motion, GPS and face-presence streams."""

from driver_monitor.config import ConfigError, MonitorConfig
from driver_monitor.distraction import DistractionMonitor
from driver_monitor.event_log import EventLog
from driver_monitor.motion import MotionClassifier
from driver_monitor.session import SessionMetrics, SessionOrchestrator, SessionSummary
from driver_monitor.speed import SpeedMonitor
from driver_monitor.types import (
    Event,
    EventKind,
    FaultKind,
    FrameSample,
    LoggedEvent,
    MotionSample,
    PositionSample,
    SensorFault,
    SessionState,
)

__all__ = [
    "MonitorConfig",
    "ConfigError",
    "MotionSample",
    "PositionSample",
    "FrameSample",
    "Event",
    "EventKind",
    "LoggedEvent",
    "SensorFault",
    "FaultKind",
    "SessionState",
    "MotionClassifier",
    "SpeedMonitor",
    "DistractionMonitor",
    "EventLog",
    "SessionOrchestrator",
    "SessionMetrics",
    "SessionSummary",
]
