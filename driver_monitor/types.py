from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

Vec3 = tuple  # (x, y, z); components may be None when the sensor omits them


class EventKind(str, Enum):
    SPEED_EXCEEDED = "SPEED_EXCEEDED"
    HARSH_ACCEL_BRAKE = "HARSH_ACCEL_BRAKE"
    BUMP = "BUMP"
    SHARP_TURN = "SHARP_TURN"
    DISTRACTION = "DISTRACTION"


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class FaultKind(str, Enum):
    NO_FIX = "no_fix"
    TIMEOUT = "timeout"
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class MotionSample:
    timestamp: float                                   # seconds, monotonic
    acceleration_including_gravity: Optional[Vec3] = None   # m/s²
    rotation_rate: Optional[Vec3] = None               # (alpha, beta, gamma) deg/s


@dataclass(frozen=True)
class PositionSample:
    timestamp: float
    lat: float
    lng: float
    speed_mps: Optional[float] = None


@dataclass(frozen=True)
class FrameSample:
    timestamp: float
    face_present: bool


@dataclass(frozen=True)
class Event:
    """A single detected driving-behaviour event.

    Only the payload fields relevant to `kind` are set; the rest stay None.
    `timestamp` is the timestamp of the sample that triggered the event.
    """
    kind: EventKind
    timestamp: float
    magnitude: Optional[float] = None   # m/s², BUMP and HARSH_ACCEL_BRAKE
    deg_per_s: Optional[float] = None   # SHARP_TURN
    speed_kmh: Optional[float] = None   # SPEED_EXCEEDED
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def value(self) -> str:
        """Short human-readable reading, as shown in the event log."""
        if self.kind == EventKind.DISTRACTION:
            return "Looked at Phone > 1s"
        if self.kind == EventKind.SPEED_EXCEEDED:
            return f"{self.speed_kmh:.1f} km/h"
        if self.kind == EventKind.SHARP_TURN:
            return f"{self.deg_per_s:.1f} deg/s"
        return f"{self.magnitude:.1f} m/s^2"


@dataclass(frozen=True)
class LoggedEvent:
    """An Event tagged with the wall-clock time the session delivered it."""
    event: Event
    wall_time: datetime

    @property
    def kind(self) -> EventKind:
        return self.event.kind


@dataclass(frozen=True)
class SensorFault:
    """A sensor-adapter failure reported to the session (no fix, denied permission, ...)."""
    source: str          # "position" | "motion" | "camera"
    kind: FaultKind
    message: str = ""
    timestamp: Optional[float] = None
