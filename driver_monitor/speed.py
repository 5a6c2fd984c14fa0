"""Speed monitor: speeding events from GPS fixes."""

import logging
import math
from numbers import Real
from typing import Optional

from driver_monitor.config import MonitorConfig
from driver_monitor.types import Event, EventKind, PositionSample, SensorFault

logger = logging.getLogger(__name__)

MPS_TO_KMH = 3.6


def to_kmh(speed_mps: Optional[float]) -> float:
    """m/s -> km/h. Missing, non-numeric, non-finite or negative speeds (no Doppler fix) read as 0."""
    if isinstance(speed_mps, bool) or not isinstance(speed_mps, Real):
        return 0.0
    speed_mps = float(speed_mps)
    if not math.isfinite(speed_mps) or speed_mps < 0:
        return 0.0
    return speed_mps * MPS_TO_KMH


class SpeedMonitor:
    def __init__(self, cfg: MonitorConfig = None):
        if cfg is None:
            cfg = MonitorConfig()
        self.cfg = cfg
        self.reset()

    def reset(self) -> None:
        self.current_speed_kmh = 0.0
        self.coordinates: Optional[tuple] = None
        self.last_speed_event_time: Optional[float] = None
        self.last_fault: Optional[SensorFault] = None
        self.speed_exceeded_count = 0

    @property
    def is_over_limit(self) -> bool:
        """Instantaneous reading above the limit, regardless of cooldown."""
        return self.current_speed_kmh > self.cfg.speed_limit_kmh

    def on_sample(self, sample: PositionSample) -> Optional[Event]:
        speed_kmh = to_kmh(sample.speed_mps)
        self.current_speed_kmh = speed_kmh
        self.coordinates = (sample.lat, sample.lng)

        if speed_kmh <= self.cfg.speed_limit_kmh:
            return None
        now = sample.timestamp
        last = self.last_speed_event_time
        if last is not None and not now - last > self.cfg.speed_cooldown_s:
            return None

        self.last_speed_event_time = now
        self.speed_exceeded_count += 1
        event = Event(EventKind.SPEED_EXCEEDED, now, speed_kmh=speed_kmh, lat=sample.lat, lng=sample.lng)
        logger.debug("SPEED_EXCEEDED at t=%.3f: %.1f km/h", now, speed_kmh)
        return event

    def on_fault(self, fault: SensorFault) -> None:
        """Remember a position fault for display. Speed, counters and cooldown are untouched."""
        self.last_fault = fault
