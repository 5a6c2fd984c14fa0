"""Motion fusion classifier: bump, harsh acceleration/braking and sharp-turn events."""

import logging
from typing import Optional

import numpy as np

from driver_monitor.config import MonitorConfig
from driver_monitor.filters import as_vec3, decompose, lowpass_step
from driver_monitor.types import Event, EventKind, MotionSample

logger = logging.getLogger(__name__)


class MotionClassifier:
    """Turns accelerometer + gyroscope samples into motion events.

    Per sample, in order:
      1. low-pass the raw acceleration into a gravity estimate
      2. linear = raw - gravity, split into vertical (along gravity) and
         horizontal (orthogonal) magnitudes
      3. vertical > bump_threshold      -> BUMP
         elif horizontal > accel_threshold -> HARSH_ACCEL_BRAKE
      4. max |rotation| > turn_threshold -> SHARP_TURN

    Steps 3 and 4 share one cooldown timer and are evaluated in that order,
    so an event fired in step 3 blocks a turn from the same sample.
    """

    def __init__(self, cfg: MonitorConfig = None):
        if cfg is None:
            cfg = MonitorConfig()
        self.cfg = cfg
        self.reset()

    def reset(self) -> None:
        self._gravity: Optional[np.ndarray] = None
        self.last_event_time: Optional[float] = None
        self.last_vertical = 0.0
        self.last_horizontal = 0.0
        self.harsh_count = 0
        self.bump_count = 0
        self.turn_count = 0

    @property
    def gravity(self) -> np.ndarray:
        if self._gravity is None:
            return np.zeros(3)
        return self._gravity.copy()

    def _cooldown_elapsed(self, now: float) -> bool:
        if self.last_event_time is None:
            return True
        return now - self.last_event_time > self.cfg.motion_cooldown_s

    def _fire(self, event: Event) -> Event:
        self.last_event_time = event.timestamp
        if event.kind == EventKind.BUMP:
            self.bump_count += 1
        elif event.kind == EventKind.HARSH_ACCEL_BRAKE:
            self.harsh_count += 1
        else:
            self.turn_count += 1
        logger.debug("%s at t=%.3f (%s)", event.kind.value, event.timestamp, event.value)
        return event

    def on_sample(self, sample: MotionSample) -> list:
        """Process one sample. Returns the events it produced, in emission order."""
        cfg = self.cfg
        now = sample.timestamp
        rotation = as_vec3(sample.rotation_rate)

        if sample.acceleration_including_gravity is None:
            # Dropped reading: keep the gravity estimate, no shock or drive force.
            vertical, horizontal = 0.0, 0.0
        else:
            raw = as_vec3(sample.acceleration_including_gravity)
            # Seed with the first reading so a phone at rest does not register
            # the whole of gravity as linear acceleration.
            if self._gravity is None:
                self._gravity = raw.copy()
            self._gravity = lowpass_step(self._gravity, raw, cfg.gravity_alpha)

            linear = raw - self._gravity
            vertical, horizontal = decompose(linear, self._gravity, cfg.gravity_guard)
        self.last_vertical = vertical
        self.last_horizontal = horizontal

        events = []
        if self._cooldown_elapsed(now):
            if vertical > cfg.bump_threshold:
                events.append(self._fire(Event(EventKind.BUMP, now, magnitude=vertical)))
            elif horizontal > cfg.accel_threshold:
                events.append(self._fire(Event(EventKind.HARSH_ACCEL_BRAKE, now, magnitude=horizontal)))

        max_rotation = float(np.max(np.abs(rotation)))
        if max_rotation > cfg.turn_threshold and self._cooldown_elapsed(now):
            events.append(self._fire(Event(EventKind.SHARP_TURN, now, deg_per_s=max_rotation)))

        return events
