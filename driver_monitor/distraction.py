"""Distraction monitor: sustained face-in-frame episodes."""

import logging
from typing import Optional

from driver_monitor.config import MonitorConfig
from driver_monitor.types import Event, EventKind, FrameSample

logger = logging.getLogger(__name__)


class DistractionMonitor:
    """Edge-triggered detector over consecutive face-present frames.

    Fires once when the run of face-present frames reaches the threshold and
    stays quiet until a face-absent frame resets the run.
    """

    def __init__(self, cfg: MonitorConfig = None):
        if cfg is None:
            cfg = MonitorConfig()
        self.cfg = cfg
        self.reset()

    def reset(self) -> None:
        self.consecutive_frames = 0
        self.distraction_count = 0

    def on_frame(self, sample: FrameSample) -> Optional[Event]:
        if not sample.face_present:
            self.consecutive_frames = 0
            return None

        self.consecutive_frames += 1
        if self.consecutive_frames != self.cfg.distraction_threshold_frames:
            return None

        self.distraction_count += 1
        logger.debug("DISTRACTION at t=%.3f after %d frames", sample.timestamp, self.consecutive_frames)
        return Event(EventKind.DISTRACTION, sample.timestamp)
