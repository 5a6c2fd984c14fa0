from dataclasses import dataclass, fields
from numbers import Integral, Real


class ConfigError(ValueError):
    """Raised when a MonitorConfig holds values no session can run with."""


@dataclass(frozen=True)
class MonitorConfig:
    # Speed
    speed_limit_kmh: float = 50.0
    speed_cooldown_s: float = 10.0

    # Motion thresholds
    accel_threshold: float = 3.0        # m/s², horizontal (drive axis)
    bump_threshold: float = 3.0         # m/s², vertical (along gravity)
    turn_threshold: float = 30.0        # deg/s, any rotation axis
    motion_cooldown_ms: float = 2000.0  # shared by bump, harsh and turn

    # Gravity separation
    gravity_alpha: float = 0.8          # low-pass weight of the previous estimate
    gravity_guard: float = 1.0          # m/s², min |gravity| before decomposing

    # Distraction
    distraction_threshold_frames: int = 45   # ~1.5 s at 30 fps

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")
            if value != value:
                raise ConfigError(f"{f.name} must not be NaN")
            if value < 0:
                raise ConfigError(f"{f.name} must be non-negative, got {value}")

        if not 0.0 <= self.gravity_alpha < 1.0:
            raise ConfigError(f"gravity_alpha must be in [0, 1), got {self.gravity_alpha}")
        if not isinstance(self.distraction_threshold_frames, Integral) or self.distraction_threshold_frames < 1:
            raise ConfigError(
                f"distraction_threshold_frames must be a positive integer, "
                f"got {self.distraction_threshold_frames!r}"
            )

    @property
    def motion_cooldown_s(self) -> float:
        return self.motion_cooldown_ms / 1000.0
