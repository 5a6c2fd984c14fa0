"""Gravity separation and vertical/horizontal decomposition of acceleration."""

from collections.abc import Mapping

import numpy as np
from scipy.signal import lfilter

AXIS_KEYS = (("x", "y", "z"), ("alpha", "beta", "gamma"))


def _component(c) -> float:
    """One vector component as a finite float; anything unreadable is 0."""
    try:
        value = float(c)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(value):
        return 0.0
    return value


def as_vec3(value) -> np.ndarray:
    """Coerce a sensor vector to a float array of shape (3,).

    Accepts a sequence, or a mapping keyed x/y/z or alpha/beta/gamma.
    A missing or non-iterable vector reads as zeros; None, NaN, infinite
    and non-numeric components read as 0. Never raises.
    """
    if value is None or isinstance(value, (str, bytes)):
        return np.zeros(3)
    if isinstance(value, Mapping):
        keys = next((k for k in AXIS_KEYS if any(name in value for name in k)), AXIS_KEYS[0])
        comps = [value.get(name) for name in keys]
    else:
        try:
            comps = list(value)[:3]
        except TypeError:
            return np.zeros(3)
    comps = [_component(c) for c in comps] + [0.0] * (3 - len(comps))
    return np.array(comps, dtype=float)


def lowpass_step(gravity: np.ndarray, raw: np.ndarray, alpha: float) -> np.ndarray:
    """One step of the gravity low-pass: alpha * gravity + (1 - alpha) * raw."""
    return alpha * gravity + (1.0 - alpha) * raw


def decompose(linear: np.ndarray, gravity: np.ndarray, guard: float = 1.0) -> tuple:
    """Split linear acceleration into (vertical, horizontal) magnitudes.

    vertical is the component along the gravity direction (road shocks),
    horizontal the orthogonal remainder (drive force). Returns (0.0, 0.0)
    while |gravity| <= guard, i.e. before the filter has a usable direction.
    """
    g_norm = float(np.linalg.norm(gravity))
    if g_norm <= guard:
        return 0.0, 0.0
    g_dir = gravity / g_norm
    vertical = abs(float(np.dot(linear, g_dir)))
    total_sq = float(np.dot(linear, linear))
    horizontal = float(np.sqrt(max(0.0, total_sq - vertical ** 2)))
    return vertical, horizontal


def gravity_lowpass(accel: np.ndarray, alpha: float) -> np.ndarray:
    """Batch version of the streaming gravity filter over an (n, 3) array.

    The estimate is seeded with the first row, matching a fresh
    MotionClassifier, so row i equals the classifier's gravity after sample i.
    """
    accel = np.asarray(accel, dtype=float)
    if accel.ndim != 2 or accel.shape[1] != 3:
        raise ValueError(f"expected an (n, 3) array, got shape {accel.shape}")
    if len(accel) == 0:
        return accel.copy()
    # y[n] = alpha * y[n-1] + (1 - alpha) * x[n], with y[-1] = x[0]
    zi = (alpha * accel[0])[np.newaxis, :]
    out, _ = lfilter([1.0 - alpha], [1.0, -alpha], accel, axis=0, zi=zi)
    return out


def decompose_batch(linear: np.ndarray, gravity: np.ndarray, guard: float = 1.0) -> tuple:
    """Vectorised decompose() over (n, 3) arrays. Returns (vertical, horizontal) arrays."""
    linear = np.asarray(linear, dtype=float)
    gravity = np.asarray(gravity, dtype=float)
    g_norm = np.linalg.norm(gravity, axis=1)
    valid = g_norm > guard
    safe_norm = np.where(valid, g_norm, 1.0)
    g_dir = gravity / safe_norm[:, np.newaxis]
    vertical = np.abs(np.sum(linear * g_dir, axis=1))
    total_sq = np.sum(linear * linear, axis=1)
    horizontal = np.sqrt(np.maximum(0.0, total_sq - vertical ** 2))
    vertical = np.where(valid, vertical, 0.0)
    horizontal = np.where(valid, horizontal, 0.0)
    return vertical, horizontal
