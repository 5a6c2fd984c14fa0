"""Offline analysis of recorded motion tables.

A motion table is a DataFrame with one row per sample and columns
t (seconds), ax, ay, az (m/s², including gravity) and alpha, beta, gamma
(deg/s). Missing columns and NaN cells read as 0, as they do live.
"""

import numpy as np
import pandas as pd
from tqdm import tqdm

from driver_monitor.config import MonitorConfig
from driver_monitor.filters import decompose_batch, gravity_lowpass
from driver_monitor.motion import MotionClassifier
from driver_monitor.types import MotionSample

ACCEL_COLUMNS = ["ax", "ay", "az"]
ROTATION_COLUMNS = ["alpha", "beta", "gamma"]


def _columns(df: pd.DataFrame, names: list) -> np.ndarray:
    out = np.zeros((len(df), len(names)))
    for i, name in enumerate(names):
        if name in df.columns:
            out[:, i] = df[name].to_numpy(dtype=float)
    return np.nan_to_num(out, nan=0.0)


def motion_components(df: pd.DataFrame, cfg: MonitorConfig = None) -> pd.DataFrame:
    """Return a copy of df with gravity_x/y/z, vertical, horizontal and max_rotation columns.

    Values match what a fresh MotionClassifier computes for the same rows.
    """
    if cfg is None:
        cfg = MonitorConfig()
    accel = _columns(df, ACCEL_COLUMNS)
    rotation = _columns(df, ROTATION_COLUMNS)

    gravity = gravity_lowpass(accel, cfg.gravity_alpha)
    vertical, horizontal = decompose_batch(accel - gravity, gravity, cfg.gravity_guard)

    out = df.copy()
    out["gravity_x"] = gravity[:, 0]
    out["gravity_y"] = gravity[:, 1]
    out["gravity_z"] = gravity[:, 2]
    out["vertical"] = vertical
    out["horizontal"] = horizontal
    out["max_rotation"] = np.max(np.abs(rotation), axis=1) if len(df) else np.zeros(0)
    return out


def replay_motion(df: pd.DataFrame, cfg: MonitorConfig = None, progress: bool = False) -> list:
    """Feed every row of a motion table through a fresh MotionClassifier. Returns all events."""
    if "t" not in df.columns:
        raise ValueError("motion table needs a 't' column")
    classifier = MotionClassifier(cfg)
    accel = _columns(df, ACCEL_COLUMNS)
    rotation = _columns(df, ROTATION_COLUMNS)
    timestamps = df["t"].to_numpy(dtype=float)

    events = []
    for i in tqdm(range(len(df)), desc="Replaying", disable=not progress):
        sample = MotionSample(
            timestamp=float(timestamps[i]),
            acceleration_including_gravity=tuple(accel[i]),
            rotation_rate=tuple(rotation[i]),
        )
        events.extend(classifier.on_sample(sample))
    return events
