"""In-memory event sink for a monitoring session."""

import pandas as pd

from driver_monitor.types import EventKind, LoggedEvent

COLUMNS = ["timestamp", "type", "speed", "lat", "lng", "value"]


class EventLog:
    """Collects LoggedEvents in delivery order. Callable, so it can be used as a session sink."""

    def __init__(self):
        self._entries = []

    def __call__(self, logged: LoggedEvent) -> None:
        self.append(logged)

    def append(self, logged: LoggedEvent) -> None:
        if not isinstance(logged, LoggedEvent):
            raise TypeError(f"EventLog accepts LoggedEvent, got {type(logged).__name__}")
        self._entries.append(logged)

    def clear(self) -> None:
        self._entries = []

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def events(self) -> list:
        return list(self._entries)

    def counts(self) -> dict:
        """Number of logged events per kind, with every kind present."""
        out = {kind: 0 for kind in EventKind}
        for entry in self._entries:
            out[entry.kind] += 1
        return out

    def to_dataframe(self) -> pd.DataFrame:
        """One row per event: timestamp (ISO wall time), type, speed, lat, lng, value.

        speed/lat/lng are only filled for SPEED_EXCEEDED rows.
        """
        rows = []
        for entry in self._entries:
            ev = entry.event
            rows.append({
                "timestamp": entry.wall_time.isoformat(),
                "type": ev.kind.value,
                "speed": round(ev.speed_kmh, 1) if ev.speed_kmh is not None else None,
                "lat": ev.lat,
                "lng": ev.lng,
                "value": ev.value,
            })
        return pd.DataFrame(rows, columns=COLUMNS)
