"""Per-second statistics, the ignition audit log and the end-of-run evaluation."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import List, Tuple

from .wind import beaufort_from_strength


class FireEventType(Enum):
    Lightning = 0
    ManualIgnition = 1


@dataclass(frozen=True)
class SimulationSnapshot:
    time: timedelta
    grown: int
    burned: int
    wind_speed: float


@dataclass(frozen=True)
class FireEvent:
    type: FireEventType
    timestamp: timedelta


@dataclass(frozen=True)
class Evaluation:
    """Everything the results views need once a run is over."""

    total_grown_trees: int
    total_burned_trees: int
    max_trees_possible: int
    air_humidity_percentage: float
    air_temperature_celsius: float
    runtime: timedelta
    history: Tuple[SimulationSnapshot, ...]
    fire_events: Tuple[FireEvent, ...]


class HistoryRecorder:
    """Append-only store for snapshots and fire events."""

    def __init__(self):
        self._snapshots: List[SimulationSnapshot] = []
        self._fire_events: List[FireEvent] = []

    def record_snapshot(self, time: timedelta, grown: int, burned: int, wind_speed: float) -> SimulationSnapshot:
        snapshot = SimulationSnapshot(time, grown, burned, wind_speed)
        self._snapshots.append(snapshot)
        return snapshot

    def record_fire_event(self, event_type: FireEventType, timestamp: timedelta) -> FireEvent:
        event = FireEvent(event_type, timestamp)
        self._fire_events.append(event)
        return event

    @property
    def snapshots(self) -> Tuple[SimulationSnapshot, ...]:
        return tuple(self._snapshots)

    @property
    def fire_events(self) -> Tuple[FireEvent, ...]:
        return tuple(self._fire_events)


def format_runtime(elapsed: timedelta) -> str:
    """HH:MM:SS, hours are not wrapped at 24."""
    total_seconds = int(elapsed.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def density_percent(active_trees: int, max_trees: int) -> float:
    """Tree density in whole percent, rounded half to even."""
    if max_trees <= 0:
        return 0.0
    return float(round(active_trees / max_trees * 100))


def format_density(active_trees: int, max_trees: int) -> str:
    return f"{active_trees} / {max_trees} ({density_percent(active_trees, max_trees):.0f}%)"


def format_wind(strength: float) -> str:
    return f"{strength * 100:.0f}% ({int(beaufort_from_strength(strength))} Bft)"
