"""
Tick scheduler for the simulation.

The clock has no notion of wall time. Whoever owns the loop (a UI frame
callback, the console runner, a test) calls ``advance(delta_ms)`` and every
running trigger whose interval elapsed fires, in due-time order.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class SimulationSpeed(Enum):
    """Base tick interval in milliseconds. Lower is faster."""
    Slow = 240      # x0.5
    Normal = 120    # x1
    Fast = 60       # x2
    Ultra = 3       # x40


class TriggerKind(Enum):
    SECOND = "second"
    GROW = "grow"
    FIRE = "fire"
    IGNITE = "ignite"
    WIND = "wind"


SECOND_INTERVAL_MS = 1000
IGNITE_INTERVAL_FACTOR = 750
WIND_CHANGE_INTERVAL_MS = 300 + SimulationSpeed.Normal.value


class Trigger:
    """One periodic trigger with its own interval and subscribers."""

    def __init__(self, kind: TriggerKind, interval_ms: float, order: int):
        self.kind = kind
        self.interval_ms = interval_ms
        self.order = order
        self.running = False
        self.last_fired_ms = 0.0
        self.fire_count = 0
        self._callbacks: List[Callable[[], None]] = []

    @property
    def next_due_ms(self) -> float:
        return self.last_fired_ms + self.interval_ms

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def fire(self) -> None:
        self.fire_count += 1
        for callback in list(self._callbacks):
            callback()

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"Trigger({self.kind.value}, {self.interval_ms}ms, {state})"


class SimulationClock:
    """
    Five independently-intervaled triggers driven by an injected time source.

    Changing the speed only changes intervals: a trigger that is halfway
    through its interval keeps the time it already accumulated and fires at
    ``last_fired + new_interval``. Starting a trigger starts a fresh interval.
    """

    def __init__(self, speed: SimulationSpeed = SimulationSpeed.Normal):
        self.now_ms = 0.0
        self.speed = speed
        self._triggers: Dict[TriggerKind, Trigger] = {
            kind: Trigger(kind, SECOND_INTERVAL_MS, order)
            for order, kind in enumerate(TriggerKind)
        }
        self.set_speed(speed)

    def __getitem__(self, kind: TriggerKind) -> Trigger:
        return self._triggers[kind]

    def on(self, kind: TriggerKind, callback: Callable[[], None]) -> None:
        """Subscribe a callback to a trigger."""
        self._triggers[kind].subscribe(callback)

    def set_speed(self, speed: SimulationSpeed) -> None:
        base_ms = speed.value
        self.speed = speed
        self._triggers[TriggerKind.GROW].interval_ms = base_ms
        self._triggers[TriggerKind.FIRE].interval_ms = base_ms
        self._triggers[TriggerKind.IGNITE].interval_ms = base_ms * IGNITE_INTERVAL_FACTOR
        self._triggers[TriggerKind.WIND].interval_ms = base_ms + WIND_CHANGE_INTERVAL_MS
        logger.debug(f"Clock speed set to {speed.name} ({base_ms} ms)")

    def start(self, kind: TriggerKind) -> None:
        trigger = self._triggers[kind]
        if trigger.running:
            return
        trigger.running = True
        trigger.last_fired_ms = self.now_ms

    def stop(self, kind: TriggerKind) -> None:
        self._triggers[kind].running = False

    def start_all(self) -> None:
        for kind in TriggerKind:
            self.start(kind)

    def stop_all(self) -> None:
        for trigger in self._triggers.values():
            trigger.running = False

    def is_running(self, kind: TriggerKind) -> bool:
        return self._triggers[kind].running

    @property
    def running(self) -> bool:
        """True while at least one trigger is running."""
        return any(t.running for t in self._triggers.values())

    def advance(self, delta_ms: float) -> int:
        """
        Move time forward and fire every trigger that becomes due.

        A trigger stopped by a callback does not fire again, even if more of
        its intervals fit into delta_ms. A trigger already overdue (after a
        speed-up) fires once immediately and continues from there.

        Returns:
            Number of trigger firings
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot advance the clock by a negative delta ({delta_ms})")

        target_ms = self.now_ms + delta_ms
        fired = 0
        while True:
            due = [t for t in self._triggers.values() if t.running and t.next_due_ms <= target_ms]
            if not due:
                break
            trigger = min(due, key=lambda t: (t.next_due_ms, t.order))
            # A speed-up can leave a trigger overdue; it fires once, now.
            self.now_ms = max(self.now_ms, trigger.next_due_ms)
            trigger.last_fired_ms = self.now_ms
            trigger.fire()
            fired += 1

        self.now_ms = target_ms
        return fired
