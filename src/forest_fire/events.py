"""
Notification channel between the engine and its collaborators.

The engine publishes; renderers, labels and recorders subscribe. Callbacks
run synchronously on the publishing thread, and an exception raised by a
subscriber propagates to the engine call that published.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, DefaultDict, List

from .cell import Cell
from .colors import Color
from .config import TreeShape


class Notification(Enum):
    TIME_TEXT = auto()
    DENSITY_TEXT = auto()
    WIND_TEXT = auto()
    GROWN_TEXT = auto()
    BURNED_TEXT = auto()
    TREE_ADDED = auto()
    TREE_REMOVED = auto()
    TREE_COLOR_CHANGED = auto()
    FIRE_EFFECT_STARTED = auto()
    FIRE_EFFECT_STOPPED = auto()
    LIGHTNING_STRIKE = auto()
    WIND_CHANGED = auto()
    EVALUATION = auto()


_SHAPE_TAGS = {
    TreeShape.Ellipse: "ellipse",
    TreeShape.Rectangle: "rectangle",
}


def shape_tag(shape: TreeShape) -> str:
    """
    Opaque tag the renderer maps to a drawable shape.

    Raises:
        NotImplementedError: if the shape has no mapping. This is a
            programming error, not a runtime condition.
    """
    try:
        return _SHAPE_TAGS[shape]
    except (KeyError, TypeError):
        raise NotImplementedError(f"Unsupported tree shape: {shape!r}") from None


@dataclass(frozen=True)
class TreeChange:
    cell: Cell
    color: Color
    shape: str


@dataclass(frozen=True)
class FireEffect:
    cell: Cell
    flames: bool
    particles: bool
    smoke: bool


@dataclass(frozen=True)
class LightningStrike:
    cell: Cell
    color: Color
    shape: str
    screen_flash: bool


Callback = Callable[[Any], None]


class EventChannel:
    """Observer registry keyed by Notification."""

    def __init__(self):
        self._subscribers: DefaultDict[Notification, List[Callback]] = defaultdict(list)

    def subscribe(self, kind: Notification, callback: Callback) -> None:
        self._subscribers[kind].append(callback)

    def unsubscribe(self, kind: Notification, callback: Callback) -> None:
        subscribers = self._subscribers.get(kind, [])
        if callback in subscribers:
            subscribers.remove(callback)

    def publish(self, kind: Notification, payload: Any = None) -> None:
        for callback in list(self._subscribers.get(kind, ())):
            callback(payload)
