"""Wind state, wind vectors and the directional spread multiplier."""

import logging
import math
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from .cell import Cell
from .config import WindConfig, WindDirection

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]

# Compass frame (0 = North, clockwise) to grid frame (x right, y down)
COMPASS_CORRECTION_DEGREES = 90

DIRECTION_FLUCTUATION_DEGREES = 5.0
STRENGTH_FLUCTUATION = 0.03
MIN_WIND_EFFECT = 0.1


class BeaufortScale(IntEnum):
    Calm = 0
    LightAir = 1
    LightBreeze = 2
    GentleBreeze = 3
    ModerateBreeze = 4
    FreshBreeze = 5
    StrongBreeze = 6
    Gale = 7
    SevereGale = 8
    Storm = 9
    ViolentStorm = 10
    Hurricane = 11


def _compass_vector(degrees: float) -> Vector:
    rad = math.radians(degrees + COMPASS_CORRECTION_DEGREES)
    return math.cos(rad), math.sin(rad)


DIRECTION_VECTORS = {direction: _compass_vector(direction.value) for direction in WindDirection}


def wind_vector_for_direction(direction: WindDirection) -> Vector:
    """Unit vector for one of the 8 compass directions."""
    return DIRECTION_VECTORS[direction]


def wind_vector_from_angle(angle_degrees: float, strength: float) -> Vector:
    """Vector pointing at angle_degrees with length strength."""
    rad = math.radians(angle_degrees)
    return math.cos(rad) * strength, math.sin(rad) * strength


def angle_from_vector(vector: Vector) -> float:
    """Angle of a vector in degrees, normalized to [0, 360)."""
    angle = math.degrees(math.atan2(vector[1], vector[0]))
    if angle < 0:
        angle += 360
    return angle % 360


def snap_to_direction(angle_degrees: float) -> WindDirection:
    """Nearest of the 8 compass directions for an arbitrary angle."""
    angle = (angle_degrees % 360 + 360) % 360
    snapped = int(round(angle / 45.0) * 45) % 360
    return WindDirection(snapped)


def beaufort_from_strength(strength: float) -> BeaufortScale:
    """Rough mapping of a 0..1 strength onto the Beaufort scale."""
    return BeaufortScale(min(int(strength * 12), BeaufortScale.Hurricane))


def _normalize(vector: Vector) -> Vector:
    length = math.hypot(vector[0], vector[1])
    if length == 0:
        return 0.0, 0.0
    return vector[0] / length, vector[1] / length


@dataclass
class WindState:
    angle_degrees: float
    strength: float


class Wind:
    """
    Live wind for one simulation run.

    With a fixed-direction config the vector comes from the compass table;
    with random_direction it follows the drifting WindState angle.
    """

    def __init__(self, config: WindConfig, rng: random.Random):
        self.config = config
        self.rng = rng
        self.state = WindState(angle_degrees=float(config.direction.value), strength=config.strength)

    @property
    def strength(self) -> float:
        return self.state.strength

    @property
    def angle_degrees(self) -> float:
        return self.state.angle_degrees

    def vector(self) -> Vector:
        if self.config.random_direction:
            return wind_vector_from_angle(self.state.angle_degrees, self.state.strength)
        return wind_vector_for_direction(self.config.direction)

    def effect(self, source: Cell, target: Cell) -> float:
        """
        Spread multiplier for fire moving from source to target.

        alignment is the dot product of the normalized spread direction and
        the normalized wind: 1 downwind, 0 crosswind, -1 upwind. The result
        is never below MIN_WIND_EFFECT.
        """
        wind_x, wind_y = self.vector()
        if wind_x == 0 and wind_y == 0:
            return 1.0

        spread_x, spread_y = _normalize((target.x - source.x, target.y - source.y))
        wind_x, wind_y = _normalize((wind_x, wind_y))

        alignment = spread_x * wind_x + spread_y * wind_y
        return max(MIN_WIND_EFFECT, 1 + self.state.strength * alignment)

    def randomize(self) -> None:
        """Apply one tick of random drift, as far as the config allows it."""
        if self.config.random_direction:
            delta = (self.rng.random() * 2 - 1) * DIRECTION_FLUCTUATION_DEGREES
            self.state.angle_degrees = (self.state.angle_degrees + delta + 360) % 360

        if self.config.random_strength:
            delta = self.rng.uniform(-STRENGTH_FLUCTUATION, STRENGTH_FLUCTUATION)
            self.state.strength = min(max(self.state.strength + delta, 0.0), 1.0)

        logger.debug(
            f"Wind now {self.state.angle_degrees:.1f} deg at {self.state.strength:.2f}"
        )

    def __str__(self) -> str:
        return f"Wind: {self.state.angle_degrees:.1f} deg, strength {self.state.strength:.2f}"
