"""
Simulation configuration.

All config records are frozen dataclasses validated on construction. Values
outside their documented range raise ConfigurationError, which is a fatal
setup error and never occurs while the simulation is running.
"""

import json
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a configuration parameter is missing or out of range."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        self.parameter = parameter
        if parameter:
            message = f"{message} (parameter '{parameter}')"
        super().__init__(message)


class WindDirection(Enum):
    """Compass directions in degrees, clockwise, 0 = North."""
    North = 0
    NorthEast = 45
    East = 90
    SouthEast = 135
    South = 180
    SouthWest = 225
    West = 270
    NorthWest = 315


class TreeShape(Enum):
    """Shape the renderer should use for tree cells."""
    Ellipse = "ellipse"
    Rectangle = "rectangle"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_type(name: str, value: Any, default: Any) -> None:
    """Scalar values must have the type of the field default. bool is not a number here."""
    if isinstance(default, bool):
        valid = isinstance(value, bool)
    elif isinstance(default, int):
        valid = isinstance(value, int) and not isinstance(value, bool)
    elif isinstance(default, float):
        valid = _is_number(value)
    else:
        valid = True
    if not valid:
        raise ConfigurationError(
            f"Expected {type(default).__name__}, got {type(value).__name__} {value!r}", name
        )


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not _is_number(value):
        raise ConfigurationError(f"Expected a number, got {type(value).__name__} {value!r}", name)
    if not low <= value <= high:
        raise ConfigurationError(f"Value {value} must be between {low} and {high}", name)


@dataclass(frozen=True)
class TreeConfig:
    """Tree growth limits and cell size in pixels."""

    max_count: int = 1_000_000
    forest_density: float = 0.6
    size: int = 8
    allow_regrow_forest: bool = True

    def __post_init__(self):
        _check_type("max_count", self.max_count, 0)
        _check_type("size", self.size, 0)
        if self.max_count < 0:
            raise ConfigurationError("Value must not be negative", "max_count")
        _check_range("forest_density", self.forest_density, 0.0, 1.0)
        if self.size < 1:
            raise ConfigurationError("Cell size must be at least 1", "size")


@dataclass(frozen=True)
class FireConfig:
    """Fire behaviour: spot-fire chance and lightning."""

    spread_chance_percent: float = 40.0
    pause_during_fire: bool = False
    lightning_strike_chance_percent: float = 15.0
    enable_lightning_strikes: bool = True

    def __post_init__(self):
        _check_range("spread_chance_percent", self.spread_chance_percent, 0.0, 100.0)
        _check_range(
            "lightning_strike_chance_percent", self.lightning_strike_chance_percent, 0.0, 100.0
        )


@dataclass(frozen=True)
class AtmosphereConfig:
    """
    Global atmospheric conditions.

    air_humidity_percentage is a normalized factor in 0..1, not a
    meteorological relative humidity.
    """

    air_humidity_percentage: float = 0.5
    air_temperature_celsius: float = 30.0

    def __post_init__(self):
        _check_range("air_humidity_percentage", self.air_humidity_percentage, 0.0, 1.0)


@dataclass(frozen=True)
class WindConfig:
    """Wind settings. direction/strength are start values when randomized."""

    random_direction: bool = False
    direction: WindDirection = WindDirection.North
    random_strength: bool = False
    strength: float = 0.75

    def __post_init__(self):
        if not isinstance(self.direction, WindDirection):
            raise ConfigurationError(f"Unknown wind direction {self.direction!r}", "direction")
        _check_range("strength", self.strength, 0.0, 1.0)

    @property
    def is_random(self) -> bool:
        return self.random_direction or self.random_strength


@dataclass(frozen=True)
class EnvironmentConfig:
    atmosphere_config: AtmosphereConfig = field(default_factory=AtmosphereConfig)
    wind_config: WindConfig = field(default_factory=WindConfig)


@dataclass(frozen=True)
class TerrainConfig:
    use_terrain_generation: bool = False


@dataclass(frozen=True)
class PrefillConfig:
    """Initial forest fill. density is the share of max possible trees, 0..1."""

    should_prefill_map: bool = True
    density: float = 0.8

    def __post_init__(self):
        _check_range("density", self.density, 0.0, 1.0)


@dataclass(frozen=True)
class VisualEffectsConfig:
    """Flags only the presentation layer acts on."""

    tree_shape: TreeShape = TreeShape.Ellipse
    show_lightning: bool = True
    show_bolt_screen_flash: bool = False
    show_flame_animations: bool = True
    show_fire_particles: bool = False
    show_smoke_particles: bool = False
    show_burned_down_trees: bool = False


@dataclass(frozen=True)
class SimulationConfig:
    tree_config: TreeConfig = field(default_factory=TreeConfig)
    fire_config: FireConfig = field(default_factory=FireConfig)
    environment_config: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    prefill_config: PrefillConfig = field(default_factory=PrefillConfig)
    visual_effects_config: VisualEffectsConfig = field(default_factory=VisualEffectsConfig)
    terrain_config: TerrainConfig = field(default_factory=TerrainConfig)

    @property
    def atmosphere(self) -> AtmosphereConfig:
        return self.environment_config.atmosphere_config

    @property
    def wind(self) -> WindConfig:
        return self.environment_config.wind_config

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        """
        Build a config from a nested mapping (e.g. parsed JSON).

        Missing sections and keys fall back to defaults. Enum values are
        given by member name, e.g. ``"NorthEast"`` or ``"Rectangle"``.

        Raises:
            ConfigurationError: on unknown keys, unknown enum names or
                out-of-range values
        """
        return _build(cls, data, "")

    def to_dict(self) -> dict:
        return _dump(self)


def _build(cls, data: Mapping[str, Any], prefix: str):
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Expected a mapping, got {type(data).__name__}", prefix or None)

    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        name = sorted(unknown)[0]
        raise ConfigurationError("Unknown configuration key", f"{prefix}{name}")

    kwargs = {}
    for name, value in data.items():
        f = known[name]
        default = f.default_factory() if callable(f.default_factory) else f.default
        if is_dataclass(default):
            kwargs[name] = _build(type(default), value, f"{prefix}{name}.")
        elif isinstance(default, Enum):
            enum_cls = type(default)
            try:
                kwargs[name] = value if isinstance(value, enum_cls) else enum_cls[value]
            except (KeyError, TypeError):
                raise ConfigurationError(
                    f"Unknown {enum_cls.__name__} '{value}'", f"{prefix}{name}"
                ) from None
        else:
            _check_type(f"{prefix}{name}", value, default)
            kwargs[name] = value
    return cls(**kwargs)


def _dump(obj) -> dict:
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if is_dataclass(value):
            result[f.name] = _dump(value)
        elif isinstance(value, Enum):
            result[f.name] = value.name
        else:
            result[f.name] = value
    return result


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """Load a SimulationConfig from a JSON file."""
    path = Path(path)
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path.name}: {e}") from e
    config = SimulationConfig.from_dict(data)
    logger.info(f"Loaded simulation config from {path}")
    return config
