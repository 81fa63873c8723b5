"""Atmospheric multipliers for the fire spread probability."""

from .config import AtmosphereConfig

MIN_TEMPERATURE_C = 0
MAX_TEMPERATURE_C = 30
EXTREME_HEAT_SCALE = 100


def temperature_effect(atmosphere: AtmosphereConfig) -> float:
    """
    Map air temperature to a spread multiplier.

    0 °C and below give 0.0, 30 °C gives 1.0. Above 30 °C the factor keeps
    growing by 0.1 per 10 °C, so 40 °C gives 1.1.
    """
    temperature = atmosphere.air_temperature_celsius
    normalized = (temperature - MIN_TEMPERATURE_C) / (MAX_TEMPERATURE_C - MIN_TEMPERATURE_C)
    normalized = min(max(normalized, 0.0), 1.0)

    if temperature > MAX_TEMPERATURE_C:
        normalized += (temperature - MAX_TEMPERATURE_C) / EXTREME_HEAT_SCALE

    return normalized


def humidity_effect(atmosphere: AtmosphereConfig) -> float:
    """Dry air spreads fire, saturated air (1.0) stops it."""
    return 1.0 - atmosphere.air_humidity_percentage
