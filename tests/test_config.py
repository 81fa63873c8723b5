"""Unit tests for configuration loading and validation."""

import json

import pytest
from forest_fire.config import (
    AtmosphereConfig,
    ConfigurationError,
    FireConfig,
    PrefillConfig,
    SimulationConfig,
    TreeConfig,
    TreeShape,
    WindConfig,
    WindDirection,
    load_config,
)


class TestDefaults:
    """Test cases for default values."""

    def test_default_config(self):
        config = SimulationConfig()
        assert config.prefill_config.density == 0.8
        assert config.fire_config.spread_chance_percent == 40
        assert config.fire_config.lightning_strike_chance_percent == 15
        assert config.atmosphere.air_humidity_percentage == 0.5
        assert config.atmosphere.air_temperature_celsius == 30
        assert config.wind.strength == 0.75
        assert config.wind.direction == WindDirection.North
        assert not config.wind.is_random

    def test_configs_are_frozen(self):
        config = TreeConfig()
        with pytest.raises(AttributeError):
            config.size = 4


class TestValidation:
    """Test cases for out-of-range values."""

    @pytest.mark.parametrize("factory,parameter", [
        (lambda: TreeConfig(forest_density=1.5), "forest_density"),
        (lambda: TreeConfig(size=0), "size"),
        (lambda: TreeConfig(max_count=-1), "max_count"),
        (lambda: FireConfig(spread_chance_percent=101), "spread_chance_percent"),
        (lambda: FireConfig(lightning_strike_chance_percent=-1), "lightning_strike_chance_percent"),
        (lambda: AtmosphereConfig(air_humidity_percentage=1.2), "air_humidity_percentage"),
        (lambda: WindConfig(strength=2.0), "strength"),
        (lambda: PrefillConfig(density=-0.1), "density"),
    ])
    def test_out_of_range(self, factory, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            factory()
        assert exc_info.value.parameter == parameter

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            WindConfig(direction="North")

    def test_extreme_temperature_is_allowed(self):
        assert AtmosphereConfig(air_temperature_celsius=55).air_temperature_celsius == 55


class TestFromDict:
    """Test cases for building configs from mappings."""

    def test_nested_values_and_enums(self):
        config = SimulationConfig.from_dict({
            "environment_config": {
                "wind_config": {"direction": "SouthWest", "random_strength": True},
            },
            "visual_effects_config": {"tree_shape": "Rectangle"},
        })
        assert config.wind.direction == WindDirection.SouthWest
        assert config.wind.is_random
        assert config.visual_effects_config.tree_shape == TreeShape.Rectangle
        assert config.atmosphere == AtmosphereConfig()

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SimulationConfig.from_dict({"fire_config": {"spread_chance": 10}})
        assert exc_info.value.parameter == "fire_config.spread_chance"

    def test_unknown_enum_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SimulationConfig.from_dict({"visual_effects_config": {"tree_shape": "Hexagon"}})
        assert exc_info.value.parameter == "visual_effects_config.tree_shape"

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            SimulationConfig.from_dict({"tree_config": 5})

    def test_to_dict_roundtrip(self):
        config = SimulationConfig.from_dict({"tree_config": {"size": 4}})
        data = config.to_dict()
        assert data["environment_config"]["wind_config"]["direction"] == "North"
        assert SimulationConfig.from_dict(data) == config


class TestLoadConfig:
    """Test cases for load_config."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"prefill_config": {"density": 0.3}}))
        config = load_config(path)
        assert config.prefill_config.density == 0.3

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestValueTypes:
    """Test cases for wrongly typed values."""

    @pytest.mark.parametrize("data,parameter", [
        ({"tree_config": {"forest_density": "0.5"}}, "tree_config.forest_density"),
        ({"fire_config": {"spread_chance_percent": None}}, "fire_config.spread_chance_percent"),
        ({"tree_config": {"allow_regrow_forest": "no"}}, "tree_config.allow_regrow_forest"),
        ({"tree_config": {"size": 8.5}}, "tree_config.size"),
        ({"tree_config": {"max_count": True}}, "tree_config.max_count"),
        ({"environment_config": {"wind_config": {"strength": False}}},
         "environment_config.wind_config.strength"),
        ({"visual_effects_config": {"tree_shape": ["Ellipse"]}}, "visual_effects_config.tree_shape"),
    ])
    def test_wrong_type_in_mapping(self, data, parameter):
        with pytest.raises(ConfigurationError) as exc_info:
            SimulationConfig.from_dict(data)
        assert exc_info.value.parameter == parameter

    def test_integers_are_accepted_for_float_fields(self):
        config = SimulationConfig.from_dict({
            "environment_config": {"atmosphere_config": {"air_humidity_percentage": 1}},
        })
        assert config.atmosphere.air_humidity_percentage == 1

    def test_wrong_type_in_constructor(self):
        with pytest.raises(ConfigurationError) as exc_info:
            TreeConfig(forest_density="0.5")
        assert exc_info.value.parameter == "forest_density"

    def test_wrong_type_in_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"prefill_config": {"should_prefill_map": "yes"}}))
        with pytest.raises(ConfigurationError):
            load_config(path)
