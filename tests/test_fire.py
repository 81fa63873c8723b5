"""Unit tests for the fire spread engine."""

import pytest
from forest_fire.cell import Cell, CellState

# Deterministic spread: no wind, dry air, reference temperature
CERTAIN_SPREAD = {
    "environment_config": {
        "atmosphere_config": {"air_humidity_percentage": 0.0, "air_temperature_celsius": 30},
        "wind_config": {"strength": 0.0},
    },
    "fire_config": {"enable_lightning_strikes": False, "spread_chance_percent": 0},
}


def plant(model, cells):
    for cell in cells:
        assert model.grow_manually(cell)


class TestFireSpread:
    """Test cases for FireSpreadEngine."""

    def test_step_without_fire_is_noop(self, make_model):
        model = make_model()
        plant(model, [Cell(1, 1)])
        model.fire_engine.step()
        assert not model.fire_active
        assert model.state_of(Cell(1, 1)) == CellState.Tree

    def test_certain_spread_ignites_neighbours(self, make_model):
        model = make_model(**CERTAIN_SPREAD)
        plant(model, [Cell(5, 5), Cell(5, 6), Cell(6, 6)])
        model.ignite_manually(Cell(5, 5))

        model.fire_engine.step()

        assert model.state_of(Cell(5, 5)) == CellState.Empty
        assert model.state_of(Cell(5, 6)) == CellState.Burning
        assert model.state_of(Cell(6, 6)) == CellState.Burning
        assert model.fire_active
        assert model.total_burned_trees == 1

    def test_no_chain_reaction_within_one_tick(self, make_model):
        """A cell ignited this tick does not spread until the next one."""
        model = make_model(**CERTAIN_SPREAD)
        plant(model, [Cell(x, 0) for x in range(10)])
        model.ignite_manually(Cell(0, 0))

        model.fire_engine.step()
        assert model.state_of(Cell(1, 0)) == CellState.Burning
        assert model.state_of(Cell(2, 0)) == CellState.Tree

        model.fire_engine.step()
        assert model.state_of(Cell(1, 0)) == CellState.Empty
        assert model.state_of(Cell(2, 0)) == CellState.Burning
        assert model.state_of(Cell(3, 0)) == CellState.Tree

    def test_saturated_air_never_spreads(self, make_model):
        model = make_model(
            environment_config={
                "atmosphere_config": {"air_humidity_percentage": 1.0},
                "wind_config": {"strength": 0.0},
            },
            fire_config={"enable_lightning_strikes": False, "spread_chance_percent": 100},
        )
        neighbours = list(model.grid.neighbors(Cell(5, 5)))
        plant(model, [Cell(5, 5)] + neighbours)
        model.ignite_manually(Cell(5, 5))

        model.fire_engine.step()

        assert all(model.state_of(c) == CellState.Tree for c in neighbours)
        assert model.burning_count == 0
        assert model.fire_engine.spread_chance(Cell(5, 5), Cell(5, 6)) == 0.0

    def test_fire_burns_out(self, make_model):
        model = make_model(**CERTAIN_SPREAD)
        plant(model, [Cell(0, 0), Cell(9, 9)])
        model.ignite_manually(Cell(0, 0))

        model.fire_engine.step()
        model.fire_engine.step()

        assert not model.fire_active
        assert model.state_of(Cell(9, 9)) == CellState.Tree

    def test_burned_trees_can_stay_visible(self, make_model):
        model = make_model(
            visual_effects_config={"show_burned_down_trees": True}, **CERTAIN_SPREAD
        )
        plant(model, [Cell(4, 4)])
        model.ignite_manually(Cell(4, 4))

        model.fire_engine.step()

        assert model.state_of(Cell(4, 4)) == CellState.Burned
        assert Cell(4, 4) not in model.growable_cells
        assert not model.grow_manually(Cell(4, 4))

    def test_burned_down_cell_becomes_growable(self, make_model):
        model = make_model(**CERTAIN_SPREAD)
        plant(model, [Cell(4, 4)])
        model.ignite_manually(Cell(4, 4))

        model.fire_engine.step()

        assert Cell(4, 4) in model.growable_cells

    def test_spot_fires_jump_gaps(self, make_model):
        """Embers reach trees 2 to 4 cells away without touching neighbours."""
        config = dict(CERTAIN_SPREAD)
        config["fire_config"] = {"enable_lightning_strikes": False, "spread_chance_percent": 100}
        centre = Cell(5, 5)
        ring = [
            Cell(5 + dx, 5 + dy)
            for dx in range(-4, 5)
            for dy in range(-4, 5)
            if 2 <= (dx * dx + dy * dy) ** 0.5 < 4
        ]

        jumped = 0
        for seed in range(50):
            model = make_model(cols=11, rows=11, seed=seed, **config)
            plant(model, [centre] + ring)
            model.ignite_manually(centre)
            model.fire_engine.step()

            burning = [c for c in ring if model.state_of(c) == CellState.Burning]
            assert len(burning) <= 1
            jumped += len(burning)

        assert jumped > 0

    def test_terrain_changes_spread_chance(self, make_model):
        flat = make_model(**CERTAIN_SPREAD)
        hilly = make_model(terrain_config={"use_terrain_generation": True}, **CERTAIN_SPREAD)

        source, target = Cell(4, 5), Cell(5, 5)
        expected = (
            1.0
            * (1.0 + hilly.terrain.elevation_at(target) * 0.5)
            * hilly.terrain.slope_effect(source, target)
        )
        assert flat.fire_engine.spread_chance(source, target) == pytest.approx(1.0)
        assert hilly.fire_engine.spread_chance(source, target) == pytest.approx(expected)

    def test_spot_fires_never_reach_four_cells(self, make_model):
        """The ember range is open at 4: trees at distance 4 or more stay safe."""
        config = dict(CERTAIN_SPREAD)
        config["fire_config"] = {"enable_lightning_strikes": False, "spread_chance_percent": 100}
        centre = Cell(5, 5)
        far_trees = [
            Cell(x, y)
            for x in range(11)
            for y in range(11)
            if ((x - 5) ** 2 + (y - 5) ** 2) ** 0.5 >= 4
        ]
        assert Cell(9, 5) in far_trees

        for seed in range(100):
            model = make_model(cols=11, rows=11, seed=seed, **config)
            plant(model, [centre] + far_trees)
            model.ignite_manually(centre)
            model.fire_engine.step()

            assert model.burning_count == 0
            assert model.active_tree_count == len(far_trees)

    @pytest.mark.parametrize("temperature,wind,target,expected", [
        (30, 0.0, Cell(7, 6), 2 / 5 ** 0.5 * 0.5),
        (15, 0.0, Cell(7, 6), 2 / 5 ** 0.5 * 0.5 * 0.5),
        (30, 0.75, Cell(5, 8), 2 / 3 * 1.75 * 0.5),
        (30, 0.75, Cell(5, 2), 2 / 3 * 0.25 * 0.5),
    ])
    def test_spot_fire_chance(self, make_model, temperature, wind, target, expected):
        """Ember ignition falls off as 2 / distance and carries every environment factor."""
        model = make_model(environment_config={
            "atmosphere_config": {"air_humidity_percentage": 0.5, "air_temperature_celsius": temperature},
            "wind_config": {"direction": "North", "strength": wind},
        })
        assert model.fire_engine.spot_fire_chance(Cell(5, 5), target) == pytest.approx(expected)
