"""Fire spread: one synchronous cellular-automaton step per fire tick."""

import logging
import math
from typing import TYPE_CHECKING, List, Set

from .cell import Cell

if TYPE_CHECKING:
    from .model import ForestFireModel

logger = logging.getLogger(__name__)

MIN_SPOT_FIRE_RADIUS = 2
MAX_SPOT_FIRE_RADIUS = 4
ELEVATION_DRYNESS_FACTOR = 0.5


class FireSpreadEngine:
    """
    Evaluates every burning cell and commits the result as one batch.

    The step has two phases. In the first, every decision reads the grid
    as it was when the tick started and only stages ignitions and
    burn-downs. In the second, the staged ignitions are applied, then the
    burn-downs. A cell ignited in this tick never spreads in this tick.
    """

    def __init__(self, model: "ForestFireModel"):
        self.model = model
        self.fire_active = False

    def step(self) -> None:
        model = self.model
        if len(model.burning_cells) == 0:
            self.fire_active = False
            return

        to_ignite: Set[Cell] = set()
        to_burn_down: List[Cell] = []

        # Phase 1: decide from the pre-tick state
        for burning_cell in sorted(model.burning_cells):
            self._try_spot_fire(burning_cell, to_ignite)

            for neighbor in model.grid.neighbors(burning_cell):
                if not model.grid.is_tree(neighbor):
                    continue
                if model.random.random() < self.spread_chance(burning_cell, neighbor):
                    to_ignite.add(neighbor)

            to_burn_down.append(burning_cell)

        # Phase 2: commit
        for cell in sorted(to_ignite):
            model.ignite_tree(cell, notify=False)
        model.burn_down_trees(to_burn_down)

        self.fire_active = len(model.burning_cells) > 0
        logger.debug(
            f"Fire step: {len(to_ignite)} ignited, {len(to_burn_down)} burned down, "
            f"{len(model.burning_cells)} burning"
        )

    def spread_chance(self, burning_cell: Cell, neighbor: Cell) -> float:
        """Ignition probability for an adjacent tree."""
        model = self.model
        chance = (
            model.wind.effect(burning_cell, neighbor)
            * model.humidity_effect
            * model.temperature_effect
        )

        if model.terrain is not None:
            # Higher ground is drier
            elevation_effect = 1.0 + model.terrain.elevation_at(neighbor) * ELEVATION_DRYNESS_FACTOR
            chance *= elevation_effect * model.terrain.slope_effect(burning_cell, neighbor)

        return chance

    def spot_fire_chance(self, source: Cell, target: Cell) -> float:
        """Ignition probability for a tree hit by embers, falling off as 2 / distance."""
        model = self.model
        distance = math.hypot(target.x - source.x, target.y - source.y)
        return (
            (MIN_SPOT_FIRE_RADIUS / distance)
            * model.wind.effect(source, target)
            * model.humidity_effect
            * model.temperature_effect
        )

    def _try_spot_fire(self, source: Cell, to_ignite: Set[Cell]) -> None:
        """
        Ember transport: maybe ignite one tree 2 to 4 cells away.

        The attempt itself happens with the configured spread chance; the
        ignition chance then falls off as 2 / distance.
        """
        model = self.model
        attempt_chance = model.config.fire_config.spread_chance_percent / 100
        if model.random.random() >= attempt_chance:
            return

        offset_x = model.random.randint(-MAX_SPOT_FIRE_RADIUS, MAX_SPOT_FIRE_RADIUS)
        offset_y = model.random.randint(-MAX_SPOT_FIRE_RADIUS, MAX_SPOT_FIRE_RADIUS)
        distance = math.hypot(offset_x, offset_y)
        if not MIN_SPOT_FIRE_RADIUS <= distance < MAX_SPOT_FIRE_RADIUS:
            return

        target = Cell(source.x + offset_x, source.y + offset_y)
        if not model.grid.is_tree(target):
            return

        if model.random.random() < self.spot_fire_chance(source, target):
            to_ignite.add(target)
