"""Tree growth, one seeding attempt per grow tick."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import ForestFireModel

logger = logging.getLogger(__name__)

HEIGHT_PENALTY_FACTOR = 0.7


class GrowthEngine:
    def __init__(self, model: "ForestFireModel"):
        self.model = model

    def target_trees(self) -> int:
        grid = self.model.grid
        return int(grid.cols * grid.rows * self.model.config.tree_config.forest_density)

    def step(self) -> bool:
        """
        Try to grow one tree.

        Returns:
            True if a tree was grown
        """
        model = self.model
        if model.config.fire_config.pause_during_fire and model.fire_active:
            return False

        active = len(model.active_trees)
        if active >= self.target_trees() or active >= model.config.tree_config.max_count:
            return False

        if len(model.growable_cells) == 0:
            logger.debug("No growable cells left")
            return False

        cell = model.growable_cells.choice(model.random)

        if model.terrain is not None:
            # The higher the ground, the less likely a tree takes root
            if model.random.random() < model.terrain.elevation_at(cell) * HEIGHT_PENALTY_FACTOR:
                return False

        model.add_tree(cell)
        return True
