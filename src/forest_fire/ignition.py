"""Ignition sources: lightning strikes and manual ignition."""

import logging
from typing import TYPE_CHECKING

from .cell import Cell
from .colors import LIGHTNING_COLOR
from .events import LightningStrike, Notification, shape_tag
from .history import FireEventType

if TYPE_CHECKING:
    from .model import ForestFireModel

logger = logging.getLogger(__name__)


class IgnitionController:
    """
    Starts fires.

    Lightning and manual ignition both go through ``model.ignite_tree``,
    so a strike and a click produce exactly the same transition.
    """

    def __init__(self, model: "ForestFireModel"):
        self.model = model
        self.strike_count = 0

    def strike(self) -> bool:
        """
        One ignite tick: maybe throw a lightning bolt.

        Returns:
            True if the bolt set a tree on fire
        """
        model = self.model
        chance_to_strike = model.config.fire_config.lightning_strike_chance_percent / 100
        if model.random.random() >= chance_to_strike:
            return False

        cell = self._pick_target()
        self.strike_count += 1

        visual = model.config.visual_effects_config
        if visual.show_lightning:
            model.history.record_fire_event(FireEventType.Lightning, model.elapsed)
            model.notifications.publish(
                Notification.LIGHTNING_STRIKE,
                LightningStrike(
                    cell=cell,
                    color=LIGHTNING_COLOR,
                    shape=shape_tag(visual.tree_shape),
                    screen_flash=visual.show_bolt_screen_flash,
                ),
            )

        hit = model.ignite_tree(cell)
        logger.debug(f"Lightning at {cell}, {'hit a tree' if hit else 'missed'}")
        return hit

    def _pick_target(self) -> Cell:
        """
        Bias the strike towards live trees in proportion to the current
        density, so sparse forests still see the occasional fire.
        """
        model = self.model
        min_chance_to_hit_tree = model.density_percent() / 100
        if model.random.random() < min_chance_to_hit_tree and len(model.active_trees) > 0:
            return model.active_trees.choice(model.random)

        return Cell(
            model.random.randrange(model.grid.cols),
            model.random.randrange(model.grid.rows),
        )

    def ignite_manually(self, cell: Cell) -> bool:
        """
        Set a tree on fire on request. Anything that is not an in-bounds
        tree is silently ignored and leaves no trace in the fire log.
        """
        model = self.model
        if not model.grid.is_tree(cell):
            return False

        model.ignite_tree(cell)
        model.history.record_fire_event(FireEventType.ManualIgnition, model.elapsed)
        logger.debug(f"Manual ignition at {cell}")
        return True
