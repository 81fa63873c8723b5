"""Forest fire model: owns the grid, its caches and the tick handlers."""

import asyncio
import logging
from datetime import timedelta
from typing import Dict, Iterator, List, Optional

from mesa import Model

from .atmosphere import humidity_effect, temperature_effect
from .cell import Cell, CellSet, CellState
from .clock import SimulationClock, SimulationSpeed, TriggerKind
from .colors import BURNED_COLOR, BURNING_COLOR, TREE_COLORS, Color, adjust_color_by_elevation
from .config import ConfigurationError, SimulationConfig
from .events import EventChannel, FireEffect, Notification, TreeChange, shape_tag
from .fire import FireSpreadEngine
from .grid import ForestGrid
from .growth import GrowthEngine
from .history import (
    Evaluation,
    HistoryRecorder,
    density_percent,
    format_density,
    format_runtime,
    format_wind,
)
from .ignition import IgnitionController
from .terrain import Terrain, TerrainType
from .wind import Wind

logger = logging.getLogger(__name__)


class ForestFireModel(Model):
    """
    Probabilistic forest fire cellular automaton.

    The grid is the single source of truth. ``active_trees``,
    ``burning_cells`` and ``growable_cells`` are caches over it, and every
    mutation goes through one of the methods below, which update the grid
    and all three caches together. Collaborators read state and subscribe
    to ``notifications``. They never mutate anything directly.
    """

    MAX_SIMULATION_TIME = timedelta(hours=99)
    LOW_DENSITY_MINIMUM_PERCENT = 3
    PREFILL_BATCH_SIZE = 200
    FIRE_PARTICLE_CHANCE = 0.7

    def __init__(
        self,
        config: SimulationConfig,
        cols: int,
        rows: int,
        clock: Optional[SimulationClock] = None,
        seed: Optional[int] = None,
        speed: SimulationSpeed = SimulationSpeed.Normal,
    ):
        """
        Initialize the model.

        Args:
            config: Immutable simulation configuration
            cols: Grid width in cells
            rows: Grid height in cells
            clock: Tick scheduler to drive the model, a fresh one by default
            seed: Seed for the random source, unseeded by default
            speed: Initial simulation speed
        """
        super().__init__(seed=seed)
        if cols < 1 or rows < 1:
            raise ConfigurationError(f"Grid must be at least 1x1, got {cols}x{rows}", "dimensions")

        self.config = config
        self.running = False
        self.notifications = EventChannel()
        self.history = HistoryRecorder()
        self.clock = clock if clock is not None else SimulationClock(speed)
        self.speed = speed
        self.elapsed = timedelta(0)
        self.evaluation: Optional[Evaluation] = None

        self.total_grown_trees = 0
        self.total_burned_trees = 0

        # Environment multipliers are fixed for the run
        self.temperature_effect = temperature_effect(config.atmosphere)
        self.humidity_effect = humidity_effect(config.atmosphere)
        self.wind = Wind(config.wind, self.random)

        self.grid = ForestGrid(cols, rows)
        self.max_trees_possible = max(1, int(cols * rows * config.tree_config.forest_density))
        self.terrain: Optional[Terrain] = None
        if config.terrain_config.use_terrain_generation:
            self.terrain = Terrain(cols, rows, self.random)

        self.active_trees = CellSet()
        self.burning_cells = CellSet()
        self.growable_cells = CellSet(c for c in self.grid.cells() if self._is_fertile(c))
        self._tree_colors: Dict[Cell, Color] = {}
        self._fire_effects: set = set()

        self.fire_engine = FireSpreadEngine(self)
        self.growth_engine = GrowthEngine(self)
        self.ignition = IgnitionController(self)

        self._wire_clock()
        self.set_speed(speed)
        logger.info(
            f"Created {cols}x{rows} forest, max {self.max_trees_possible} trees, "
            f"terrain {'on' if self.terrain is not None else 'off'}"
        )

    @classmethod
    def from_viewport(
        cls, config: SimulationConfig, width: float, height: float, **kwargs
    ) -> "ForestFireModel":
        """Build a model whose grid fills a viewport of width x height pixels."""
        size = config.tree_config.size
        return cls(config, int(width // size), int(height // size), **kwargs)

    def _wire_clock(self) -> None:
        self.clock.on(TriggerKind.SECOND, self._on_second)
        self.clock.on(TriggerKind.FIRE, self.fire_engine.step)
        if self.config.tree_config.allow_regrow_forest:
            self.clock.on(TriggerKind.GROW, self.growth_engine.step)
        if self.config.fire_config.enable_lightning_strikes:
            self.clock.on(TriggerKind.IGNITE, self.ignition.strike)
        if self.config.wind.is_random:
            self.clock.on(TriggerKind.WIND, self._update_wind)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_or_resume(self) -> None:
        self.running = True
        if self.config.tree_config.allow_regrow_forest:
            self.clock.start(TriggerKind.GROW)
        self.clock.start(TriggerKind.IGNITE)
        self.clock.start(TriggerKind.FIRE)
        self.clock.start(TriggerKind.SECOND)

        if self.config.wind.is_random:
            self.clock.start(TriggerKind.WIND)
        else:
            self._publish_wind()
        logger.info(f"Simulation running at {self.speed.name} speed")

    def stop_or_pause(self) -> None:
        self.running = False
        self.clock.stop_all()
        logger.info(f"Simulation paused at {format_runtime(self.elapsed)}")

    def set_speed(self, speed: SimulationSpeed) -> None:
        self.speed = speed
        self.clock.set_speed(speed)

    def step(self) -> None:
        """Advance the clock by one base interval (one grow and one fire tick)."""
        self.clock.advance(self.speed.value)

    def advance(self, delta_ms: float) -> int:
        return self.clock.advance(delta_ms)

    def ignite_manually(self, cell: Cell) -> bool:
        if not self.grid.is_inside(cell):
            return False
        return self.ignition.ignite_manually(cell)

    def grow_manually(self, cell: Cell) -> bool:
        """Plant a tree on a growable cell. Anything else is a no-op."""
        if not self.grid.is_inside(cell) or cell not in self.growable_cells:
            return False
        self.add_tree(cell)
        return True

    def destroy_manually(self, cell: Cell) -> bool:
        """
        Reset any cell to Empty.

        Removing a live or burning tree takes it back out of the grown
        total, as if it had never grown.
        """
        if not self.grid.is_inside(cell):
            return False

        state = self.grid.state_of(cell)
        if state == CellState.Empty:
            return False
        if state in (CellState.Tree, CellState.Burning):
            self.total_grown_trees -= 1

        self.grid.clear(cell)
        self.active_trees.remove(cell)
        self.burning_cells.remove(cell)
        if self._is_fertile(cell):
            self.growable_cells.add(cell)

        self._stop_fire_effect(cell)
        self._tree_colors.pop(cell, None)
        self.notifications.publish(
            Notification.TREE_REMOVED, TreeChange(cell, BURNED_COLOR, self._shape())
        )
        self._publish_tree_stats()
        return True

    def prefill(self) -> int:
        """
        Fill the forest up to the configured prefill density in one go.

        Returns:
            Number of trees added
        """
        added = 0
        for batch in self._prefill_batches():
            added += self._add_batch(batch)
        self._finish_prefill(added)
        return added

    async def prefill_async(self) -> int:
        """Like prefill(), but yields to the event loop between batches."""
        added = 0
        for batch in self._prefill_batches():
            added += self._add_batch(batch)
            await asyncio.sleep(0)
        self._finish_prefill(added)
        return added

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def state_of(self, cell: Cell) -> CellState:
        if not self.grid.is_inside(cell):
            raise IndexError(f"Cell {cell} is outside the {self.grid.cols}x{self.grid.rows} grid")
        return self.grid.state_of(cell)

    def tree_color(self, cell: Cell) -> Optional[Color]:
        return self._tree_colors.get(cell)

    def elevation_at(self, cell: Cell) -> float:
        return 0.0 if self.terrain is None else self.terrain.elevation_at(cell)

    @property
    def active_tree_count(self) -> int:
        return len(self.active_trees)

    @property
    def burning_count(self) -> int:
        return len(self.burning_cells)

    def density_percent(self) -> float:
        return density_percent(len(self.active_trees), self.max_trees_possible)

    @property
    def fire_active(self) -> bool:
        return self.fire_engine.fire_active

    def evaluate(self) -> Evaluation:
        atmosphere = self.config.atmosphere
        return Evaluation(
            total_grown_trees=self.total_grown_trees,
            total_burned_trees=self.total_burned_trees,
            max_trees_possible=self.max_trees_possible,
            air_humidity_percentage=atmosphere.air_humidity_percentage,
            air_temperature_celsius=atmosphere.air_temperature_celsius,
            runtime=self.elapsed,
            history=self.history.snapshots,
            fire_events=self.history.fire_events,
        )

    # ------------------------------------------------------------------
    # Grid mutations (grid and caches change together)
    # ------------------------------------------------------------------

    def add_tree(self, cell: Cell, notify: bool = True) -> None:
        self.grid.set_tree(cell)
        self.growable_cells.remove(cell)
        self.active_trees.add(cell)
        self.total_grown_trees += 1

        color = self._pick_tree_color(cell)
        self._tree_colors[cell] = color
        self.notifications.publish(Notification.TREE_ADDED, TreeChange(cell, color, self._shape()))
        if notify:
            self._publish_tree_stats()

    def ignite_tree(self, cell: Cell, notify: bool = True) -> bool:
        """Tree -> Burning. Returns False (and does nothing) for any other cell."""
        if not self.grid.is_tree(cell):
            return False

        self.grid.set_burning(cell)
        self.active_trees.remove(cell)
        self.burning_cells.add(cell)

        self.notifications.publish(
            Notification.TREE_COLOR_CHANGED, TreeChange(cell, BURNING_COLOR, self._shape())
        )
        self._spawn_fire_effect(cell)
        if notify:
            self._publish_tree_stats()
        return True

    def burn_down_trees(self, cells: List[Cell]) -> None:
        for cell in cells:
            self._burn_down(cell)
        self._publish_tree_stats()

    def _burn_down(self, cell: Cell) -> None:
        self.burning_cells.remove(cell)
        self._stop_fire_effect(cell)
        self.total_burned_trees += 1

        if self.config.visual_effects_config.show_burned_down_trees:
            self.grid.set_burned(cell)
            self._tree_colors[cell] = BURNED_COLOR
            self.notifications.publish(
                Notification.TREE_COLOR_CHANGED, TreeChange(cell, BURNED_COLOR, self._shape())
            )
            return

        self.grid.clear(cell)
        if self._is_fertile(cell):
            self.growable_cells.add(cell)
        self._tree_colors.pop(cell, None)
        self.notifications.publish(
            Notification.TREE_REMOVED, TreeChange(cell, BURNED_COLOR, self._shape())
        )

    # ------------------------------------------------------------------
    # Tick handlers
    # ------------------------------------------------------------------

    def _on_second(self) -> None:
        if self._should_terminate():
            self.stop_or_pause()
            if self.evaluation is None:
                self.evaluation = self.evaluate()
                logger.info(
                    f"Run finished after {format_runtime(self.elapsed)}: "
                    f"{self.total_grown_trees} grown, {self.total_burned_trees} burned"
                )
                self.notifications.publish(Notification.EVALUATION, self.evaluation)
            return

        self.elapsed += timedelta(seconds=1)
        self.notifications.publish(Notification.TIME_TEXT, format_runtime(self.elapsed))
        self.history.record_snapshot(
            self.elapsed, self.total_grown_trees, self.total_burned_trees, self.wind.strength
        )

    def _should_terminate(self) -> bool:
        if self.elapsed >= self.MAX_SIMULATION_TIME:
            return True
        return (
            self.config.prefill_config.should_prefill_map
            and self.density_percent() <= self.LOW_DENSITY_MINIMUM_PERCENT
            and not self.config.tree_config.allow_regrow_forest
        )

    def _update_wind(self) -> None:
        self.wind.randomize()
        self._publish_wind()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_fertile(self, cell: Cell) -> bool:
        return self.terrain is None or self.terrain.type_at(cell) == TerrainType.Soil

    def _prefill_batches(self) -> Iterator[List[Cell]]:
        prefill = self.config.prefill_config
        if not prefill.should_prefill_map:
            return

        max_trees = int(self.max_trees_possible * prefill.density)
        cells = list(self.grid.cells())
        self.random.shuffle(cells)
        cells = cells[:max_trees]

        for start in range(0, len(cells), self.PREFILL_BATCH_SIZE):
            yield cells[start:start + self.PREFILL_BATCH_SIZE]

    def _add_batch(self, batch: List[Cell]) -> int:
        added = 0
        for cell in batch:
            if cell in self.growable_cells:
                self.add_tree(cell, notify=False)
                added += 1
        return added

    def _finish_prefill(self, added: int) -> None:
        self._publish_tree_stats()
        logger.info(f"Prefilled forest with {added} trees")

    def _pick_tree_color(self, cell: Cell) -> Color:
        color = self.random.choice(TREE_COLORS)
        if self.terrain is not None:
            return adjust_color_by_elevation(color, self.terrain.elevation_at(cell))
        return color

    def _shape(self) -> str:
        return shape_tag(self.config.visual_effects_config.tree_shape)

    def _spawn_fire_effect(self, cell: Cell) -> None:
        # Too many cells change per second at Ultra speed for animations
        if self.speed == SimulationSpeed.Ultra:
            return

        visual = self.config.visual_effects_config
        particles = visual.show_fire_particles and self.random.random() < self.FIRE_PARTICLE_CHANCE
        smoke = visual.show_smoke_particles and not particles
        effect = FireEffect(cell, flames=visual.show_flame_animations, particles=particles, smoke=smoke)
        if not (effect.flames or effect.particles or effect.smoke):
            return

        self._fire_effects.add(cell)
        self.notifications.publish(Notification.FIRE_EFFECT_STARTED, effect)

    def _stop_fire_effect(self, cell: Cell) -> None:
        if cell not in self._fire_effects:
            return
        self._fire_effects.discard(cell)
        self.notifications.publish(
            Notification.FIRE_EFFECT_STOPPED, FireEffect(cell, flames=False, particles=False, smoke=False)
        )

    def _publish_tree_stats(self) -> None:
        self.notifications.publish(
            Notification.DENSITY_TEXT, format_density(len(self.active_trees), self.max_trees_possible)
        )
        self.notifications.publish(Notification.GROWN_TEXT, str(self.total_grown_trees))
        self.notifications.publish(Notification.BURNED_TEXT, str(self.total_burned_trees))

    def _publish_wind(self) -> None:
        self.notifications.publish(Notification.WIND_TEXT, format_wind(self.wind.strength))
        self.notifications.publish(Notification.WIND_CHANGED, self.wind.vector())

    def __str__(self) -> str:
        return (
            f"ForestFireModel {self.grid.cols}x{self.grid.rows} at {format_runtime(self.elapsed)}: "
            f"{len(self.active_trees)} trees, {len(self.burning_cells)} burning, {self.wind}"
        )
