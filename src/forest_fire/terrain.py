import random
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .cell import Cell


class TerrainType(Enum):
    Soil = 0


@dataclass(frozen=True)
class TerrainCell:
    """Elevation in 0..1 (0 = lowest, 1 = peak) and ground type."""
    elevation: float
    type: TerrainType = TerrainType.Soil


class Terrain:
    """
    Procedural height map, generated once per run.

    A single hill: the centre of the map is high, the edges are low, with a
    little uniform noise on top.
    """
    NOISE_AMPLITUDE = 0.1

    def __init__(self, cols: int, rows: int, rng: random.Random):
        self.cols = cols
        self.rows = rows
        self.elevation = self._generate_elevation(rng)
        self.elevation.setflags(write=False)
        self.types = np.full((cols, rows), TerrainType.Soil.value, dtype=np.int8)
        self.types.setflags(write=False)

    def _generate_elevation(self, rng: random.Random) -> np.ndarray:
        center_x = self.cols / 2.0
        center_y = self.rows / 2.0

        elevation = np.empty((self.cols, self.rows), dtype=float)
        for x in range(self.cols):
            for y in range(self.rows):
                dx = (x - center_x) / center_x
                dy = (y - center_y) / center_y
                distance = (dx * dx + dy * dy) ** 0.5  # 0 = centre, 1 = edge
                base_elevation = 1.0 - distance

                noise = rng.uniform(-self.NOISE_AMPLITUDE, self.NOISE_AMPLITUDE)
                elevation[x, y] = min(max(base_elevation + noise, 0.0), 1.0)
        return elevation

    def elevation_at(self, cell: Cell) -> float:
        return float(self.elevation[cell.x, cell.y])

    def type_at(self, cell: Cell) -> TerrainType:
        return TerrainType(int(self.types[cell.x, cell.y]))

    def cell_at(self, cell: Cell) -> TerrainCell:
        return TerrainCell(self.elevation_at(cell), self.type_at(cell))

    def slope_effect(self, source: Cell, target: Cell) -> float:
        """Uphill spread is boosted (1 + 2Δ), downhill damped (1 + Δ)."""
        delta = self.elevation_at(target) - self.elevation_at(source)
        if delta > 0:
            return 1 + delta * 2
        return 1 + delta
