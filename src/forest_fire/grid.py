"""Dense 2D store of per-cell state."""

from typing import Dict, Iterator

import numpy as np

from .cell import Cell, CellState

# Moore neighbourhood, centre excluded
NEIGHBOR_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


class ForestGrid:
    """
    Grid of CellState values backed by a numpy int8 array.

    The array is indexed as ``[x, y]`` with shape ``(cols, rows)``. Only the
    model should call the mutators, because it also maintains the cell caches
    that mirror this grid.
    """

    def __init__(self, cols: int, rows: int):
        """
        Initialize an empty grid.

        Args:
            cols: Number of columns (x range)
            rows: Number of rows (y range)
        """
        if cols < 1 or rows < 1:
            raise ValueError(f"Grid dimensions must be positive, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows
        self._cells = np.full((cols, rows), CellState.Empty.value, dtype=np.int8)

    def state_of(self, cell: Cell) -> CellState:
        return CellState(int(self._cells[cell.x, cell.y]))

    def set_tree(self, cell: Cell) -> None:
        self._cells[cell.x, cell.y] = CellState.Tree.value

    def set_burning(self, cell: Cell) -> None:
        self._cells[cell.x, cell.y] = CellState.Burning.value

    def set_burned(self, cell: Cell) -> None:
        self._cells[cell.x, cell.y] = CellState.Burned.value

    def clear(self, cell: Cell) -> None:
        self._cells[cell.x, cell.y] = CellState.Empty.value

    def is_inside(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.cols and 0 <= cell.y < self.rows

    def is_tree(self, cell: Cell) -> bool:
        return self.is_inside(cell) and self._cells[cell.x, cell.y] == CellState.Tree.value

    def is_burning(self, cell: Cell) -> bool:
        return self.is_inside(cell) and self._cells[cell.x, cell.y] == CellState.Burning.value

    def is_empty(self, cell: Cell) -> bool:
        return self.is_inside(cell) and self._cells[cell.x, cell.y] == CellState.Empty.value

    def neighbors(self, cell: Cell) -> Iterator[Cell]:
        """Yield the up to 8 in-bounds Moore neighbours of a cell."""
        for dx, dy in NEIGHBOR_OFFSETS:
            nx = cell.x + dx
            ny = cell.y + dy
            if 0 <= nx < self.cols and 0 <= ny < self.rows:
                yield Cell(nx, ny)

    def cells(self) -> Iterator[Cell]:
        """Iterate all coordinates, column by column."""
        for x in range(self.cols):
            for y in range(self.rows):
                yield Cell(x, y)

    def counts(self) -> Dict[CellState, int]:
        """Number of cells in each state."""
        values, counts = np.unique(self._cells, return_counts=True)
        histogram = {state: 0 for state in CellState}
        for value, count in zip(values, counts):
            histogram[CellState(int(value))] = int(count)
        return histogram
