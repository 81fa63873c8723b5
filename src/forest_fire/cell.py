"""Cell coordinates, cell states and the cell caches used by the model."""

import random
from enum import Enum
from typing import Dict, Iterable, Iterator, List, NamedTuple


class CellState(Enum):
    """Possible states of a forest cell."""
    Empty = 0
    Tree = 1
    Burning = 2
    Burned = 3


class Cell(NamedTuple):
    """Integer grid coordinate. Hashable, used as a key everywhere."""
    x: int
    y: int


class CellSet:
    """
    Set of cells with O(1) add, remove, membership and random choice.

    The cells live in a list and a dict maps each cell to its list index.
    Removal swaps the last element into the freed slot, so the order only
    depends on the sequence of mutations. A seeded random source therefore
    always picks the same cell.
    """

    def __init__(self, cells: Iterable[Cell] = ()):
        self._items: List[Cell] = []
        self._index: Dict[Cell, int] = {}
        for cell in cells:
            self.add(cell)

    def add(self, cell: Cell) -> bool:
        """Add a cell. Returns False if it was already present."""
        if cell in self._index:
            return False
        self._index[cell] = len(self._items)
        self._items.append(cell)
        return True

    def remove(self, cell: Cell) -> bool:
        """Remove a cell. Returns False if it was not present."""
        idx = self._index.pop(cell, None)
        if idx is None:
            return False
        last = self._items.pop()
        if idx < len(self._items):
            self._items[idx] = last
            self._index[last] = idx
        return True

    def clear(self) -> None:
        self._items.clear()
        self._index.clear()

    def choice(self, rng: random.Random) -> Cell:
        """
        Pick a uniformly random cell.

        Raises:
            IndexError: if the set is empty
        """
        if not self._items:
            raise IndexError("Cannot choose from an empty CellSet")
        return self._items[rng.randrange(len(self._items))]

    def __contains__(self, cell: object) -> bool:
        return cell in self._index

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Cell]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"CellSet({len(self._items)} cells)"
