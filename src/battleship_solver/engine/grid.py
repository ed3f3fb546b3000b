"""Fixed-size cell-state store for a single Battleship board."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

import numpy as np
import numpy.typing as npt

from .errors import OutOfBoundsError

logger = logging.getLogger(__name__)

DEFAULT_BOARD_SIZE = 10


class CellState(IntEnum):
    """State of a board cell.

    ``OCCUPIED`` marks a ship cell that has not been fired upon yet. Targeting
    code treats it exactly like ``UNKNOWN``.
    """

    UNKNOWN = 0
    OCCUPIED = 1
    MISS = 2
    HIT = 3
    SUNK = 4

    @property
    def is_resolved(self) -> bool:
        """Return True once the cell has been fired upon."""
        return self >= CellState.MISS


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate, column first."""

    col: int
    row: int


class Grid:
    """Represents an N×N board of :class:`CellState` values."""

    def __init__(self, size: int = DEFAULT_BOARD_SIZE) -> None:
        if size <= 0:
            raise ValueError("Board size must be positive.")
        self.size = size
        # Stored row-major so that C-order scans visit rows outermost.
        self._cells: npt.NDArray[np.int8] = np.full(
            (size, size), CellState.UNKNOWN, dtype=np.int8
        )

    def in_bounds(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.col < self.size and 0 <= coord.row < self.size

    def get(self, coord: Coordinate) -> CellState:
        self.check_bounds(coord)
        return CellState(int(self._cells[coord.row, coord.col]))

    def set(self, coord: Coordinate, state: CellState) -> None:
        self.check_bounds(coord)
        self._cells[coord.row, coord.col] = state

    def count(self, state: CellState) -> int:
        """Return how many cells currently hold ``state``."""
        return int(np.count_nonzero(self._cells == state))

    def coordinates(self, state: CellState | None = None) -> Iterator[Coordinate]:
        """Yield coordinates in row-major order, optionally filtered by state."""
        for row in range(self.size):
            for col in range(self.size):
                if state is None or self._cells[row, col] == state:
                    yield Coordinate(col, row)

    def mask(self, *states: CellState) -> npt.NDArray[np.bool_]:
        """Return a boolean ``[row, col]`` array marking cells in any of ``states``."""
        selected = np.zeros(self._cells.shape, dtype=bool)
        for state in states:
            selected |= self._cells == state
        return selected

    def copy(self) -> Grid:
        clone = Grid(self.size)
        clone._cells = self._cells.copy()
        return clone

    def check_bounds(self, coord: Coordinate) -> None:
        if not self.in_bounds(coord):
            logger.error(
                "grid_out_of_bounds",
                extra={"col": coord.col, "row": coord.row, "size": self.size},
            )
            raise OutOfBoundsError(
                f"Coordinate ({coord.col}, {coord.row}) is outside a {self.size}x{self.size} grid."
            )
