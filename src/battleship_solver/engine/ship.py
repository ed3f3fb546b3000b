"""Ship domain model for the solver engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .grid import CellState, Coordinate, Grid

DEFAULT_SHIP_LENGTHS: tuple[int, ...] = (5, 4, 3, 3, 2)


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def step(self) -> tuple[int, int]:
        """Return the ``(col, row)`` delta between consecutive ship cells."""
        return (1, 0) if self is Orientation.HORIZONTAL else (0, 1)


def run_cells(origin: Coordinate, length: int, orientation: Orientation) -> tuple[Coordinate, ...]:
    """Return the cells covered by a run of ``length`` starting at ``origin``."""
    delta_col, delta_row = orientation.step()
    return tuple(
        Coordinate(origin.col + delta_col * offset, origin.row + delta_row * offset)
        for offset in range(length)
    )


@dataclass(frozen=True)
class Ship:
    """A single placed ship. Its position never changes after layout."""

    length: int
    origin: Coordinate
    orientation: Orientation
    cells: tuple[Coordinate, ...] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cells", run_cells(self.origin, self.length, self.orientation))

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self.cells

    def is_sunk(self, grid: Grid) -> bool:
        """Determine whether every cell belonging to the ship has been hit."""
        return all(grid.get(coord) in (CellState.HIT, CellState.SUNK) for coord in self.cells)
