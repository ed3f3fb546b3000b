"""Occupancy-probability field used to pick the next shot.

For every ship still afloat the field counts, per cell, how many placements of
that ship could legally cover the cell given the misses and sunk ships seen so
far. Cells next to an isolated hit are then boosted by a skew factor, and when
two hits line up the nearest open cells on either end of the line are *locked*:
a locked cell outranks every unlocked cell, whatever its count.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import numpy.typing as npt

from .fleet import Fleet
from .grid import CellState, Coordinate, Grid
from .ship import Orientation, Ship, run_cells

DEFAULT_SKEW_FACTOR = 10

Counts = npt.NDArray[np.int64]
Flags = npt.NDArray[np.bool_]


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Score:
    """Tagged per-cell score.

    Locked scores compare equal to each other and greater than any count.
    """

    count: int
    locked: bool = False

    def _key(self) -> tuple[int, int]:
        return (1, 0) if self.locked else (0, self.count)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Score):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Score) -> bool:
        if not isinstance(other, Score):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class ProbabilityField:
    """Read-only snapshot of per-cell counts and locks for one board state."""

    def __init__(self, counts: Counts, locked: Flags) -> None:
        self._counts = counts
        self._locked = locked

    @property
    def size(self) -> int:
        return int(self._counts.shape[0])

    @property
    def counts(self) -> Counts:
        """Return a ``[row, col]`` copy of the raw counts."""
        return self._counts.copy()

    @property
    def locked(self) -> Flags:
        """Return a ``[row, col]`` copy of the lock flags."""
        return self._locked.copy()

    def score(self, coord: Coordinate) -> Score:
        return Score(int(self._counts[coord.row, coord.col]), bool(self._locked[coord.row, coord.col]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProbabilityField):
            return NotImplemented
        return np.array_equal(self._counts, other._counts) and np.array_equal(
            self._locked, other._locked
        )

    __hash__ = None  # type: ignore[assignment]


def can_still_occupy(grid: Grid, origin: Coordinate, length: int, orientation: Orientation) -> bool:
    """Check whether an afloat ship could still lie on this run.

    Only misses, sunk cells and the board edge rule a run out; hits and
    untouched cells are both compatible.
    """
    cells = run_cells(origin, length, orientation)
    if not grid.in_bounds(cells[-1]):
        return False
    return all(grid.get(coord) not in (CellState.MISS, CellState.SUNK) for coord in cells)


def _run_coverage(blocked: Flags, length: int) -> Counts:
    """Count, per cell, the unblocked horizontal runs of ``length`` covering it.

    Equivalent to testing :func:`can_still_occupy` at every horizontal origin
    and adding one to each cell of every accepted run.
    """
    rows, cols = blocked.shape
    starts = cols - length + 1
    if starts <= 0:
        return np.zeros((rows, cols), dtype=np.int64)

    blocked_sum = np.zeros((rows, cols + 1), dtype=np.int64)
    blocked_sum[:, 1:] = np.cumsum(blocked, axis=1, dtype=np.int64)
    open_runs = (blocked_sum[:, length:] - blocked_sum[:, :starts]) == 0

    open_sum = np.zeros((rows, starts + 1), dtype=np.int64)
    open_sum[:, 1:] = np.cumsum(open_runs, axis=1, dtype=np.int64)
    col_index = np.arange(cols)
    upper = np.minimum(col_index, starts - 1) + 1
    lower = np.maximum(col_index - length + 1, 0)
    return open_sum[:, upper] - open_sum[:, lower]


def placement_counts(grid: Grid, ships: Iterable[Ship]) -> Counts:
    """Return unskewed per-cell placement counts for ``ships``."""
    blocked = grid.mask(CellState.MISS, CellState.SUNK)
    counts = np.zeros((grid.size, grid.size), dtype=np.int64)
    for ship in ships:
        counts += _run_coverage(blocked, ship.length)
        counts += _run_coverage(blocked.T, ship.length).T
    return counts


def _skew_around_hits(grid: Grid, counts: Counts, locked: Flags, skew_factor: int) -> None:
    hit = grid.mask(CellState.HIT)
    size = grid.size

    def boost(row: int, col: int) -> None:
        if not locked[row, col]:
            counts[row, col] *= skew_factor

    def lock_line_ends(row: int, col: int, delta_row: int, delta_col: int) -> None:
        # Walk away from the pair in both directions to the first non-hit cell.
        for sign in (-1, 1):
            r, c = row + sign * delta_row, col + sign * delta_col
            while 0 <= r < size and 0 <= c < size:
                if not hit[r, c]:
                    locked[r, c] = True
                    break
                r += sign * delta_row
                c += sign * delta_col

    for row, col in zip(*np.nonzero(hit)):
        row, col = int(row), int(col)
        for delta_row, delta_col in ((0, 1), (1, 0)):
            forward = (row + delta_row, col + delta_col)
            if forward[0] < size and forward[1] < size:
                if hit[forward]:
                    lock_line_ends(row, col, delta_row, delta_col)
                else:
                    boost(*forward)
            backward = (row - delta_row, col - delta_col)
            if backward[0] >= 0 and backward[1] >= 0 and not hit[backward]:
                boost(*backward)


def recompute(
    grid: Grid,
    fleet: Fleet,
    skew_enabled: bool = True,
    skew_factor: int = DEFAULT_SKEW_FACTOR,
) -> ProbabilityField:
    """Build a fresh probability field from the current grid state."""
    counts = placement_counts(grid, fleet.afloat(grid))
    locked = np.zeros((grid.size, grid.size), dtype=bool)
    if skew_enabled:
        _skew_around_hits(grid, counts, locked, skew_factor)
    return ProbabilityField(counts, locked)
