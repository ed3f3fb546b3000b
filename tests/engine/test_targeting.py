"""Tests for target selection."""

import numpy as np
import pytest
from battleship_solver.engine.errors import NoTargetError
from battleship_solver.engine.grid import CellState, Coordinate, Grid
from battleship_solver.engine.probability import ProbabilityField
from battleship_solver.engine.targeting import select_target


def _field(size: int, counts: dict[Coordinate, int], locked: tuple[Coordinate, ...] = ()) -> ProbabilityField:
    count_array = np.zeros((size, size), dtype=np.int64)
    lock_array = np.zeros((size, size), dtype=bool)
    for coord, value in counts.items():
        count_array[coord.row, coord.col] = value
    for coord in locked:
        lock_array[coord.row, coord.col] = True
    return ProbabilityField(count_array, lock_array)


def test_picks_highest_count() -> None:
    grid = Grid(5)
    field = _field(5, {Coordinate(1, 1): 3, Coordinate(3, 4): 9, Coordinate(0, 0): 8})
    assert select_target(field, grid) == Coordinate(3, 4)


def test_ties_break_in_row_major_order() -> None:
    grid = Grid(10)
    field = _field(10, {Coordinate(2, 3): 5, Coordinate(7, 1): 5, Coordinate(1, 7): 5})
    assert select_target(field, grid) == Coordinate(7, 1)


def test_resolved_cells_are_never_selected() -> None:
    grid = Grid(4)
    grid.set(Coordinate(0, 0), CellState.MISS)
    grid.set(Coordinate(1, 0), CellState.HIT)
    grid.set(Coordinate(2, 0), CellState.SUNK)
    field = _field(
        4,
        {Coordinate(0, 0): 100, Coordinate(1, 0): 100, Coordinate(2, 0): 100, Coordinate(3, 3): 1},
        locked=(Coordinate(1, 0),),
    )
    assert select_target(field, grid) == Coordinate(3, 3)


def test_occupied_cells_are_candidates() -> None:
    grid = Grid(3)
    grid.set(Coordinate(2, 2), CellState.OCCUPIED)
    field = _field(3, {Coordinate(2, 2): 4, Coordinate(0, 0): 1})
    assert select_target(field, grid) == Coordinate(2, 2)


def test_locked_cell_beats_larger_counts() -> None:
    grid = Grid(10)
    field = _field(
        10,
        {Coordinate(0, 0): 10**9, Coordinate(6, 8): 1, Coordinate(4, 2): 1},
        locked=(Coordinate(6, 8), Coordinate(4, 2)),
    )
    assert select_target(field, grid) == Coordinate(4, 2)


def test_all_zero_scores_fall_back_to_first_unresolved_cell() -> None:
    grid = Grid(3)
    grid.set(Coordinate(0, 0), CellState.MISS)
    assert select_target(_field(3, {}), grid) == Coordinate(1, 0)


def test_no_target_when_board_exhausted() -> None:
    grid = Grid(2)
    for coord in list(grid.coordinates()):
        grid.set(coord, CellState.MISS)
    with pytest.raises(NoTargetError):
        select_target(_field(2, {}), grid)
