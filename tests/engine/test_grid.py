"""Tests for the grid cell store."""

import pytest
from battleship_solver.engine.errors import OutOfBoundsError
from battleship_solver.engine.grid import CellState, Coordinate, Grid


def test_new_grid_is_unknown() -> None:
    grid = Grid()
    assert grid.size == 10
    assert grid.count(CellState.UNKNOWN) == 100
    assert grid.get(Coordinate(4, 4)) is CellState.UNKNOWN


def test_set_and_get_use_column_then_row() -> None:
    grid = Grid(5)
    grid.set(Coordinate(3, 1), CellState.MISS)
    assert grid.get(Coordinate(3, 1)) is CellState.MISS
    assert grid.get(Coordinate(1, 3)) is CellState.UNKNOWN
    assert grid.mask(CellState.MISS)[1, 3]


@pytest.mark.parametrize("coord", [Coordinate(-1, 0), Coordinate(0, 10), Coordinate(10, 10)])
def test_out_of_bounds_access_raises(coord: Coordinate) -> None:
    grid = Grid()
    with pytest.raises(OutOfBoundsError):
        grid.get(coord)
    with pytest.raises(OutOfBoundsError):
        grid.set(coord, CellState.HIT)


def test_coordinates_are_row_major_and_filterable() -> None:
    grid = Grid(3)
    grid.set(Coordinate(2, 0), CellState.HIT)
    grid.set(Coordinate(0, 1), CellState.HIT)
    assert list(grid.coordinates(CellState.HIT)) == [Coordinate(2, 0), Coordinate(0, 1)]
    assert list(grid.coordinates())[:4] == [
        Coordinate(0, 0),
        Coordinate(1, 0),
        Coordinate(2, 0),
        Coordinate(0, 1),
    ]


def test_copy_is_independent() -> None:
    grid = Grid(4)
    clone = grid.copy()
    clone.set(Coordinate(0, 0), CellState.OCCUPIED)
    assert grid.get(Coordinate(0, 0)) is CellState.UNKNOWN


def test_resolved_states() -> None:
    assert not CellState.UNKNOWN.is_resolved
    assert not CellState.OCCUPIED.is_resolved
    assert CellState.MISS.is_resolved
    assert CellState.HIT.is_resolved
    assert CellState.SUNK.is_resolved
