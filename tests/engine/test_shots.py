"""Tests for the shot resolver."""

import pytest
from battleship_solver.engine.errors import InvalidShotTargetError, OutOfBoundsError
from battleship_solver.engine.fleet import Fleet
from battleship_solver.engine.grid import CellState, Coordinate, Grid
from battleship_solver.engine.ship import Orientation, Ship
from battleship_solver.engine.shots import ShotResult, fire


def _layout() -> tuple[Fleet, Grid, Ship, Ship]:
    grid = Grid()
    destroyer = Ship(2, Coordinate(0, 0), Orientation.HORIZONTAL)
    cruiser = Ship(3, Coordinate(5, 5), Orientation.VERTICAL)
    for ship in (destroyer, cruiser):
        for coord in ship.cells:
            grid.set(coord, CellState.OCCUPIED)
    return Fleet((destroyer, cruiser)), grid, destroyer, cruiser


def test_miss_marks_cell() -> None:
    fleet, grid, _, _ = _layout()
    outcome = fire(grid, fleet, Coordinate(9, 9))
    assert outcome.result is ShotResult.MISS
    assert outcome.ship is None
    assert grid.get(Coordinate(9, 9)) is CellState.MISS


def test_hit_then_sink() -> None:
    fleet, grid, destroyer, cruiser = _layout()
    first = fire(grid, fleet, Coordinate(0, 0))
    assert first.result is ShotResult.HIT
    assert first.ship is destroyer
    assert grid.get(Coordinate(0, 0)) is CellState.HIT

    second = fire(grid, fleet, Coordinate(1, 0))
    assert second.result is ShotResult.SUNK
    assert second.result.is_hit
    assert all(grid.get(coord) is CellState.SUNK for coord in destroyer.cells)
    assert all(grid.get(coord) is CellState.OCCUPIED for coord in cruiser.cells)


def test_no_cell_sunk_while_sibling_unhit() -> None:
    fleet, grid, _, cruiser = _layout()
    for coord in cruiser.cells[:-1]:
        assert fire(grid, fleet, coord).result is ShotResult.HIT
    assert grid.count(CellState.SUNK) == 0
    assert fire(grid, fleet, cruiser.cells[-1]).result is ShotResult.SUNK
    assert grid.count(CellState.SUNK) == cruiser.length


@pytest.mark.parametrize("state", [CellState.MISS, CellState.HIT, CellState.SUNK])
def test_resolved_cell_cannot_be_fired_at(state: CellState) -> None:
    fleet, grid, _, _ = _layout()
    grid.set(Coordinate(8, 8), state)
    with pytest.raises(InvalidShotTargetError):
        fire(grid, fleet, Coordinate(8, 8))


def test_out_of_bounds_shot() -> None:
    fleet, grid, _, _ = _layout()
    with pytest.raises(OutOfBoundsError):
        fire(grid, fleet, Coordinate(10, 0))
