"""Tests for random fleet layout."""

import random

import pytest
from battleship_solver.engine.errors import PlacementExhaustedError
from battleship_solver.engine.fleet import Fleet, can_place, place_fleet
from battleship_solver.engine.grid import CellState, Coordinate, Grid
from battleship_solver.engine.ship import DEFAULT_SHIP_LENGTHS, Orientation, Ship


def test_place_fleet_populates_full_fleet_without_overlap() -> None:
    fleet, grid = place_fleet(rng=random.Random(123))
    assert [ship.length for ship in fleet] == list(DEFAULT_SHIP_LENGTHS)
    coords = [coord for ship in fleet for coord in ship.cells]
    assert len(coords) == len(set(coords)), "Ships should not overlap"
    assert grid.count(CellState.OCCUPIED) == sum(DEFAULT_SHIP_LENGTHS) == fleet.total_cells
    assert all(grid.get(coord) is CellState.OCCUPIED for coord in coords)
    assert all(grid.in_bounds(coord) for coord in coords)


def test_place_fleet_is_reproducible_for_a_seed() -> None:
    first, _ = place_fleet(rng=random.Random(7))
    second, _ = place_fleet(rng=random.Random(7))
    assert first == second


def test_place_fleet_surfaces_exhaustion() -> None:
    with pytest.raises(PlacementExhaustedError):
        place_fleet(board_size=2, ship_lengths=(2, 2, 2), rng=random.Random(0), max_attempts=50)


def test_can_place_rejects_bounds_and_overlap() -> None:
    grid = Grid()
    assert can_place(grid, Coordinate(8, 0), 2, Orientation.HORIZONTAL)
    assert not can_place(grid, Coordinate(9, 0), 2, Orientation.HORIZONTAL)
    assert not can_place(grid, Coordinate(0, 7), 4, Orientation.VERTICAL)

    grid.set(Coordinate(1, 0), CellState.OCCUPIED)
    assert not can_place(grid, Coordinate(0, 0), 3, Orientation.HORIZONTAL)
    grid.set(Coordinate(5, 5), CellState.SUNK)
    assert not can_place(grid, Coordinate(5, 3), 3, Orientation.VERTICAL)
    grid.set(Coordinate(7, 7), CellState.MISS)
    assert can_place(grid, Coordinate(7, 7), 2, Orientation.VERTICAL)


def test_fleet_lookup_and_sunk_status() -> None:
    grid = Grid()
    destroyer = Ship(2, Coordinate(0, 0), Orientation.HORIZONTAL)
    cruiser = Ship(3, Coordinate(5, 5), Orientation.VERTICAL)
    fleet = Fleet((destroyer, cruiser))
    for ship in fleet:
        for coord in ship.cells:
            grid.set(coord, CellState.OCCUPIED)

    assert fleet.ship_at(Coordinate(1, 0)) is destroyer
    assert fleet.ship_at(Coordinate(5, 7)) is cruiser
    assert fleet.ship_at(Coordinate(9, 9)) is None

    for coord in destroyer.cells:
        grid.set(coord, CellState.SUNK)
    assert fleet.afloat(grid) == [cruiser]
    assert not fleet.all_sunk(grid)
