"""Random fleet layout for a fresh grid."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator, Sequence

from battleship_solver.telemetry import get_meter, get_tracer

from .errors import PlacementExhaustedError
from .grid import DEFAULT_BOARD_SIZE, CellState, Coordinate, Grid
from .ship import DEFAULT_SHIP_LENGTHS, Orientation, Ship, run_cells

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_solver.engine.fleet")
meter = get_meter("battleship_solver.engine.fleet")

PLACEMENT_COUNTER = meter.create_counter(
    "battleship_solver_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

DEFAULT_MAX_PLACEMENT_ATTEMPTS = 10_000


@dataclass(frozen=True)
class Fleet:
    """The ships of one game, in the order they were laid out."""

    ships: tuple[Ship, ...]

    def __iter__(self) -> Iterator[Ship]:
        return iter(self.ships)

    def __len__(self) -> int:
        return len(self.ships)

    @property
    def total_cells(self) -> int:
        return sum(ship.length for ship in self.ships)

    def ship_at(self, coord: Coordinate) -> Ship | None:
        """Return the ship covering ``coord`` (linear scan), if any."""
        for ship in self.ships:
            if ship.occupies(coord):
                return ship
        return None

    def afloat(self, grid: Grid) -> list[Ship]:
        """Return the ships that still have at least one unhit cell."""
        return [ship for ship in self.ships if not ship.is_sunk(grid)]

    def all_sunk(self, grid: Grid) -> bool:
        return all(ship.is_sunk(grid) for ship in self.ships)


def can_place(grid: Grid, origin: Coordinate, length: int, orientation: Orientation) -> bool:
    """Check that a new ship fits on the board without touching another ship."""
    cells = run_cells(origin, length, orientation)
    if not grid.in_bounds(cells[-1]):
        return False
    return all(grid.get(coord) not in (CellState.OCCUPIED, CellState.SUNK) for coord in cells)


def place_fleet(
    board_size: int = DEFAULT_BOARD_SIZE,
    ship_lengths: Sequence[int] = DEFAULT_SHIP_LENGTHS,
    rng: random.Random | None = None,
    max_attempts: int = DEFAULT_MAX_PLACEMENT_ATTEMPTS,
) -> tuple[Fleet, Grid]:
    """Randomly lay out one ship per entry of ``ship_lengths`` on a new grid.

    Each ship draws its orientation once and then retries random origins until
    the run fits. The resulting layouts are not uniformly distributed over all
    legal fleets.
    """
    rng = rng or random.Random()
    grid = Grid(board_size)
    ships: list[Ship] = []
    with tracer.start_as_current_span("fleet.place") as span:
        span.set_attribute("board.size", board_size)
        span.set_attribute("fleet.ships", len(ship_lengths))
        for index, length in enumerate(ship_lengths):
            orientation = Orientation.VERTICAL if rng.random() < 0.5 else Orientation.HORIZONTAL
            attempts = 0
            while True:
                if attempts >= max_attempts:
                    PLACEMENT_COUNTER.add(attempts, attributes={"result": "exhausted"})
                    logger.error(
                        "ship_placement_exhausted",
                        extra={"ship_index": index, "length": length, "attempts": attempts},
                    )
                    raise PlacementExhaustedError(
                        f"Could not place ship #{index} of length {length} "
                        f"after {attempts} attempts on a {board_size}x{board_size} board."
                    )
                attempts += 1
                origin = Coordinate(rng.randrange(board_size), rng.randrange(board_size))
                if can_place(grid, origin, length, orientation):
                    break
            ship = Ship(length, origin, orientation)
            for coord in ship.cells:
                grid.set(coord, CellState.OCCUPIED)
            ships.append(ship)
            PLACEMENT_COUNTER.add(attempts, attributes={"result": "placed"})
            logger.debug(
                "ship_placed",
                extra={
                    "ship_index": index,
                    "length": length,
                    "orientation": orientation.value,
                    "col": origin.col,
                    "row": origin.row,
                    "attempts": attempts,
                },
            )
    return Fleet(tuple(ships)), grid
