"""Apply shots to a grid and detect sunk ships."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from battleship_solver.telemetry import get_meter, get_tracer

from .errors import InvalidShotTargetError
from .fleet import Fleet
from .grid import CellState, Coordinate, Grid
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_solver.engine.shots")
meter = get_meter("battleship_solver.engine.shots")

SHOT_COUNTER = meter.create_counter(
    "battleship_solver_shots",
    unit="1",
    description="Shots fired, by result",
)


class ShotResult(Enum):
    """What a single shot achieved."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"

    @property
    def is_hit(self) -> bool:
        return self is not ShotResult.MISS


@dataclass(frozen=True)
class ShotOutcome:
    coord: Coordinate
    result: ShotResult
    ship: Ship | None = None


def fire(grid: Grid, fleet: Fleet, coord: Coordinate) -> ShotOutcome:
    """Resolve a shot at ``coord``, sinking the owning ship when it is complete."""
    with tracer.start_as_current_span("shots.fire") as span:
        span.set_attribute("shot.col", coord.col)
        span.set_attribute("shot.row", coord.row)
        state = grid.get(coord)
        if state.is_resolved:
            logger.error(
                "shot_duplicate",
                extra={"col": coord.col, "row": coord.row, "state": state.name},
            )
            raise InvalidShotTargetError(
                f"Cell ({coord.col}, {coord.row}) has already been targeted ({state.name})."
            )

        if state is not CellState.OCCUPIED:
            grid.set(coord, CellState.MISS)
            span.set_attribute("shot.outcome", ShotResult.MISS.value)
            SHOT_COUNTER.add(1, attributes={"result": ShotResult.MISS.value})
            return ShotOutcome(coord, ShotResult.MISS)

        grid.set(coord, CellState.HIT)
        ship = fleet.ship_at(coord)
        result = ShotResult.HIT
        if ship is not None and all(grid.get(cell) is CellState.HIT for cell in ship.cells):
            for cell in ship.cells:
                grid.set(cell, CellState.SUNK)
            result = ShotResult.SUNK
            logger.debug(
                "ship_sunk",
                extra={
                    "length": ship.length,
                    "col": ship.origin.col,
                    "row": ship.origin.row,
                    "orientation": ship.orientation.value,
                },
            )
        span.set_attribute("shot.outcome", result.value)
        SHOT_COUNTER.add(1, attributes={"result": result.value})
        return ShotOutcome(coord, result, ship)
