"""Single-player solver session: one hidden fleet and the shots fired at it."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from battleship_solver.config import SolverConfig
from battleship_solver.telemetry import get_meter, get_tracer

from .errors import GameOverError
from .fleet import Fleet, place_fleet
from .grid import CellState, Coordinate, Grid
from .probability import ProbabilityField, Score, recompute
from .shots import ShotOutcome, fire
from .targeting import select_target

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_solver.engine.game")
meter = get_meter("battleship_solver.engine.game")

MOVE_COUNTER = meter.create_counter(
    "battleship_solver_moves",
    unit="1",
    description="Number of shots taken by the solver",
)


class GamePhase(Enum):
    """High-level lifecycle of a solver game."""

    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of a game for renderers."""

    phase: GamePhase
    cells: tuple[tuple[CellState, ...], ...]
    shots_taken: int
    hits_made: int
    hits_to_win: int
    last_shot: ShotOutcome | None


class Game:
    """Owns the grid, fleet and counters of one game and steps the solver."""

    def __init__(self, grid: Grid, fleet: Fleet, config: SolverConfig | None = None) -> None:
        self.config = config or SolverConfig(
            board_size=grid.size, ship_lengths=[ship.length for ship in fleet]
        )
        self.grid = grid
        self.fleet = fleet
        self.hits_to_win = fleet.total_cells
        self.shots_taken = 0
        self.hits_made = grid.count(CellState.HIT) + grid.count(CellState.SUNK)
        self.last_shot: ShotOutcome | None = None
        self.field = self._recompute()

    @classmethod
    def new_game(cls, config: SolverConfig | None = None, rng: random.Random | None = None) -> Game:
        """Lay out a random fleet and return a game ready for its first shot."""
        config = config or SolverConfig()
        with tracer.start_as_current_span("game.new_game") as span:
            span.set_attribute("board.size", config.board_size)
            span.set_attribute("fleet.lengths", list(config.ship_lengths))
            fleet, grid = place_fleet(
                config.board_size,
                config.ship_lengths,
                rng=rng,
                max_attempts=config.max_placement_attempts,
            )
            game = cls(grid, fleet, config)
            logger.debug(
                "game_created",
                extra={"board_size": config.board_size, "hits_to_win": game.hits_to_win},
            )
            return game

    @property
    def phase(self) -> GamePhase:
        return GamePhase.FINISHED if self.is_over else GamePhase.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.hits_made >= self.hits_to_win

    def cell_state(self, coord: Coordinate) -> CellState:
        return self.grid.get(coord)

    def score(self, coord: Coordinate) -> Score:
        """Return the current probability score of ``coord``."""
        self.grid.check_bounds(coord)
        return self.field.score(coord)

    def next_target(self) -> Coordinate:
        return select_target(self.field, self.grid)

    def step_one_shot(self) -> ShotOutcome:
        """Fire at the best cell, then recompute the probability field."""
        with tracer.start_as_current_span("game.step") as span:
            if self.is_over:
                logger.error(
                    "step_rejected_game_over",
                    extra={"shots_taken": self.shots_taken, "hits_made": self.hits_made},
                )
                raise GameOverError("All ships are already sunk.")

            target = self.next_target()
            outcome = fire(self.grid, self.fleet, target)
            self.shots_taken += 1
            if outcome.result.is_hit:
                self.hits_made += 1
            self.last_shot = outcome
            self.field = self._recompute()

            span.set_attribute("shot.col", target.col)
            span.set_attribute("shot.row", target.row)
            span.set_attribute("shot.outcome", outcome.result.value)
            MOVE_COUNTER.add(1, attributes={"result": outcome.result.value})
            if self.is_over:
                span.set_attribute("game.shots_taken", self.shots_taken)
                logger.debug("game_finished", extra={"shots_taken": self.shots_taken})
            return outcome

    def play_to_end(self) -> int:
        """Step until every ship is sunk and return the number of shots taken."""
        while not self.is_over:
            self.step_one_shot()
        return self.shots_taken

    def snapshot(self) -> GameSnapshot:
        """Return an immutable view of the current game."""
        cells = tuple(
            tuple(self.grid.get(Coordinate(col, row)) for col in range(self.grid.size))
            for row in range(self.grid.size)
        )
        return GameSnapshot(
            phase=self.phase,
            cells=cells,
            shots_taken=self.shots_taken,
            hits_made=self.hits_made,
            hits_to_win=self.hits_to_win,
            last_shot=self.last_shot,
        )

    def _recompute(self) -> ProbabilityField:
        return recompute(
            self.grid,
            self.fleet,
            skew_enabled=self.config.skew_enabled,
            skew_factor=self.config.skew_factor,
        )
