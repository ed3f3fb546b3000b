"""Command-line driver for watching the solver play and benchmarking it."""

from __future__ import annotations

import argparse
import random
import time
from typing import Sequence

from pydantic import ValidationError

from battleship_solver.config import SimulationConfig, SolverConfig, parse_ship_lengths
from battleship_solver.engine.errors import BattleshipSolverError
from battleship_solver.engine.game import Game
from battleship_solver.engine.grid import CellState, Coordinate
from battleship_solver.engine.instrumented_game import InstrumentedGame
from battleship_solver.engine.shots import ShotOutcome, ShotResult
from battleship_solver.sim.harness import run_batch
from battleship_solver.telemetry import TelemetryConfig, init_telemetry

SYMBOLS = {
    CellState.MISS: "o",
    CellState.HIT: "X",
    CellState.SUNK: "#",
}


def format_board(game: Game, show_probabilities: bool = False) -> str:
    """Render the solver's view of the board; ship positions stay hidden."""
    size = game.grid.size
    width = 7 if show_probabilities else 2
    header = "    " + " ".join(f"{col + 1:>{width}}" for col in range(size))
    rows = [header]
    for row in range(size):
        symbols = []
        for col in range(size):
            coord = Coordinate(col, row)
            state = game.cell_state(coord)
            if state in SYMBOLS:
                symbol = SYMBOLS[state]
            elif show_probabilities:
                score = game.score(coord)
                symbol = "!" if score.locked else str(score.count)
            else:
                symbol = "."
            symbols.append(f"{symbol:>{width}}")
        rows.append(f"{row + 1:>2} |" + " ".join(symbols))
    return "\n".join(rows)


def describe_shot(outcome: ShotOutcome) -> str:
    label = f"({outcome.coord.col + 1}, {outcome.coord.row + 1})"
    if outcome.result is ShotResult.SUNK and outcome.ship is not None:
        return f"Fired at {label}: sank a ship of length {outcome.ship.length}!"
    return f"Fired at {label}: {outcome.result.value}"


def play(config: SolverConfig, seed: int | None, show_probabilities: bool, delay: float) -> int:
    game = InstrumentedGame.new_game(config, rng=random.Random(seed))
    print(format_board(game, show_probabilities))
    while not game.is_over:
        outcome = game.step_one_shot()
        print()
        print(describe_shot(outcome))
        print(format_board(game, show_probabilities))
        if delay > 0:
            time.sleep(delay)
    print(f"\nAll ships sunk in {game.shots_taken} moves.")
    return game.shots_taken


def _solver_config(args: argparse.Namespace) -> SolverConfig:
    overrides = {}
    if args.board_size is not None:
        overrides["board_size"] = args.board_size
    if args.ships is not None:
        overrides["ship_lengths"] = args.ships
    if getattr(args, "no_skew", False):
        overrides["skew_enabled"] = False
    if getattr(args, "skew_factor", None) is not None:
        overrides["skew_factor"] = args.skew_factor
    return SolverConfig.from_env(**overrides)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Probability-density Battleship solver.")
    parser.add_argument("--board-size", type=int, default=None, help="Board edge length.")
    parser.add_argument(
        "--ships",
        type=parse_ship_lengths,
        default=None,
        help="Comma-separated ship lengths, e.g. 5,4,3,3,2.",
    )
    parser.add_argument("--no-skew", action="store_true", help="Disable the hit-adjacency skew.")
    parser.add_argument("--skew-factor", type=int, default=None, help="Skew multiplier near hits.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play_parser = subparsers.add_parser("play", help="Watch the solver play one game.")
    play_parser.add_argument("--seed", type=int, default=None, help="RNG seed for the layout.")
    play_parser.add_argument(
        "--show-probabilities",
        action="store_true",
        help="Print each unresolved cell's score ('!' marks a locked cell).",
    )
    play_parser.add_argument("--delay", type=float, default=0.0, help="Seconds between shots.")

    sim_parser = subparsers.add_parser("simulate", help="Run a batch of games.")
    sim_parser.add_argument("--runs", type=int, default=None, help="Number of games.")
    sim_parser.add_argument("--seed", type=int, default=None, help="Batch RNG seed.")
    sim_parser.add_argument("--workers", type=int, default=None, help="Worker processes.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    init_telemetry(TelemetryConfig.from_env())

    try:
        solver = _solver_config(args)
        if args.command == "play":
            play(solver, args.seed, args.show_probabilities, args.delay)
            return 0

        overrides = {"solver": solver}
        for name in ("runs", "seed", "workers"):
            value = getattr(args, name)
            if value is not None:
                overrides[name] = value
        result = run_batch(SimulationConfig.from_env(**overrides))
    except (ValidationError, BattleshipSolverError) as exc:
        parser.error(str(exc))
    print(result.summary())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
