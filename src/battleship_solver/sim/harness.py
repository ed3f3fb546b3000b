"""Batch simulation of solver games."""

from __future__ import annotations

import logging
import multiprocessing as mp
import random
import time
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from battleship_solver.config import SimulationConfig, SolverConfig
from battleship_solver.engine.game import Game
from battleship_solver.engine.instrumented_game import InstrumentedGame
from battleship_solver.telemetry import get_tracer, record_distribution, record_game_metric

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_solver.sim.harness")


@dataclass(frozen=True)
class BatchResult:
    """Shots-to-win statistics for a batch of games."""

    mean: float
    median: float
    per_game_counts: tuple[int, ...]
    elapsed_seconds: float = 0.0

    @property
    def runs(self) -> int:
        return len(self.per_game_counts)

    @property
    def best(self) -> int:
        return min(self.per_game_counts)

    @property
    def worst(self) -> int:
        return max(self.per_game_counts)

    def summary(self) -> str:
        return (
            f"Average: {self.mean:g}, Median: {self.median:g} "
            f"({self.runs} runs took {self.elapsed_seconds * 1000:.0f}ms)"
        )


def median(counts: Sequence[int]) -> float:
    """Middle value of the sorted counts; mean of the two middle values for even sizes."""
    if not counts:
        raise ValueError("Cannot take the median of no games.")
    ordered = sorted(counts)
    middle = (len(ordered) - 1) // 2
    if len(ordered) % 2:
        return float(ordered[middle])
    return (ordered[middle] + ordered[middle + 1]) / 2.0


def play_game(
    config: SolverConfig | None = None,
    rng: random.Random | None = None,
    instrumented: bool = False,
) -> int:
    """Play one game to completion and return the number of shots it took."""
    game_cls = InstrumentedGame if instrumented else Game
    game = game_cls.new_game(config, rng=rng)
    return game.play_to_end()


def _play_seeded(args: tuple[SolverConfig, int, bool]) -> int:
    config, seed, instrumented = args
    return play_game(config, random.Random(seed), instrumented)


def game_seeds(runs: int, seed: int | None) -> list[int]:
    """Draw one independent seed per game from the batch seed."""
    rng = random.Random(seed)
    return [rng.randint(0, 2**31 - 1) for _ in range(runs)]


def run_batch(config: SimulationConfig | None = None, **overrides) -> BatchResult:
    """Play ``config.runs`` games and report mean and median shots-to-win.

    Games are independent; with ``workers > 1`` they run in a process pool and
    the counts are collected in submission order, so a seeded batch gives the
    same result however many workers are used.
    """
    config = config or SimulationConfig()
    if overrides:
        config = SimulationConfig.model_validate({**config.model_dump(), **overrides})
    seeds = game_seeds(config.runs, config.seed)
    jobs = [(config.solver, seed, config.instrumented) for seed in seeds]

    with tracer.start_as_current_span("simulation.run_batch") as span:
        span.set_attribute("runs", config.runs)
        span.set_attribute("workers", config.workers)
        span.set_attribute("skew_enabled", config.solver.skew_enabled)
        span.set_attribute("skew_factor", config.solver.skew_factor)
        logger.info(
            "batch_started",
            extra={"runs": config.runs, "workers": config.workers, "seed": config.seed},
        )
        start = time.perf_counter()
        if config.workers > 1:
            chunksize = max(1, len(jobs) // (config.workers * 4))
            with mp.get_context().Pool(processes=config.workers) as pool:
                counts = pool.map(_play_seeded, jobs, chunksize=chunksize)
        else:
            counts = [_play_seeded(job) for job in jobs]
        elapsed = time.perf_counter() - start

        for shots in counts:
            record_distribution("battleship_solver_shots_per_game", shots)
        record_game_metric("battleship_solver_games_completed_total", len(counts))

        result = BatchResult(
            mean=float(np.mean(counts)),
            median=median(counts),
            per_game_counts=tuple(counts),
            elapsed_seconds=elapsed,
        )
        span.set_attribute("mean", result.mean)
        span.set_attribute("median", result.median)
        span.set_attribute("duration_ms", elapsed * 1000)
        logger.info(
            "batch_complete",
            extra={
                "runs": result.runs,
                "mean": result.mean,
                "median": result.median,
                "best": result.best,
                "worst": result.worst,
                "elapsed_s": round(elapsed, 3),
            },
        )
        return result
