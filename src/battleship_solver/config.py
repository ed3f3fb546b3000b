"""Solver and simulation configuration."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator, model_validator

from battleship_solver.engine.fleet import DEFAULT_MAX_PLACEMENT_ATTEMPTS
from battleship_solver.engine.grid import DEFAULT_BOARD_SIZE
from battleship_solver.engine.probability import DEFAULT_SKEW_FACTOR
from battleship_solver.engine.ship import DEFAULT_SHIP_LENGTHS

ENV_PREFIX = "BATTLESHIP_SOLVER_"
DEFAULT_RUNS = 10_000


def parse_ship_lengths(raw: str) -> list[int]:
    """Parse ``"5,4,3,3,2"`` into a list of lengths."""
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    if not parts:
        raise ValueError("At least one ship length is required.")
    return [int(part) for part in parts]


def _env(name: str) -> str | None:
    return os.getenv(ENV_PREFIX + name)


def _bool_from_env(name: str) -> bool | None:
    value = _env(name)
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


class SolverConfig(BaseModel):
    """Board, fleet and heuristic settings for one game."""

    board_size: int = Field(default=DEFAULT_BOARD_SIZE, ge=1, le=64)
    ship_lengths: list[int] = Field(default_factory=lambda: list(DEFAULT_SHIP_LENGTHS), min_length=1)
    skew_enabled: bool = True
    skew_factor: int = Field(default=DEFAULT_SKEW_FACTOR, ge=1, le=1000)
    max_placement_attempts: int = Field(default=DEFAULT_MAX_PLACEMENT_ATTEMPTS, ge=1)

    @field_validator("ship_lengths")
    @classmethod
    def _lengths_positive(cls, value: list[int]) -> list[int]:
        if any(length <= 0 for length in value):
            raise ValueError("Ship lengths must be positive.")
        return value

    @model_validator(mode="after")
    def _fleet_fits_board(self) -> "SolverConfig":
        longest = max(self.ship_lengths)
        if longest > self.board_size:
            raise ValueError(
                f"A ship of length {longest} cannot fit on a {self.board_size}x{self.board_size} board."
            )
        if sum(self.ship_lengths) > self.board_size**2:
            raise ValueError("The fleet covers more cells than the board has.")
        return self

    @property
    def hits_to_win(self) -> int:
        return sum(self.ship_lengths)

    @classmethod
    def from_env(cls, **overrides: Any) -> "SolverConfig":
        """Construct config from ``BATTLESHIP_SOLVER_*`` env vars."""

        data: Dict[str, Any] = {}
        board_size = _env("BOARD_SIZE")
        if board_size is not None:
            data["board_size"] = int(board_size)
        ships = _env("SHIPS")
        if ships is not None:
            data["ship_lengths"] = parse_ship_lengths(ships)
        skew = _bool_from_env("SKEW")
        if skew is not None:
            data["skew_enabled"] = skew
        skew_factor = _env("SKEW_FACTOR")
        if skew_factor is not None:
            data["skew_factor"] = int(skew_factor)
        data.update(overrides)
        return cls(**data)


class SimulationConfig(BaseModel):
    """Settings for a batch of games."""

    solver: SolverConfig = Field(default_factory=SolverConfig)
    runs: int = Field(default=DEFAULT_RUNS, ge=1)
    seed: int | None = None
    workers: int = Field(default=1, ge=1)
    instrumented: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "SimulationConfig":
        """Construct config from ``BATTLESHIP_SOLVER_*`` env vars."""

        data: Dict[str, Any] = {"solver": SolverConfig.from_env()}
        runs = _env("RUNS")
        if runs is not None:
            data["runs"] = int(runs)
        seed = _env("SEED")
        if seed is not None:
            data["seed"] = int(seed)
        workers = _env("WORKERS")
        if workers is not None:
            data["workers"] = int(workers)
        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_solver_config() -> SolverConfig:
    """Load and cache solver config from the environment."""

    return SolverConfig.from_env()
