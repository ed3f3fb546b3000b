"""Simulation package exports."""

from .harness import BatchResult, median, play_game, run_batch

__all__ = ["BatchResult", "median", "play_game", "run_batch"]
