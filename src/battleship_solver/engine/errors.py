"""Exception types raised by the solver engine."""

from __future__ import annotations


class BattleshipSolverError(Exception):
    """Base class for every engine error."""


class OutOfBoundsError(BattleshipSolverError, IndexError):
    """A coordinate lies outside the grid."""


class InvalidShotTargetError(BattleshipSolverError, ValueError):
    """A shot was aimed at a cell that has already been resolved."""


class PlacementExhaustedError(BattleshipSolverError, RuntimeError):
    """Random fleet layout gave up after too many attempts."""


class NoTargetError(BattleshipSolverError, RuntimeError):
    """Every cell of the grid has already been fired upon."""


class GameOverError(BattleshipSolverError, RuntimeError):
    """A shot was requested after the last ship went down."""
