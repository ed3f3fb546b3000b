"""Pick the next cell to fire at."""

from __future__ import annotations

import logging

import numpy as np

from .errors import NoTargetError
from .grid import CellState, Coordinate, Grid
from .probability import ProbabilityField

logger = logging.getLogger(__name__)


def select_target(field: ProbabilityField, grid: Grid) -> Coordinate:
    """Return the unresolved cell with the best score.

    Any locked cell beats every unlocked one; otherwise the highest count wins.
    Ties go to the first cell in row-major order.
    """
    candidates = grid.mask(CellState.UNKNOWN, CellState.OCCUPIED)
    if not candidates.any():
        logger.error("no_target_available", extra={"size": grid.size})
        raise NoTargetError("Every cell has already been fired upon.")

    locked = field.locked & candidates
    if locked.any():
        flat_index = int(np.flatnonzero(locked)[0])
    else:
        scores = np.where(candidates, field.counts, -1)
        flat_index = int(np.argmax(scores))
    row, col = divmod(flat_index, grid.size)
    return Coordinate(col, row)
