"""Food spawning logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from classic_snake.grid import Cell, Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places the single food item on a free cell.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: Cell | None = None

    def spawn(self, occupied: Iterable[Cell]) -> Cell | None:
        """Move the food to a uniformly chosen free cell.

        Returns the new position, or ``None`` when the board is full, in
        which case no food is placed.
        """
        free = self.grid.free_cells(occupied)
        if not free:
            logger.info("No free cells left for food; board is full.")
            self.position = None
            return None

        self.position = free[int(self.rng.integers(len(free)))]
        return self.position

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "position": list(self.position) if self.position is not None else None,
        }
