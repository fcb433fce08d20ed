"""Grid coordinate model for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from classic_snake.snake import Direction


class Cell(NamedTuple):
    """A grid position in cell units (not pixels)."""

    x: int
    y: int

    def offset(self, direction: Direction) -> Cell:
        """Return the neighbouring cell one step in *direction*."""
        dx, dy = direction.value
        return Cell(self.x + dx, self.y + dy)


class WallMode(enum.Enum):
    """Defines behavior when the snake reaches the grid boundary."""

    DEATH = "death"
    WRAP = "wrap"


class Grid:
    """Rectangular grid of ``width`` x ``height`` cells.

    The grid does not track occupancy itself; callers pass the occupied
    cells when they need the free ones.
    """

    def __init__(
        self,
        width: int,
        height: int,
        wall_mode: WallMode = WallMode.DEATH,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be at least 1x1.")
        self.width = width
        self.height = height
        self.wall_mode = wall_mode

    @classmethod
    def from_pixels(
        cls,
        container_width: int,
        container_height: int,
        cell_size: int,
        wall_mode: WallMode = WallMode.DEATH,
    ) -> Grid:
        """Build a grid from a pixel-space container size."""
        if cell_size < 1:
            raise ValueError("cell_size must be at least 1.")
        return cls(
            container_width // cell_size,
            container_height // cell_size,
            wall_mode,
        )

    @property
    def wall_collision(self) -> bool:
        return self.wall_mode == WallMode.DEATH

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a cell lies within the grid."""
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def wrap(self, cell: Cell) -> Cell:
        """Teleport a cell that stepped off one edge onto the opposite edge."""
        x, y = cell
        if x < 0:
            x = self.width - 1
        elif x >= self.width:
            x = 0
        if y < 0:
            y = self.height - 1
        elif y >= self.height:
            y = 0
        return Cell(x, y)

    def free_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return every in-bounds cell not in *occupied*, in row-major order."""
        free = np.ones((self.height, self.width), dtype=bool)
        for x, y in occupied:
            if 0 <= x < self.width and 0 <= y < self.height:
                free[y, x] = False
        ys, xs = np.nonzero(free)
        return [Cell(x, y) for y, x in zip(ys.tolist(), xs.tolist(), strict=True)]

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "wall_mode": self.wall_mode.value,
        }
