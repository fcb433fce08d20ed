"""Movement and collision rules for a single snake step."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from classic_snake.grid import Cell, Grid
    from classic_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class Collision(enum.Enum):
    """Outcome of attempting a move."""

    NONE = "none"
    WALL = "wall"
    BODY = "body"


def next_head(snake: Snake, direction: Direction, grid: Grid) -> Cell:
    """Compute where the head would land, wrapping when walls are off."""
    candidate = snake.head.offset(direction)
    if not grid.wall_collision:
        candidate = grid.wrap(candidate)
    return candidate


def move_snake(snake: Snake, direction: Direction, grid: Grid) -> Collision:
    """Advance *snake* one cell in *direction*.

    Self-collision is checked before the wall check and both run before
    the body is touched, so a colliding move leaves the snake unmodified.
    """
    new_head = next_head(snake, direction, grid)

    if snake.contains_interior(new_head):
        logger.debug("Head would hit body at %s.", new_head)
        return Collision.BODY

    if grid.wall_collision and not grid.in_bounds(new_head):
        logger.debug("Head would leave the grid at %s.", new_head)
        return Collision.WALL

    snake.shift(new_head)
    return Collision.NONE
