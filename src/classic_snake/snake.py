"""Snake body representation."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterator
from itertools import islice

from classic_snake.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def offset(self) -> tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of body cells.

    The head is ``body[0]``; the tail is ``body[-1]``. The initial body
    trails behind *start* opposite to *direction*.
    """

    def __init__(
        self,
        start: Cell,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        self.body: deque[Cell] = deque([Cell(*start)])
        self.tail_last_location: Cell | None = None
        trailing = direction.opposite
        for _ in range(length - 1):
            segment = self.tail.offset(trailing)
            self.append(segment)
            self.tail_last_location = segment

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.body)

    @property
    def head(self) -> Cell:
        """Return the head cell."""
        return self.body[0]

    @property
    def tail(self) -> Cell:
        """Return the tail cell."""
        return self.body[-1]

    def cells(self) -> tuple[Cell, ...]:
        return tuple(self.body)

    def append(self, cell: Cell) -> None:
        """Add a new tail segment."""
        self.body.append(Cell(*cell))

    def contains_interior(self, cell: Cell) -> bool:
        """Check *cell* against every segment except the head and the tail.

        The tail is left out because it vacates its cell on the same tick
        the head would enter it.
        """
        return any(
            seg == cell for seg in islice(self.body, 1, len(self.body) - 1)
        )

    def shift(self, new_head: Cell) -> None:
        """Commit a move: each segment takes the place of the one ahead."""
        self.tail_last_location = self.body[-1]
        self.body.appendleft(Cell(*new_head))
        self.body.pop()

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "length": len(self.body),
        }
