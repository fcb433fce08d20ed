"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from classic_snake.grid import Cell, Grid, WallMode
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 10
# 750x500 px container split into 10 px cells.
DEFAULT_GRID_WIDTH = 75
DEFAULT_GRID_HEIGHT = 50


@dataclass(frozen=True)
class GameConfig:
    """Everything needed to construct a game.

    Supports JSON serialization for reproducibility.
    """

    grid_width: int = DEFAULT_GRID_WIDTH
    grid_height: int = DEFAULT_GRID_HEIGHT
    wall_mode: WallMode = WallMode.DEATH
    initial_length: int = 3
    start_x: int = 3
    start_y: int = 1
    start_direction: Direction = Direction.RIGHT
    food_reward: int = 15
    tick_interval_ms: int = 75
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_width < 1 or self.grid_height < 1:
            raise ValueError("grid_width and grid_height must each be at least 1.")
        if self.initial_length < 1:
            raise ValueError("initial_length must be at least 1.")
        if self.food_reward < 0:
            raise ValueError("food_reward must be >= 0.")
        if self.tick_interval_ms < 1:
            raise ValueError("tick_interval_ms must be at least 1.")
        if self.initial_length >= self.grid_width * self.grid_height:
            raise ValueError(
                "initial_length must leave at least one free cell for food."
            )

        dx, dy = self.start_direction.value
        for seg in range(self.initial_length):
            x = self.start_x - dx * seg
            y = self.start_y - dy * seg
            if not (0 <= x < self.grid_width and 0 <= y < self.grid_height):
                raise ValueError(
                    "initial snake does not fit the configured grid; move the "
                    "start cell or reduce initial_length."
                )

    @classmethod
    def from_pixels(
        cls,
        container_width: int,
        container_height: int,
        cell_size: int = DEFAULT_CELL_SIZE,
        **kwargs,
    ) -> GameConfig:
        """Derive grid dimensions from a pixel-space container size."""
        grid = Grid.from_pixels(container_width, container_height, cell_size)
        return cls(grid_width=grid.width, grid_height=grid.height, **kwargs)

    @property
    def wall_collision(self) -> bool:
        return self.wall_mode == WallMode.DEATH

    @property
    def start_cell(self) -> Cell:
        return Cell(self.start_x, self.start_y)

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0

    def with_overrides(self, **overrides) -> GameConfig:
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        """Serialize to a plain, JSON-compatible dict."""
        d = asdict(self)
        d["wall_mode"] = self.wall_mode.value
        d["start_direction"] = self.start_direction.name.lower()
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        data = dict(raw)
        if "wall_mode" in data:
            data["wall_mode"] = WallMode(data["wall_mode"])
        if "start_direction" in data:
            data["start_direction"] = Direction[data["start_direction"].upper()]
        return cls(**data)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
