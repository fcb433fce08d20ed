"""Step-based game engine and state machine."""

from __future__ import annotations

import enum
import logging

import numpy as np

from classic_snake.config import GameConfig
from classic_snake.events import EventDispatcher, EventRecord, GameEvent
from classic_snake.food import FoodSpawner
from classic_snake.grid import Cell, Grid
from classic_snake.movement import Collision, move_snake
from classic_snake.score import ScoreTracker
from classic_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameState(str, enum.Enum):
    """Lifecycle states of a single game."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    WON = "won"


TERMINAL_STATES = frozenset({GameState.GAME_OVER, GameState.WON})

_TRANSITIONS: dict[GameState, frozenset[GameState]] = {
    GameState.IDLE: frozenset({GameState.IDLE, GameState.RUNNING}),
    GameState.RUNNING: frozenset(
        {GameState.IDLE, GameState.PAUSED, GameState.GAME_OVER, GameState.WON},
    ),
    GameState.PAUSED: frozenset({GameState.IDLE, GameState.RUNNING}),
    GameState.GAME_OVER: frozenset({GameState.IDLE, GameState.RUNNING}),
    GameState.WON: frozenset({GameState.IDLE, GameState.RUNNING}),
}


class InvalidTransition(RuntimeError):
    """Raised when the engine is asked to enter a state it cannot reach."""


class GameEngine:
    """Single-snake, step-based game engine.

    The engine owns the grid, snake, food spawner and score. Intents
    (:meth:`start`, :meth:`new_game`, :meth:`set_paused`,
    :meth:`set_direction`) may arrive at any time; each call to
    :meth:`step` advances a running game by one tick and returns the
    updated state dictionary.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.rng = rng if rng is not None else np.random.default_rng(cfg.seed)
        self.grid = Grid(cfg.grid_width, cfg.grid_height, cfg.wall_mode)
        self.food_spawner = FoodSpawner(self.grid, rng=self.rng)
        self.score_tracker = ScoreTracker(cfg.food_reward)
        self.events = EventDispatcher()

        self.state = GameState.IDLE
        self.tick = 0
        self.direction = cfg.start_direction
        self._next_direction = cfg.start_direction
        self.snake = self._setup_snake_and_food()

    # --- queries ---

    @property
    def score(self) -> int:
        return self.score_tracker.score

    @property
    def food(self) -> Cell | None:
        return self.food_spawner.position

    @property
    def body(self) -> tuple[Cell, ...]:
        return self.snake.cells()

    @property
    def next_direction(self) -> Direction:
        """Direction buffered for the next tick."""
        return self._next_direction

    @property
    def is_started(self) -> bool:
        return self.state in (GameState.RUNNING, GameState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.state == GameState.PAUSED

    @property
    def is_over(self) -> bool:
        return self.state == GameState.GAME_OVER

    @property
    def is_won(self) -> bool:
        return self.state == GameState.WON

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    # --- intents ---

    def start(self) -> bool:
        """Start a game from Idle, or a fresh one after it ended.

        Returns ``False`` when a game is already running or paused.
        """
        if self.is_started:
            return False
        if self.is_finished:
            self.snake = self._setup_snake_and_food()
        self._reset_round()
        self._transition(GameState.RUNNING)
        self._emit(GameEvent.SCORE_UPDATED)
        self._emit(GameEvent.GAME_STARTED)
        logger.info("Game started on a %dx%d grid.", self.grid.width, self.grid.height)
        return True

    def new_game(self) -> None:
        """Abandon the current game and return to Idle with a fresh board."""
        self.snake = self._setup_snake_and_food()
        self._reset_round()
        self._transition(GameState.IDLE)
        logger.info("Game reset to idle.")
        self._emit(GameEvent.SCORE_UPDATED)

    def set_paused(self, paused: bool) -> bool:
        """Pause or resume a running game. Returns True if the state changed."""
        if paused and self.state == GameState.RUNNING:
            self._transition(GameState.PAUSED)
            return True
        if not paused and self.state == GameState.PAUSED:
            self._transition(GameState.RUNNING)
            return True
        return False

    def set_direction(self, direction: Direction | None) -> bool:
        """Buffer a direction change for the next tick.

        Rejected while paused and when it would reverse the snake onto its
        own neck. The latest accepted direction wins.
        """
        if direction is None or self.is_paused:
            return False
        if direction == self.direction.opposite:
            logger.debug("Rejected reversal %s -> %s.", self.direction.name, direction.name)
            return False
        self._next_direction = direction
        return True

    # --- simulation ---

    def step(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict.
        """
        if self.state != GameState.RUNNING:
            return self.get_state()

        self.direction = self._next_direction
        collision = move_snake(self.snake, self.direction, self.grid)
        self.tick += 1

        if collision != Collision.NONE:
            self._end_game(collision)
            return self.get_state()

        self._handle_food()
        return self.get_state()

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            "score": self.score,
            "state": self.state.value,
            "direction": self.direction.name.lower(),
            "paused": self.is_paused,
            "started": self.is_started,
            "over": self.is_over,
            "won": self.is_won,
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": self.food_spawner.to_dict()["position"],
        }

    # --- internals ---

    def _setup_snake_and_food(self) -> Snake:
        snake = Snake(
            self.config.start_cell,
            self.config.start_direction,
            length=self.config.initial_length,
        )
        self.food_spawner.spawn(snake)
        return snake

    def _reset_round(self) -> None:
        self.tick = 0
        self.direction = self.config.start_direction
        self._next_direction = self.config.start_direction
        self.score_tracker.reset()

    def _handle_food(self) -> None:
        if self.snake.head != self.food:
            return

        # Listeners only see the board once growth and respawn are done.
        self.score_tracker.add()
        assert self.snake.tail_last_location is not None  # noqa: S101
        self.snake.append(self.snake.tail_last_location)
        won = self.food_spawner.spawn(self.snake) is None
        if won:
            self._transition(GameState.WON)
            logger.info(
                "Board filled at tick %d with score %d.", self.tick, self.score,
            )

        self._emit(GameEvent.SCORE_UPDATED)
        if won:
            self._emit(GameEvent.GAME_WON)

    def _end_game(self, collision: Collision) -> None:
        self._transition(GameState.GAME_OVER)
        logger.info(
            "Snake hit %s at tick %d with score %d.",
            collision.value, self.tick, self.score,
        )
        self._emit(GameEvent.GAME_OVER)

    def _transition(self, target: GameState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransition(
                f"Cannot move from {self.state.value} to {target.value}."
            )
        self.state = target

    def _emit(self, event: GameEvent) -> None:
        self.events.emit(EventRecord(event=event, score=self.score, tick=self.tick))
