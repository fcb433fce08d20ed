"""Classic Snake: single-snake game simulation engine."""

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine, GameState, InvalidTransition
from classic_snake.events import EventDispatcher, EventRecord, GameEvent
from classic_snake.food import FoodSpawner
from classic_snake.grid import Cell, Grid, WallMode
from classic_snake.leaderboard import HighScore, Leaderboard
from classic_snake.loop import GameLoop
from classic_snake.movement import Collision, move_snake
from classic_snake.score import ScoreTracker
from classic_snake.snake import Direction, Snake

__all__ = [
    "Cell",
    "Collision",
    "Direction",
    "EventDispatcher",
    "EventRecord",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameEvent",
    "GameLoop",
    "GameState",
    "Grid",
    "HighScore",
    "InvalidTransition",
    "Leaderboard",
    "ScoreTracker",
    "Snake",
    "WallMode",
    "move_snake",
]
