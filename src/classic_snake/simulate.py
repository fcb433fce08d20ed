"""Headless simulation for throughput checks and balancing."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS: list[Direction] = list(Direction)


@dataclass
class SimulationResult:
    """Aggregate results from a batch of headless games."""

    games: int
    total_ticks: int
    wins: int
    losses: int
    mean_score: float
    best_score: int
    wall_time_seconds: float

    @property
    def ticks_per_second(self) -> float:
        if self.wall_time_seconds <= 0:
            return 0.0
        return self.total_ticks / self.wall_time_seconds

    def summary(self) -> str:
        return (
            f"Simulation: {self.games} games, {self.total_ticks} ticks in "
            f"{self.wall_time_seconds:.2f}s | "
            f"wins={self.wins} losses={self.losses} "
            f"mean_score={self.mean_score:.1f} best_score={self.best_score} | "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def _random_turn(engine: GameEngine, rng: np.random.Generator) -> Direction:
    choices = [d for d in _DIRECTIONS if d != engine.direction.opposite]
    return choices[int(rng.integers(len(choices)))]


def simulate_games(
    config: GameConfig | None = None,
    *,
    num_games: int = 100,
    max_ticks: int = 1_000,
    turn_probability: float = 0.2,
    seed: int | None = None,
) -> SimulationResult:
    """Play *num_games* with a random, never-reversing policy.

    Each game runs until it ends or *max_ticks* elapse. Games cut off by
    the tick limit count as neither wins nor losses.
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1.")
    if max_ticks < 1:
        raise ValueError("max_ticks must be at least 1.")
    if not 0.0 <= turn_probability <= 1.0:
        raise ValueError("turn_probability must be between 0 and 1.")

    cfg = config or GameConfig()
    rng = np.random.default_rng(seed)
    engine = GameEngine(cfg, rng=rng)

    total_ticks = 0
    wins = 0
    losses = 0
    scores: list[int] = []

    start = time.perf_counter()
    for _ in range(num_games):
        engine.start()
        for _ in range(max_ticks):
            if rng.random() < turn_probability:
                engine.set_direction(_random_turn(engine, rng))
            engine.step()
            if engine.is_finished:
                break
        total_ticks += engine.tick
        scores.append(engine.score)
        if engine.is_won:
            wins += 1
        elif engine.is_over:
            losses += 1
        engine.new_game()
    elapsed = time.perf_counter() - start

    result = SimulationResult(
        games=num_games,
        total_ticks=total_ticks,
        wins=wins,
        losses=losses,
        mean_score=float(np.mean(scores)),
        best_score=int(max(scores)),
        wall_time_seconds=elapsed,
    )
    logger.info(result.summary())
    return result
