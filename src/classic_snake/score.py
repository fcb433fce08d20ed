"""Score accumulation."""

from __future__ import annotations


class ScoreTracker:
    """Accumulates a fixed reward per food item eaten."""

    __slots__ = ("reward", "score")

    def __init__(self, reward: int = 15) -> None:
        if reward < 0:
            raise ValueError("reward must be >= 0.")
        self.reward = reward
        self.score = 0

    def add(self) -> int:
        """Award one food item and return the new score."""
        self.score += self.reward
        return self.score

    def reset(self) -> None:
        self.score = 0
