"""In-memory high-score leaderboard."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 5
MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 30


@dataclass(frozen=True)
class HighScore:
    name: str
    score: int

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score}


class Leaderboard:
    """Fixed-size table of the best scores, highest first.

    A new score ties above existing equal scores.
    """

    def __init__(self, size: int = LEADERBOARD_SIZE) -> None:
        if size < 1:
            raise ValueError("Leaderboard size must be at least 1.")
        self.size = size
        self.entries: list[HighScore] = []

    def rank_for(self, score: int) -> int | None:
        """Return the 1-based rank *score* would take, or None."""
        for i, entry in enumerate(self.entries):
            if score >= entry.score:
                return i + 1
        if len(self.entries) < self.size:
            return len(self.entries) + 1
        return None

    @staticmethod
    def is_valid_name(name: str | None) -> bool:
        if name is None:
            return False
        return MIN_NAME_LENGTH <= len(name.strip()) <= MAX_NAME_LENGTH

    def record(self, name: str, score: int) -> int | None:
        """Insert a score and return its rank, or None if it did not place."""
        if not self.is_valid_name(name):
            raise ValueError(
                f"Name must be {MIN_NAME_LENGTH}-{MAX_NAME_LENGTH} characters."
            )
        if score < 0:
            raise ValueError("score must be >= 0.")

        rank = self.rank_for(score)
        if rank is None:
            return None

        self.entries.insert(rank - 1, HighScore(name.strip(), score))
        del self.entries[self.size:]
        logger.info("Recorded score %d for '%s' at rank %d.", score, name.strip(), rank)
        return rank

    def to_list(self) -> list[dict]:
        return [
            {"rank": i + 1, **entry.to_dict()}
            for i, entry in enumerate(self.entries)
        ]
