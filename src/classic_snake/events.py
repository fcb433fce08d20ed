"""Synchronous lifecycle event dispatch."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class GameEvent(str, enum.Enum):
    """Lifecycle notifications emitted by the engine."""

    GAME_STARTED = "game_started"
    GAME_OVER = "game_over"
    GAME_WON = "game_won"
    SCORE_UPDATED = "score_updated"


@dataclass(frozen=True)
class EventRecord:
    """Payload handed to every listener."""

    event: GameEvent
    score: int
    tick: int

    def to_dict(self) -> dict:
        return {"event": self.event.value, "score": self.score, "tick": self.tick}


Listener = Callable[[EventRecord], None]


class EventDispatcher:
    """Ordered set of listeners invoked synchronously in subscription order.

    The listener set is frozen while a dispatch is in progress; a listener
    that tries to subscribe or unsubscribe raises ``RuntimeError``.
    """

    def __init__(self) -> None:
        self._listeners: dict[Listener, None] = {}
        self._dispatching = False

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener) -> None:
        """Add *listener*; subscribing twice keeps the first position."""
        self._check_not_dispatching()
        self._listeners.setdefault(listener, None)

    def unsubscribe(self, listener: Listener) -> None:
        self._check_not_dispatching()
        self._listeners.pop(listener, None)

    def emit(self, record: EventRecord) -> None:
        """Deliver *record* to every listener."""
        logger.debug("Dispatching %s to %d listener(s).", record.event.value, len(self))
        self._dispatching = True
        try:
            for listener in self._listeners:
                listener(record)
        finally:
            self._dispatching = False

    def _check_not_dispatching(self) -> None:
        if self._dispatching:
            raise RuntimeError("Cannot change listeners during dispatch.")
