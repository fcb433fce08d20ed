"""In-memory session registry, intent routing, and state broadcasting."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from classic_snake.config import GameConfig
from classic_snake.engine import GameEngine, GameState
from classic_snake.events import EventRecord, GameEvent
from classic_snake.leaderboard import Leaderboard
from classic_snake.loop import GameLoop
from classic_snake.server.models import SessionSummary
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

_MAX_FINISHED_SESSIONS = 100


@dataclass
class GameSession:
    """All state for a single hosted game."""

    game_id: str
    config: GameConfig
    engine: GameEngine
    clients: list[WebSocket] = field(default_factory=list)
    pending_events: list[dict] = field(default_factory=list)
    score_recorded: bool = False
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    # Serializes start/new_game so only one of them swaps the tick loop.
    control: asyncio.Lock = field(default_factory=asyncio.Lock)
    loop: GameLoop | None = field(default=None, repr=False)

    @property
    def status(self) -> GameState:
        return self.engine.state

    def on_event(self, record: EventRecord) -> None:
        """Queue engine events for the next broadcast."""
        self.pending_events.append(record.to_dict())
        if record.event == GameEvent.GAME_STARTED:
            self.score_recorded = False
            self.finished_at = None
        elif record.event in (GameEvent.GAME_OVER, GameEvent.GAME_WON):
            self.finished_at = time.monotonic()

    def summary(self) -> SessionSummary:
        return SessionSummary(
            game_id=self.game_id,
            status=self.status.value,
            score=self.engine.score,
            tick_rate_ms=self.config.tick_interval_ms,
            grid_width=self.config.grid_width,
            grid_height=self.config.grid_height,
        )


class SessionManager:
    """Central registry managing all hosted games."""

    def __init__(
        self,
        max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
        leaderboard: Leaderboard | None = None,
    ) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, GameSession] = {}
        self._max_finished_sessions = max_finished_sessions
        self.leaderboard = leaderboard if leaderboard is not None else Leaderboard()

    def create_session(self, config: GameConfig) -> GameSession:
        """Create a new idle game and return its session."""
        self._prune_finished_sessions()
        game_id = uuid.uuid4().hex[:12]
        session = GameSession(
            game_id=game_id, config=config, engine=GameEngine(config),
        )
        session.engine.events.subscribe(session.on_event)
        self._sessions[game_id] = session
        logger.info(
            "Game %s created (%dx%d, %s).",
            game_id, config.grid_width, config.grid_height,
            config.wall_mode.value,
        )
        return session

    def get_session(self, game_id: str) -> GameSession | None:
        return self._sessions.get(game_id)

    def _require(self, game_id: str) -> GameSession:
        session = self._sessions.get(game_id)
        if session is None:
            raise KeyError(f"Game {game_id} not found.")
        return session

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    # --- intents ---

    async def start(self, game_id: str) -> bool:
        """Start (or restart after it ended) a game and its tick loop.

        A game left running by a tick loop that died is resumed with a
        fresh loop instead of being rejected.
        """
        session = self._require(game_id)
        async with session.control:
            loop = session.loop
            if session.engine.is_started and loop is not None and loop.running:
                return False
            if loop is not None:
                # A loop for the previous round may still be winding down.
                await loop.stop()
                session.loop = None

            async with session.lock:
                resumed = session.engine.is_started
                accepted = resumed or session.engine.start()
            if accepted:
                session.loop = GameLoop(
                    session.engine,
                    on_tick=lambda state: self._broadcast(session, state),
                    lock=session.lock,
                )
                session.loop.start()
                if resumed:
                    logger.warning(
                        "Game %s resumed with a new tick loop at tick %d.",
                        game_id, session.engine.tick,
                    )
                else:
                    logger.info("Game %s started.", game_id)
            await self._broadcast(session, session.engine.get_state())
        return accepted

    async def new_game(self, game_id: str) -> None:
        """Abandon the current round and return the game to idle."""
        session = self._require(game_id)
        async with session.control:
            if session.loop is not None:
                await session.loop.stop()
                session.loop = None
            async with session.lock:
                session.engine.new_game()
                session.score_recorded = False
                session.finished_at = None
            await self._broadcast(session, session.engine.get_state())

    async def set_paused(self, game_id: str, paused: bool) -> bool:
        session = self._require(game_id)
        async with session.lock:
            changed = session.engine.set_paused(paused)
        if changed:
            logger.info("Game %s %s.", game_id, "paused" if paused else "resumed")
            await self._broadcast(session, session.engine.get_state())
        return changed

    async def set_direction(self, game_id: str, direction: Direction) -> bool:
        session = self._require(game_id)
        async with session.lock:
            return session.engine.set_direction(direction)

    def record_score(self, game_id: str, name: str) -> int | None:
        """Submit a finished game's score to the leaderboard once per round."""
        session = self._require(game_id)
        if not session.engine.is_finished:
            raise ValueError("Game has not finished.")
        if session.score_recorded:
            raise ValueError("Score already recorded for this game.")
        rank = self.leaderboard.record(name, session.engine.score)
        session.score_recorded = True
        return rank

    # --- connections ---

    async def connect(self, session: GameSession, websocket: WebSocket) -> None:
        """Register a client and send it an immediate state snapshot."""
        session.clients.append(websocket)
        snapshot = self._payload(
            session, session.engine.get_state(), drain=False,
        )
        await websocket.send_text(json.dumps(snapshot, separators=(",", ":")))

    def disconnect(self, session: GameSession, websocket: WebSocket) -> None:
        if websocket in session.clients:
            session.clients.remove(websocket)

    def _payload(self, session: GameSession, state: dict, drain: bool = True) -> dict:
        events: list[dict] = []
        if drain:
            events = session.pending_events[:]
            session.pending_events.clear()
        return {"game_id": session.game_id, **state, "events": events}

    async def _broadcast(self, session: GameSession, state: dict) -> None:
        """Send game state to every connected client."""
        payload = json.dumps(self._payload(session, state), separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the
        # live client list without affecting this send loop.
        for ws in list(session.clients):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.disconnect(session, ws)

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [
            s for s in self._sessions.values()
            if s.engine.is_finished and not (s.loop and s.loop.running)
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return

        finished.sort(
            key=lambda s: s.finished_at if s.finished_at is not None else s.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished games (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def cleanup(self) -> None:
        """Stop every running tick loop and close client sockets."""
        loops = [
            s.loop for s in self._sessions.values()
            if s.loop is not None and s.loop.running
        ]
        if loops:
            await asyncio.gather(*(lp.stop() for lp in loops))

        for session in self._sessions.values():
            for ws in list(session.clients):
                try:
                    if ws.client_state == WebSocketState.CONNECTED:
                        await ws.close(code=1001, reason="Server shutting down.")
                except Exception:
                    logger.warning(
                        "Failed closing socket in game %s.", session.game_id,
                    )
            session.clients.clear()
        logger.info("SessionManager cleanup complete.")
