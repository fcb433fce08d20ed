"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from classic_snake.server.session_manager import SessionManager
from classic_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


async def _dispatch(manager: SessionManager, game_id: str, msg: dict) -> None:
    """Route one client message to the matching intent."""
    action = msg.get("action")
    if action == "direction":
        direction_str = msg.get("direction")
        if not isinstance(direction_str, str):
            return
        direction = _DIRECTION_MAP.get(direction_str.lower())
        if direction is None:
            return
        await manager.set_direction(game_id, direction)
    elif action == "pause":
        paused = msg.get("paused")
        if isinstance(paused, bool):
            await manager.set_paused(game_id, paused)
    elif action == "start":
        await manager.start(game_id)
    elif action == "new_game":
        await manager.new_game(game_id)


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Player WebSocket: send intents, receive game state each tick."""
    manager = _get_manager(websocket)
    session = manager.get_session(game_id)
    if session is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    logger.info("Client connected to game %s.", game_id)

    try:
        await manager.connect(session, websocket)
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            try:
                await _dispatch(manager, game_id, msg)
            except KeyError:
                # The game was pruned while this client was connected.
                await websocket.close(code=4004, reason="Game not found.")
                return
    except WebSocketDisconnect:
        logger.info("Client disconnected from game %s.", game_id)
    finally:
        manager.disconnect(session, websocket)
