"""REST API route handlers for game lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from classic_snake.config import GameConfig
from classic_snake.grid import WallMode
from classic_snake.leaderboard import Leaderboard
from classic_snake.server.models import (
    CreateGameRequest,
    DirectionRequest,
    ErrorResponse,
    IntentResponse,
    LeaderboardEntry,
    PauseRequest,
    ScoreResponse,
    ScoreSubmission,
    SessionSummary,
)
from classic_snake.server.session_manager import SessionManager
from classic_snake.snake import Direction

router = APIRouter(prefix="/games", tags=["games"])
leaderboard_router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> SessionSummary:
    """Create a new idle game."""
    manager = _get_manager(request)
    try:
        config = GameConfig(
            grid_width=body.grid_width,
            grid_height=body.grid_height,
            wall_mode=WallMode(body.wall_mode),
            initial_length=body.initial_snake_length,
            start_x=body.start_x,
            start_y=body.start_y,
            start_direction=Direction[body.start_direction.upper()],
            food_reward=body.food_reward,
            tick_interval_ms=body.tick_rate_ms,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    session = manager.create_session(config)
    return session.summary()


@router.get("")
async def list_games(request: Request) -> list[SessionSummary]:
    """List hosted games."""
    return _get_manager(request).list_sessions()


@router.get("/{game_id}", responses=_NOT_FOUND)
async def get_game(game_id: str, request: Request) -> dict:
    """Get game metadata and the current state."""
    session = _get_manager(request).get_session(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Game not found.")
    return {
        "game_id": session.game_id,
        "status": session.status.value,
        "tick_rate_ms": session.config.tick_interval_ms,
        "connected_clients": len(session.clients),
        "config": session.config.to_dict(),
        "state": session.engine.get_state(),
    }


def _intent_response(request: Request, game_id: str, accepted: bool) -> IntentResponse:
    session = _get_manager(request).get_session(game_id)
    status = session.status.value if session is not None else "unknown"
    return IntentResponse(game_id=game_id, accepted=accepted, status=status)


@router.post("/{game_id}/start", responses=_NOT_FOUND)
async def start_game(game_id: str, request: Request) -> IntentResponse:
    """Start the game, or start a fresh round after it ended."""
    try:
        accepted = await _get_manager(request).start(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not accepted:
        raise HTTPException(status_code=409, detail="Game is already running.")
    return _intent_response(request, game_id, accepted)


@router.post("/{game_id}/pause", responses=_NOT_FOUND)
async def pause_game(
    game_id: str, body: PauseRequest, request: Request,
) -> IntentResponse:
    """Pause or resume a running game."""
    try:
        changed = await _get_manager(request).set_paused(game_id, body.paused)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not changed:
        raise HTTPException(
            status_code=409, detail="Game cannot change pause state now.",
        )
    return _intent_response(request, game_id, changed)


@router.post("/{game_id}/direction", responses=_NOT_FOUND)
async def change_direction(
    game_id: str, body: DirectionRequest, request: Request,
) -> IntentResponse:
    """Buffer a direction change for the next tick."""
    direction = Direction[body.direction.upper()]
    try:
        accepted = await _get_manager(request).set_direction(game_id, direction)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if not accepted:
        raise HTTPException(status_code=409, detail="Direction change rejected.")
    return _intent_response(request, game_id, accepted)


@router.post("/{game_id}/new-game", responses=_NOT_FOUND)
async def new_game(game_id: str, request: Request) -> IntentResponse:
    """Abandon the current round and reset the board."""
    try:
        await _get_manager(request).new_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _intent_response(request, game_id, True)


@router.post("/{game_id}/score", status_code=201, responses=_NOT_FOUND)
async def submit_score(
    game_id: str, body: ScoreSubmission, request: Request,
) -> ScoreResponse:
    """Record a finished game's score on the leaderboard."""
    manager = _get_manager(request)
    if not Leaderboard.is_valid_name(body.name):
        raise HTTPException(status_code=422, detail="Invalid name.")
    try:
        rank = manager.record_score(game_id, body.name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    session = manager.get_session(game_id)
    score = session.engine.score if session is not None else 0
    return ScoreResponse(game_id=game_id, score=score, rank=rank)


@leaderboard_router.get("")
async def get_leaderboard(request: Request) -> list[LeaderboardEntry]:
    """Return the ranked high scores."""
    return [
        LeaderboardEntry(**entry)
        for entry in _get_manager(request).leaderboard.to_list()
    ]
