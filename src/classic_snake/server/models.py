"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from classic_snake.config import DEFAULT_GRID_HEIGHT, DEFAULT_GRID_WIDTH
from classic_snake.leaderboard import MAX_NAME_LENGTH, MIN_NAME_LENGTH

DirectionName = Literal["up", "down", "left", "right"]


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    grid_width: int = Field(default=DEFAULT_GRID_WIDTH, ge=1, le=500)
    grid_height: int = Field(default=DEFAULT_GRID_HEIGHT, ge=1, le=500)
    wall_mode: Literal["death", "wrap"] = "death"
    initial_snake_length: int = Field(default=3, ge=1)
    start_x: int = Field(default=3, ge=0)
    start_y: int = Field(default=1, ge=0)
    start_direction: DirectionName = "right"
    food_reward: int = Field(default=15, ge=0)
    tick_rate_ms: int = Field(default=75, ge=10, le=2000)
    seed: int | None = None


class PauseRequest(BaseModel):
    """Request body for POST /games/{game_id}/pause."""

    paused: bool


class DirectionRequest(BaseModel):
    """Request body for POST /games/{game_id}/direction."""

    direction: DirectionName


class ScoreSubmission(BaseModel):
    """Request body for POST /games/{game_id}/score."""

    name: str = Field(min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)


class SessionSummary(BaseModel):
    """Compact game info for list endpoints."""

    game_id: str
    status: str
    score: int
    tick_rate_ms: int
    grid_width: int
    grid_height: int


class IntentResponse(BaseModel):
    """Response for an accepted intent."""

    game_id: str
    accepted: bool
    status: str


class LeaderboardEntry(BaseModel):
    rank: int
    name: str
    score: int


class ScoreResponse(BaseModel):
    """Result of submitting a finished game's score."""

    game_id: str
    score: int
    rank: int | None


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
