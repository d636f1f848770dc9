"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients (drivers,
frontends, registration UIs) and the engine.

Error Codes: see squink.engine_core.errors.ErrorCode. Every rejection
is returned as an ErrorResponse carrying one of them.
"""

from typing import Optional, Any
from pydantic import BaseModel, Field, model_validator

from ..engine_core.errors import ErrorCode
from ..engine_core.grid import Direction, MAX_EXTENT


# =============================================================================
# Shared Models
# =============================================================================

class PlayerInfo(BaseModel):
    """A player's public state."""
    player_id: str
    name: str
    x: int
    y: int
    score: int = 0
    paid: int = 0
    has_moved: bool = False
    turns_taken: int = 0

    model_config = {"from_attributes": True}


class EventInfo(BaseModel):
    """A game event."""
    event_type: str
    player_id: Optional[str] = None
    description: str
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Parameters of a new game, fixed for its lifetime."""
    width: int = Field(..., ge=1, le=MAX_EXTENT, description="Grid width")
    height: int = Field(..., ge=1, le=MAX_EXTENT, description="Grid height")
    buy_in: int = Field(0, ge=0, description="Minimum payment to register")
    forming_rounds: int = Field(0, ge=0, description="Ticks before the game can start")
    rounds: int = Field(10, ge=1, description="Rounds played once active")
    game_id: Optional[str] = Field(None, description="Explicit id, generated if omitted")
    opener: Optional[str] = Field(None, description="Only this player may start the game")


class RegisterPlayerRequest(BaseModel):
    """Join the forming game."""
    player_id: str = Field(..., min_length=1)
    payment: int = Field(0, ge=0, description="Amount paid, must cover the buy-in")
    name: Optional[str] = Field(None, description="Display name, 3-16 characters")


class StartGameRequest(BaseModel):
    """Who is starting the game. Required when the game has an opener."""
    caller: Optional[str] = None


class TurnRequest(BaseModel):
    """
    A move for the current round.

    Give either a target cell (x and y) or a direction
    relative to the player's position.
    """
    player_id: str = Field(..., min_length=1)
    x: Optional[int] = None
    y: Optional[int] = None
    direction: Optional[Direction] = Field(None, description="stay, left, right, up, down")

    @model_validator(mode="after")
    def check_target(self):
        has_cell = self.x is not None and self.y is not None
        if has_cell == (self.direction is not None):
            raise ValueError("Provide either x and y, or a direction")
        return self


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Full public game state."""
    game_id: str
    phase: str = Field(description="forming, active, finished")
    width: int
    height: int
    buy_in: int
    forming_rounds: int
    rounds: int
    opener: Optional[str] = None
    pot: int = 0
    rounds_remaining: int
    rounds_played: int
    forming_rounds_remaining: int
    grid: list[Optional[str]] = Field(
        default_factory=list, description="Owner per cell, indexed by x + y * width"
    )
    players: list[PlayerInfo] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Result of a successful mutation."""
    success: bool = True
    game_id: str
    phase: str
    rounds_remaining: int
    events: list[EventInfo] = Field(default_factory=list)


class LeaderboardResponse(BaseModel):
    """Players ranked by score. Winners share the top score."""
    game_id: str
    phase: str
    is_final: bool
    entries: list[PlayerInfo] = Field(default_factory=list)
    winners: list[str] = Field(default_factory=list)


class CellResponse(BaseModel):
    """Ownership of one cell."""
    x: int
    y: int
    owner: Optional[str] = None
    claimed_at: Optional[int] = None


class EndGameResponse(BaseModel):
    """Response after tearing a game down."""
    success: bool
    game_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
    environment: str
    game_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Structured error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
