"""
FastAPI Application - REST API for the game.

Endpoints:
    GET    /api/v1/health                Health check
    POST   /api/v1/game                  Create the game
    DELETE /api/v1/game                  Tear the game down
    GET    /api/v1/game/state            Full game state
    POST   /api/v1/game/players          Register a player (forming only)
    POST   /api/v1/game/start            Forming -> Active
    POST   /api/v1/game/tick             External clock signal
    POST   /api/v1/game/turns            Submit a move
    GET    /api/v1/game/leaderboard      Players by score, winners
    GET    /api/v1/game/cells/{x}/{y}    Ownership of one cell

All responses are JSON with explicit Pydantic schemas.
Every engine rejection comes back as an ErrorResponse with its error code.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core.errors import ErrorCode, GameError
from .service import APIService
from .schemas import (
    CreateGameRequest,
    RegisterPlayerRequest,
    StartGameRequest,
    TurnRequest,
    GameStateResponse,
    ActionResponse,
    LeaderboardResponse,
    CellResponse,
    EndGameResponse,
    HealthResponse,
    ErrorResponse,
)

logger = logging.getLogger(__name__)

# Environment configuration
SQUINK_ENV = os.getenv("SQUINK_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

NOT_FOUND_CODES = {ErrorCode.NO_ACTIVE_GAME, ErrorCode.UNKNOWN_PLAYER}
FORBIDDEN_CODES = {ErrorCode.ONLY_OPENER_CAN_START}
CONFLICT_CODES = {
    ErrorCode.ALREADY_STARTED,
    ErrorCode.ALREADY_REGISTERED,
    ErrorCode.NAME_TAKEN,
    ErrorCode.MAXIMUM_PLAYERS,
    ErrorCode.NOT_YET_FORMED,
    ErrorCode.NO_PLAYERS,
    ErrorCode.GAME_NOT_ACTIVE,
    ErrorCode.ALREADY_MOVED,
    ErrorCode.GAME_FINISHED,
    ErrorCode.GAME_ALREADY_ACTIVE,
}


def status_for(code: ErrorCode) -> int:
    """HTTP status for an engine error code."""
    if code in NOT_FOUND_CODES:
        return 404
    if code in FORBIDDEN_CODES:
        return 403
    if code in CONFLICT_CODES:
        return 409
    return 400


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Squink-Splash API",
        description="""
Turn-based grid painting game.

## Game Flow

1. `POST /game` creates the game (Forming phase)
2. `POST /game/players` registers players with the buy-in
3. `POST /game/tick` counts the forming rounds down
4. `POST /game/start` activates the game
5. `POST /game/turns` - each player moves once per round
6. The game finishes after the configured number of rounds

## Error Codes

Rejections use the codes listed in `ErrorResponse.error_code`,
e.g. `ILLEGAL_MOVE`, `OUT_OF_BOUNDS`, `ALREADY_MOVED`, `GAME_FINISHED`.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(GameError)
    async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
        logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.code.value)
        return make_error_response(exc.code, exc.message, status_code=status_for(exc.code))

    error_responses = {
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    }

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        current = api_service.manager.current
        return HealthResponse(
            version=__version__,
            environment=SQUINK_ENV,
            game_id=current.game_id if current else None,
        )

    # =========================================================================
    # Game lifecycle
    # =========================================================================

    @app.post(
        "/api/v1/game",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Create the game",
    )
    async def create_game(body: CreateGameRequest) -> GameStateResponse:
        """Create a new game in the Forming phase. Fails while another game is unfinished."""
        return api_service.create_game(body)

    @app.delete(
        "/api/v1/game",
        response_model=EndGameResponse,
        tags=["Game"],
        summary="Tear the game down",
    )
    async def end_game() -> EndGameResponse:
        return api_service.end_game()

    @app.get(
        "/api/v1/game/state",
        response_model=GameStateResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Get the full game state",
    )
    async def get_state() -> GameStateResponse:
        return api_service.get_state()

    @app.post(
        "/api/v1/game/start",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Start the game",
    )
    async def start_game(body: Optional[StartGameRequest] = None) -> ActionResponse:
        """
        Requires the forming countdown to be over and at least one player.

        Games created with an opener need `{"caller": "<opener>"}`.
        """
        return api_service.start_game(body)

    @app.post(
        "/api/v1/game/tick",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Advance the game clock",
    )
    async def tick() -> ActionResponse:
        """Counts forming rounds down, or closes the current round."""
        return api_service.tick()

    # =========================================================================
    # Players and turns
    # =========================================================================

    @app.post(
        "/api/v1/game/players",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Players"],
        summary="Register a player",
    )
    async def register_player(body: RegisterPlayerRequest) -> ActionResponse:
        return api_service.register_player(body)

    @app.post(
        "/api/v1/game/turns",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Players"],
        summary="Submit a move",
    )
    async def submit_turn(body: TurnRequest) -> ActionResponse:
        """
        Move onto an adjacent cell (or stay) and paint it.

        **Body:** either `{"player_id": "alice", "x": 1, "y": 0}`
        or `{"player_id": "alice", "direction": "right"}`.
        """
        return api_service.submit_turn(body)

    @app.get(
        "/api/v1/game/leaderboard",
        response_model=LeaderboardResponse,
        responses=error_responses,
        tags=["Players"],
        summary="Players by score",
    )
    async def leaderboard() -> LeaderboardResponse:
        return api_service.leaderboard()

    @app.get(
        "/api/v1/game/cells/{x}/{y}",
        response_model=CellResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Ownership of one cell",
    )
    async def get_cell(x: int, y: int) -> CellResponse:
        return api_service.cell(x, y)

    return app


# For running directly: uvicorn squink.api.app:app
app = create_app()
