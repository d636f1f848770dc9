"""
API Module - REST interface to the game.

Exposes the engine to registration UIs, frontends and remote
turn drivers. All state lives in the service's GameManager.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    RegisterPlayerRequest,
    StartGameRequest,
    TurnRequest,
    # Responses
    GameStateResponse,
    ActionResponse,
    LeaderboardResponse,
    CellResponse,
    EndGameResponse,
    HealthResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    EventInfo,
)
from .service import APIService, state_to_response
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "RegisterPlayerRequest",
    "StartGameRequest",
    "TurnRequest",
    # Responses
    "GameStateResponse",
    "ActionResponse",
    "LeaderboardResponse",
    "CellResponse",
    "EndGameResponse",
    "HealthResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "EventInfo",
    # Service
    "APIService",
    "state_to_response",
    "create_app",
]
