"""
Engine Core - Deterministic game state management and move validation.

The engine is the runtime that:
1. Creates the Grid from a GameConfig
2. Manages GameState through the Forming -> Active -> Finished phases
3. Validates and applies moves via the reducer
4. Keeps scores equal to the number of cells each player owns
"""

from .errors import (
    ErrorCode,
    GameError,
    InvalidDimensions,
    InvalidConfig,
    AlreadyStarted,
    InsufficientBuyIn,
    AlreadyRegistered,
    InvalidName,
    NameTaken,
    MaximumPlayers,
    NotYetFormed,
    NoPlayers,
    GameNotActive,
    UnknownPlayer,
    AlreadyMoved,
    IllegalMove,
    OutOfBounds,
    GameFinished,
    OnlyOpenerCanStart,
    NoLegalMove,
    NoActiveGame,
    GameAlreadyActive,
)
from .grid import Grid, Cell, Coord, Direction, MAX_EXTENT
from .state import GameState, GameConfig, GamePhase, History, PlayerState, PlayerView, PLAYER_LIMIT
from .action import Action, ActionType, ActionPayload, ActionResult, Move, GameEvent, EventType
from .reducer import Reducer, apply_action
from .action_generator import legal_moves, legal_moves_for
from .engine import GameEngine

__all__ = [
    "ErrorCode",
    "GameError",
    "InvalidDimensions",
    "InvalidConfig",
    "AlreadyStarted",
    "InsufficientBuyIn",
    "AlreadyRegistered",
    "InvalidName",
    "NameTaken",
    "MaximumPlayers",
    "NotYetFormed",
    "NoPlayers",
    "GameNotActive",
    "UnknownPlayer",
    "AlreadyMoved",
    "IllegalMove",
    "OutOfBounds",
    "GameFinished",
    "OnlyOpenerCanStart",
    "NoLegalMove",
    "NoActiveGame",
    "GameAlreadyActive",
    "Grid",
    "Cell",
    "Coord",
    "Direction",
    "MAX_EXTENT",
    "GameState",
    "History",
    "GameConfig",
    "GamePhase",
    "PlayerState",
    "PlayerView",
    "PLAYER_LIMIT",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Move",
    "GameEvent",
    "EventType",
    "Reducer",
    "apply_action",
    "legal_moves",
    "legal_moves_for",
    "GameEngine",
]
