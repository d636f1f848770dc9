"""
Errors - Typed failures raised by the grid, the engine and the policies.

Every error carries an ErrorCode so callers (reducer, API, driver)
can report it without string matching.
"""

from __future__ import annotations
from enum import Enum


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
    INVALID_CONFIG = "INVALID_CONFIG"
    ALREADY_STARTED = "ALREADY_STARTED"
    INSUFFICIENT_BUY_IN = "INSUFFICIENT_BUY_IN"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    INVALID_NAME = "INVALID_NAME"
    NAME_TAKEN = "NAME_TAKEN"
    MAXIMUM_PLAYERS = "MAXIMUM_PLAYERS"
    NOT_YET_FORMED = "NOT_YET_FORMED"
    ONLY_OPENER_CAN_START = "ONLY_OPENER_CAN_START"
    NO_PLAYERS = "NO_PLAYERS"
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    ALREADY_MOVED = "ALREADY_MOVED"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    GAME_FINISHED = "GAME_FINISHED"
    NO_LEGAL_MOVE = "NO_LEGAL_MOVE"
    NO_ACTIVE_GAME = "NO_ACTIVE_GAME"
    GAME_ALREADY_ACTIVE = "GAME_ALREADY_ACTIVE"
    NO_HANDLER = "NO_HANDLER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameError(Exception):
    """Base class for all game-level failures."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code.value)
        self.message = message or self.code.value


class InvalidDimensions(GameError):
    code = ErrorCode.INVALID_DIMENSIONS


class InvalidConfig(GameError):
    code = ErrorCode.INVALID_CONFIG


class AlreadyStarted(GameError):
    code = ErrorCode.ALREADY_STARTED


class InsufficientBuyIn(GameError):
    code = ErrorCode.INSUFFICIENT_BUY_IN


class AlreadyRegistered(GameError):
    code = ErrorCode.ALREADY_REGISTERED


class InvalidName(GameError):
    code = ErrorCode.INVALID_NAME


class NameTaken(GameError):
    code = ErrorCode.NAME_TAKEN


class MaximumPlayers(GameError):
    code = ErrorCode.MAXIMUM_PLAYERS


class NotYetFormed(GameError):
    code = ErrorCode.NOT_YET_FORMED


class NoPlayers(GameError):
    code = ErrorCode.NO_PLAYERS


class GameNotActive(GameError):
    code = ErrorCode.GAME_NOT_ACTIVE


class UnknownPlayer(GameError):
    code = ErrorCode.UNKNOWN_PLAYER


class AlreadyMoved(GameError):
    code = ErrorCode.ALREADY_MOVED


class IllegalMove(GameError):
    code = ErrorCode.ILLEGAL_MOVE


class OutOfBounds(GameError):
    code = ErrorCode.OUT_OF_BOUNDS


class GameFinished(GameError):
    code = ErrorCode.GAME_FINISHED


class OnlyOpenerCanStart(GameError):
    code = ErrorCode.ONLY_OPENER_CAN_START


class NoLegalMove(GameError):
    """Raised by a policy that cannot propose any move the engine would accept."""
    code = ErrorCode.NO_LEGAL_MOVE


class NoActiveGame(GameError):
    code = ErrorCode.NO_ACTIVE_GAME


class GameAlreadyActive(GameError):
    code = ErrorCode.GAME_ALREADY_ACTIVE


_BY_CODE: dict[ErrorCode, type[GameError]] = {
    cls.code: cls
    for cls in [
        InvalidDimensions, InvalidConfig, AlreadyStarted, InsufficientBuyIn,
        AlreadyRegistered, InvalidName, NameTaken, MaximumPlayers, NotYetFormed,
        NoPlayers, GameNotActive, UnknownPlayer, AlreadyMoved, IllegalMove,
        OutOfBounds, GameFinished, OnlyOpenerCanStart, NoLegalMove, NoActiveGame,
        GameAlreadyActive,
    ]
}


def error_from_code(code: str | ErrorCode, message: str | None = None) -> GameError:
    """Rebuild a typed error from its wire code (used by remote clients)."""
    try:
        cls = _BY_CODE[ErrorCode(code)]
    except (ValueError, KeyError):
        return GameError(message or str(code))
    return cls(message)
