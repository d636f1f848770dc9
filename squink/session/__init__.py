"""
Session Module - Running games.

- GameManager: owns the one live game of a deployment
- TurnDriver: plays one player's turns against an engine or the API
- MatchRunner: plays a whole local match with in-process policies
- LocalClient / HttpGameClient: how a driver reaches the engine
"""

from .manager import GameManager
from .client import GameClient, LocalClient, HttpGameClient, TransportError, state_from_payload
from .driver import TurnDriver, DriverOutcome, DriverReport
from .game_loop import MatchRunner, MatchResult

__all__ = [
    "GameManager",
    "GameClient",
    "LocalClient",
    "HttpGameClient",
    "TransportError",
    "state_from_payload",
    "TurnDriver",
    "DriverOutcome",
    "DriverReport",
    "MatchRunner",
    "MatchResult",
]
