"""
Action System - Actions, moves, events and results.

Actions represent:
1. Player actions (register, take a turn)
2. System actions (start the game, clock ticks)

All state changes flow through actions. Applying one yields an
ActionResult carrying the new state and the events it produced.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .grid import Coord, Direction
from .errors import ErrorCode, error_from_code


class ActionType(Enum):
    """Types of actions in the system."""
    # Player actions
    REGISTER_PLAYER = "register_player"
    SUBMIT_TURN = "submit_turn"

    # System actions
    START_GAME = "start_game"
    TICK = "tick"


@dataclass(frozen=True)
class Move:
    """
    A turn request: the cell the player wants to move onto and paint.

    Either built from an explicit target or from a direction
    relative to the player's current position.
    """
    target: Coord
    direction: Direction | None = None

    @classmethod
    def to(cls, x: int, y: int) -> Move:
        return cls(target=Coord(x, y))

    @classmethod
    def step(cls, position: Coord, direction: Direction) -> Move:
        return cls(target=direction.apply(position), direction=direction)


@dataclass
class ActionPayload:
    """
    Payload for an action.

    Different action types use different fields;
    validation happens in the reducer.
    """
    player_id: str | None = None
    name: str | None = None
    payment: int = 0
    move: Move | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Logged for replay
    - Validated before application
    - Applied atomically by the reducer
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def register(cls, player_id: str, payment: int, name: str | None = None) -> Action:
        """Factory for player registration."""
        return cls(
            action_type=ActionType.REGISTER_PLAYER,
            payload=ActionPayload(player_id=player_id, payment=payment, name=name),
        )

    @classmethod
    def turn(cls, player_id: str, move: Move) -> Action:
        """Factory for a turn submission."""
        return cls(
            action_type=ActionType.SUBMIT_TURN,
            payload=ActionPayload(player_id=player_id, move=move),
        )

    @classmethod
    def start(cls, caller: str | None = None) -> Action:
        return cls(action_type=ActionType.START_GAME, payload=ActionPayload(player_id=caller))

    @classmethod
    def tick(cls) -> Action:
        return cls(action_type=ActionType.TICK)


class EventType(Enum):
    """Observable things that happened to a game."""
    PLAYER_REGISTERED = "player_registered"
    GAME_STARTED = "game_started"
    TURN_TAKEN = "turn_taken"
    FORMING_TICK = "forming_tick"
    ROUND_INCREMENTED = "round_incremented"
    GAME_ENDED = "game_ended"


@dataclass(frozen=True)
class GameEvent:
    """An entry in the game's event log."""
    event_type: EventType
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        """Human-readable one-liner."""
        if self.event_type == EventType.TURN_TAKEN:
            x, y = self.data["target"]
            return f"{self.player_id} painted ({x}, {y})"
        if self.event_type == EventType.PLAYER_REGISTERED:
            return f"{self.player_id} joined the game"
        if self.event_type == EventType.ROUND_INCREMENTED:
            return f"Round {self.data['rounds_played']} finished"
        return self.event_type.value.replace("_", " ").capitalize()


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Error message and code (if failed)
    - Events produced (for observers)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None
    events: list[GameEvent] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        events: list[GameEvent] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])

    def unwrap(self) -> Any:
        """Return the new state, raising the typed GameError on failure."""
        if not self.success:
            raise error_from_code(self.error_code or ErrorCode.INTERNAL_ERROR, self.error)
        return self.new_state
