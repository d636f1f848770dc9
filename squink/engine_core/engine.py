"""
Game Engine - The owned, thread-safe home of one game.

The engine is the runtime that:
1. Holds the current GameState snapshot
2. Serializes every mutation behind a single lock
3. Runs actions through the reducer
4. Publishes the resulting snapshot for lock-free reads

Reads (query_state, cell_at, winners) never take the lock: they
work on whatever snapshot was last published, and snapshots are
never mutated after publication.
"""

from __future__ import annotations
from typing import Callable
import logging
import threading
import uuid

from .action import Action, ActionResult, GameEvent, Move
from .grid import Coord
from .reducer import Reducer
from .state import GameConfig, GameState, PlayerState

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Single-writer wrapper around a GameState.

    Usage:
        engine = GameEngine(GameConfig(dimensions=(4, 4), buy_in=10, rounds=5))
        engine.register_player("alice", payment=10)
        engine.start_game()
        engine.submit_turn("alice", Move.to(1, 0))
        engine.query_state().scores()
    """

    def __init__(self, config: GameConfig, game_id: str | None = None):
        self.config = config
        self.game_id = game_id or str(uuid.uuid4())
        self._state = GameState.create(self.game_id, config)
        self._reducer = Reducer()
        self._lock = threading.Lock()
        self._listeners: list[Callable[[GameEvent], None]] = []

    # =========================================================================
    # Mutations
    # =========================================================================

    def register_player(self, player_id: str, payment: int, name: str | None = None) -> ActionResult:
        """Join the game during the forming phase."""
        return self.apply(Action.register(player_id, payment, name=name))

    def start_game(self, caller: str | None = None) -> ActionResult:
        """Forming -> Active. caller must be the opener when the config names one."""
        return self.apply(Action.start(caller))

    def submit_turn(self, player_id: str, move: Move) -> ActionResult:
        """Move a player onto an adjacent cell and paint it."""
        return self.apply(Action.turn(player_id, move))

    def tick(self) -> ActionResult:
        """External clock signal (forming countdown or round boundary)."""
        return self.apply(Action.tick())

    def apply(self, action: Action) -> ActionResult:
        """Run an action through the reducer under the writer lock."""
        with self._lock:
            result = self._reducer.apply(self._state, action)
            if result.success:
                self._state = result.new_state
        if result.success:
            for event in result.events:
                self._notify(event)
        else:
            logger.debug(
                "Game %s rejected %s: %s",
                self.game_id, action.action_type.value, result.error_code,
            )
        return result

    # =========================================================================
    # Reads
    # =========================================================================

    def query_state(self) -> GameState:
        """The latest published snapshot."""
        return self._state

    def cell_at(self, coord: Coord) -> str | None:
        return self._state.grid.cell_at(coord)

    def scores(self) -> dict[str, int]:
        return self._state.scores()

    def winners(self) -> list[PlayerState]:
        return self._state.winners()

    def leaderboard(self) -> list[PlayerState]:
        return self._state.leaderboard()

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, listener: Callable[[GameEvent], None]):
        """Call listener for every event the engine produces."""
        self._listeners.append(listener)

    def _notify(self, event: GameEvent):
        # The action is already applied; listener failures are logged, not raised
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Listener %r failed on %s in game %s",
                    listener, event.event_type.value, self.game_id,
                )
