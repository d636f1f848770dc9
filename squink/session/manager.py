"""
Game Manager - Owns the one active game of a deployment.

LIFECYCLE:
1. create_game(config) -> a fresh GameEngine in the Forming phase
2. Players register, the game starts, turns are played
3. end_game() tears the engine down

Only one game may be live at a time. A finished game may be
replaced by a new one without an explicit end_game().
No persistence - the game lives in memory only.
"""

from __future__ import annotations
import logging
import threading

from ..engine_core.engine import GameEngine
from ..engine_core.errors import GameAlreadyActive, NoActiveGame
from ..engine_core.state import GameConfig, GamePhase

logger = logging.getLogger(__name__)


class GameManager:
    """
    Holds at most one GameEngine.

    Explicitly owned instead of a module-level singleton, so tests and
    the API can each have their own.
    """

    def __init__(self):
        self._engine: GameEngine | None = None
        self._lock = threading.Lock()

    def create_game(self, config: GameConfig, game_id: str | None = None) -> GameEngine:
        """Create the deployment's game. Fails while another game is unfinished."""
        with self._lock:
            if self._engine is not None:
                if self._engine.query_state().phase != GamePhase.FINISHED:
                    raise GameAlreadyActive(
                        f"Game {self._engine.game_id} is still {self._engine.query_state().phase.value}"
                    )
                logger.info("Replacing finished game %s", self._engine.game_id)
            self._engine = GameEngine(config, game_id=game_id)
            logger.info(
                "Created game %s (%dx%d, buy-in %d, %d round(s))",
                self._engine.game_id, config.width, config.height, config.buy_in, config.rounds,
            )
            return self._engine

    @property
    def current(self) -> GameEngine | None:
        return self._engine

    def require_game(self) -> GameEngine:
        """The current game, or NoActiveGame."""
        engine = self._engine
        if engine is None:
            raise NoActiveGame("No game has been created")
        return engine

    def end_game(self) -> str | None:
        """Tear down the current game. Returns its id, None if there was none."""
        with self._lock:
            engine, self._engine = self._engine, None
        if engine is None:
            return None
        logger.info("Game %s torn down", engine.game_id)
        return engine.game_id
