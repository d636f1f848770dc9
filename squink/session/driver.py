"""
Turn Driver - Plays one player's turns until the game ends.

The loop:
1. Query the game phase
2. Wait while the game is forming or the player already moved this round
3. Ask the policy for a move
4. Submit it, retrying transport failures with exponential backoff
5. Repeat until the game is finished

Rules:
- Engine rejections stop the driver. The same move is never retried
  and no different move is tried in its place.
- NoLegalMove from the policy stops this driver only.
- Before every retry the state is queried again; a move that was
  already recorded (turns_taken went up) is never sent twice.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable
import logging
import time

from .client import GameClient, TransportError
from ..bots.policy import PlayerPolicy
from ..engine_core.action import Move
from ..engine_core.errors import ErrorCode, GameError, NoLegalMove
from ..engine_core.state import GamePhase, GameState, PlayerState

logger = logging.getLogger(__name__)


class DriverOutcome(Enum):
    """Why a driver stopped."""
    GAME_FINISHED = "game_finished"
    NO_LEGAL_MOVE = "no_legal_move"
    REJECTED = "rejected"
    NOT_REGISTERED = "not_registered"
    STOPPED = "stopped"


@dataclass
class DriverReport:
    """Summary of a driver run."""
    player_id: str
    outcome: DriverOutcome = DriverOutcome.STOPPED
    turns_submitted: int = 0
    retries: int = 0
    error_code: ErrorCode | None = None
    error: str | None = None


class TurnDriver:
    """
    Submits moves for one player.

    Usage:
        driver = TurnDriver(LocalClient(engine), "alice", CornerPolicy())
        report = driver.run()
    """

    def __init__(
        self,
        client: GameClient,
        player_id: str,
        policy: PlayerPolicy,
        poll_interval: float = 1.0,
        backoff_initial: float = 0.5,
        backoff_max: float = 30.0,
        max_turns: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.player_id = player_id
        self.policy = policy
        self.poll_interval = poll_interval
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.max_turns = max_turns
        self.sleep = sleep
        self._stopped = False
        self.report = DriverReport(player_id=player_id)

    def stop(self):
        """Ask the loop to exit after the current iteration."""
        self._stopped = True

    def run(self) -> DriverReport:
        """Drive until the game finishes or the driver has to stop."""
        logger.info("Driver for %s started (%s)", self.player_id, self.policy.get_name())
        while not self._stopped:
            try:
                state = self._query()
            except GameError as e:
                return self._finish(DriverOutcome.REJECTED, e)

            if state.phase == GamePhase.FINISHED:
                return self._finish(DriverOutcome.GAME_FINISHED)

            player = state.get_player(self.player_id)
            if player is None:
                if state.phase == GamePhase.FORMING:
                    self.sleep(self.poll_interval)
                    continue
                return self._finish(DriverOutcome.NOT_REGISTERED)

            if state.phase == GamePhase.FORMING or player.has_moved:
                self.sleep(self.poll_interval)
                continue

            try:
                move = self.policy.decide(state.view_for(self.player_id))
            except NoLegalMove as e:
                logger.warning("%s has no legal move left, stopping", self.player_id)
                return self._finish(DriverOutcome.NO_LEGAL_MOVE, e)

            try:
                accepted = self._submit(move, state, player)
            except GameError as e:
                logger.error(
                    "Move (%d, %d) for %s rejected: %s",
                    move.target.x, move.target.y, self.player_id, e.message,
                )
                return self._finish(DriverOutcome.REJECTED, e)

            if accepted:
                self.report.turns_submitted += 1
                if self.max_turns is not None and self.report.turns_submitted >= self.max_turns:
                    return self._finish(DriverOutcome.STOPPED)

        return self._finish(DriverOutcome.STOPPED)

    def _query(self) -> GameState:
        """Query state, retrying transport failures without limit."""
        delay = self.backoff_initial
        while True:
            try:
                return self.client.query_state()
            except TransportError as e:
                self.report.retries += 1
                logger.warning("State query failed (%s), retrying in %.1fs", e, delay)
                self.sleep(delay)
                delay = min(delay * 2, self.backoff_max)

    def _submit(self, move: Move, before: GameState, player: PlayerState) -> bool:
        """
        Submit a move, retrying transport failures.

        Returns True once the move is recorded, False if the round or
        game moved on before it could be delivered.
        """
        delay = self.backoff_initial
        while True:
            try:
                self.client.submit_turn(self.player_id, move)
                return True
            except TransportError as e:
                self.report.retries += 1
                logger.warning(
                    "Submitting (%d, %d) for %s failed (%s), retrying in %.1fs",
                    move.target.x, move.target.y, self.player_id, e, delay,
                )
                self.sleep(delay)
                delay = min(delay * 2, self.backoff_max)

            state = self._query()
            current = state.get_player(self.player_id)
            if current is not None and current.turns_taken > player.turns_taken:
                logger.info("Move for %s was recorded despite the failure", self.player_id)
                return True
            if state.phase != GamePhase.ACTIVE or state.rounds_played != before.rounds_played:
                logger.info("Round moved on before the move for %s was delivered", self.player_id)
                return False

    def _finish(self, outcome: DriverOutcome, error: GameError | None = None) -> DriverReport:
        self.report.outcome = outcome
        if error is not None:
            self.report.error_code = error.code
            self.report.error = error.message
        logger.info(
            "Driver for %s stopped: %s after %d turn(s)",
            self.player_id, outcome.value, self.report.turns_submitted,
        )
        return self.report
