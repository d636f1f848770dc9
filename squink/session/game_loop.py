"""
Match Runner - Plays a whole local game with in-process policies.

The loop:
1. Register every player with the buy-in
2. Tick through the forming rounds and start the game
3. Each round, ask every player's policy for a move in registration order
4. Tick the round closed if some players could not move
5. Repeat until the game is finished
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..bots.policy import PlayerPolicy
from ..engine_core.action import GameEvent
from ..engine_core.engine import GameEngine
from ..engine_core.errors import ErrorCode, NoLegalMove
from ..engine_core.state import GameConfig, GamePhase, PlayerState

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Outcome of a finished match."""
    game_id: str
    rounds_played: int
    leaderboard: list[PlayerState]
    winners: list[PlayerState]
    events: list[GameEvent] = field(default_factory=list)

    # Players that had no legal move, per round (round number -> ids)
    skipped: dict[int, list[str]] = field(default_factory=dict)

    # Moves the engine refused: (player_id, error code)
    rejections: list[tuple[str, ErrorCode | None]] = field(default_factory=list)

    @property
    def is_tie(self) -> bool:
        return len(self.winners) > 1


class MatchRunner:
    """
    Runs a local match.

    Usage:
        runner = MatchRunner(GameConfig(dimensions=(5, 5), rounds=10))
        runner.add_player("alice", CornerPolicy())
        runner.add_player("bob", RandomPolicy(seed=1))
        result = runner.play()
    """

    def __init__(self, config: GameConfig, engine: GameEngine | None = None):
        self.config = config
        self.engine = engine or GameEngine(config)
        self.policies: dict[str, PlayerPolicy] = {}

    def add_player(self, player_id: str, policy: PlayerPolicy, payment: int | None = None):
        """Register a player with the engine and remember its policy."""
        paid = self.config.buy_in if payment is None else payment
        self.engine.register_player(player_id, paid).unwrap()
        self.policies[player_id] = policy

    def play(self) -> MatchResult:
        """Play until the game is finished."""
        state = self.engine.query_state()
        while state.phase == GamePhase.FORMING and state.forming_rounds_remaining > 0:
            self.engine.tick().unwrap()
            state = self.engine.query_state()
        if state.phase == GamePhase.FORMING:
            self.engine.start_game(caller=self.config.opener).unwrap()

        skipped: dict[int, list[str]] = {}
        rejections: list[tuple[str, ErrorCode | None]] = []

        while self.engine.query_state().phase == GamePhase.ACTIVE:
            round_no = self.engine.query_state().rounds_played
            for player_id, policy in self.policies.items():
                state = self.engine.query_state()
                if state.phase != GamePhase.ACTIVE or state.rounds_played != round_no:
                    break

                try:
                    move = policy.decide(state.view_for(player_id))
                except NoLegalMove:
                    skipped.setdefault(round_no, []).append(player_id)
                    continue

                result = self.engine.submit_turn(player_id, move)
                if not result.success:
                    logger.warning("Move for %s rejected: %s", player_id, result.error)
                    rejections.append((player_id, result.error_code))

            state = self.engine.query_state()
            if state.phase == GamePhase.ACTIVE and state.rounds_played == round_no:
                # Someone could not move; close the round on the clock
                self.engine.tick().unwrap()

        final = self.engine.query_state()
        return MatchResult(
            game_id=final.game_id,
            rounds_played=final.rounds_played,
            leaderboard=final.leaderboard(),
            winners=final.winners(),
            events=list(final.events),
            skipped=skipped,
            rejections=rejections,
        )
