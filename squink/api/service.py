"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests to engine calls
2. Owns the GameManager (one live game)
3. Formats engine state into response models

Rejections are raised as GameError; the web layer turns them
into ErrorResponses. This layer is framework-agnostic.
"""

from __future__ import annotations
from dataclasses import dataclass, field

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
    PlayerInfo,
    EventInfo,
)
from ..engine_core.action import ActionResult, GameEvent, Move
from ..engine_core.errors import UnknownPlayer
from ..engine_core.grid import Coord
from ..engine_core.state import GameConfig, GamePhase, GameState, PlayerState
from ..session import GameManager


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        service.create_game(CreateGameRequest(width=4, height=4))
        service.register_player(RegisterPlayerRequest(player_id="alice"))
        service.start_game()
        service.submit_turn(TurnRequest(player_id="alice", direction="right"))
    """
    manager: GameManager = field(default_factory=GameManager)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse:
        config = GameConfig(
            dimensions=(request.width, request.height),
            buy_in=request.buy_in,
            forming_rounds=request.forming_rounds,
            rounds=request.rounds,
            opener=request.opener,
        )
        engine = self.manager.create_game(config, game_id=request.game_id)
        return state_to_response(engine.query_state())

    def end_game(self) -> EndGameResponse:
        game_id = self.manager.end_game()
        return EndGameResponse(success=game_id is not None, game_id=game_id)

    def get_state(self) -> GameStateResponse:
        return state_to_response(self.manager.require_game().query_state())

    def register_player(self, request: RegisterPlayerRequest) -> ActionResponse:
        engine = self.manager.require_game()
        result = engine.register_player(request.player_id, request.payment, name=request.name)
        return _action_response(result)

    def start_game(self, request: StartGameRequest | None = None) -> ActionResponse:
        caller = request.caller if request else None
        return _action_response(self.manager.require_game().start_game(caller=caller))

    def tick(self) -> ActionResponse:
        return _action_response(self.manager.require_game().tick())

    def submit_turn(self, request: TurnRequest) -> ActionResponse:
        engine = self.manager.require_game()
        if request.direction is not None:
            player = engine.query_state().get_player(request.player_id)
            if player is None:
                raise UnknownPlayer(f"Player {request.player_id} is not registered")
            move = Move.step(player.position, request.direction)
        else:
            move = Move.to(request.x, request.y)
        return _action_response(engine.submit_turn(request.player_id, move))

    def leaderboard(self) -> LeaderboardResponse:
        state = self.manager.require_game().query_state()
        return LeaderboardResponse(
            game_id=state.game_id,
            phase=state.phase.value,
            is_final=state.phase == GamePhase.FINISHED,
            entries=[_player_info(p) for p in state.leaderboard()],
            winners=[p.player_id for p in state.winners()],
        )

    def cell(self, x: int, y: int) -> CellResponse:
        state = self.manager.require_game().query_state()
        entry = state.grid.entry_at(Coord(x, y))
        return CellResponse(
            x=x,
            y=y,
            owner=entry.owner if entry else None,
            claimed_at=entry.claimed_at if entry else None,
        )


def state_to_response(state: GameState) -> GameStateResponse:
    """Convert a GameState snapshot into its API model."""
    return GameStateResponse(
        game_id=state.game_id,
        phase=state.phase.value,
        width=state.config.width,
        height=state.config.height,
        buy_in=state.config.buy_in,
        forming_rounds=state.config.forming_rounds,
        rounds=state.config.rounds,
        opener=state.config.opener,
        pot=state.pot,
        rounds_remaining=state.rounds_remaining,
        rounds_played=state.rounds_played,
        forming_rounds_remaining=state.forming_rounds_remaining,
        grid=state.grid.snapshot(),
        players=[_player_info(p) for p in state.players],
    )


def _player_info(player: PlayerState) -> PlayerInfo:
    return PlayerInfo(
        player_id=player.player_id,
        name=player.name,
        x=player.position.x,
        y=player.position.y,
        score=player.score,
        paid=player.paid,
        has_moved=player.has_moved,
        turns_taken=player.turns_taken,
    )


def _event_info(event: GameEvent) -> EventInfo:
    return EventInfo(
        event_type=event.event_type.value,
        player_id=event.player_id,
        description=event.describe(),
        data=event.data,
    )


def _action_response(result: ActionResult) -> ActionResponse:
    """Unwrap an ActionResult, raising its GameError on failure."""
    state = result.unwrap()
    return ActionResponse(
        game_id=state.game_id,
        phase=state.phase.value,
        rounds_remaining=state.rounds_remaining,
        events=[_event_info(e) for e in result.events],
    )
