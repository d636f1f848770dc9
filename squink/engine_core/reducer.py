"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying, in a fixed order
- Returns ActionResult with success/failure, never drops an action silently
- Copies the grid before painting so earlier snapshots stay intact
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .state import (
    GameState, GamePhase, PlayerState,
    NAME_MIN_LENGTH, NAME_MAX_LENGTH,
)
from .action import Action, ActionType, ActionResult, EventType, GameEvent
from .action_generator import is_adjacent
from .errors import (
    GameError, ErrorCode,
    AlreadyStarted, InsufficientBuyIn, AlreadyRegistered, InvalidName, NameTaken,
    MaximumPlayers, NotYetFormed, NoPlayers, GameNotActive, UnknownPlayer,
    AlreadyMoved, IllegalMove, OutOfBounds, GameFinished, OnlyOpenerCanStart,
)

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.NO_HANDLER,
            )

        try:
            new_state, events = handler(state, action)
        except GameError as e:
            logger.debug("Rejected %s: %s", action.action_type.value, e.message)
            return ActionResult.failure(e.message, error_code=e.code)

        # Shared logs; the previous snapshot still only sees its own prefix
        new_state = new_state._copy_with(
            events=state.events.extend(events),
            action_history=state.action_history.extend([action]),
        )
        return ActionResult.success_with_state(new_state, events=events)

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.REGISTER_PLAYER: self._handle_register,
            ActionType.START_GAME: self._handle_start,
            ActionType.SUBMIT_TURN: self._handle_turn,
            ActionType.TICK: self._handle_tick,
        }
        return handlers.get(action_type)

    def _handle_register(self, state: GameState, action: Action):
        """Add a player. Only allowed while the game is forming."""
        if state.phase == GamePhase.FINISHED:
            raise GameFinished("The game has finished")
        if state.phase == GamePhase.ACTIVE:
            raise AlreadyStarted("Players can only register while the game is forming")

        payload = action.payload
        if payload.payment < state.config.buy_in:
            raise InsufficientBuyIn(
                f"Buy-in is {state.config.buy_in}, got {payload.payment}"
            )

        player_id = payload.player_id
        if not player_id:
            raise InvalidName("Player id must not be empty")

        name = payload.name if payload.name is not None else player_id
        if payload.name is not None and not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            raise InvalidName(
                f"Names must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters, got {name!r}"
            )

        if state.get_player(player_id):
            raise AlreadyRegistered(f"Player {player_id} is already registered")
        if any(p.name == name for p in state.players):
            raise NameTaken(f"The name {name!r} is already taken")
        if state.num_players >= state.config.max_players:
            raise MaximumPlayers(f"The game is full ({state.config.max_players} players)")

        # Starting cells follow registration order in row-major order
        position = state.grid.coord(state.num_players)
        player = PlayerState(
            player_id=player_id,
            name=name,
            position=position,
            paid=payload.payment,
        )
        new_state = state._copy_with(players=state.players + [player])
        logger.info("Player %s registered at (%d, %d)", player_id, position.x, position.y)
        return new_state, [
            GameEvent(
                EventType.PLAYER_REGISTERED,
                player_id=player_id,
                data={"position": position.as_tuple(), "paid": payload.payment},
            )
        ]

    def _handle_start(self, state: GameState, action: Action):
        """Forming -> Active, once the forming countdown has run out. Restricted to the opener if one is set."""
        if state.phase == GamePhase.FINISHED:
            raise GameFinished("The game has finished")
        if state.phase == GamePhase.ACTIVE:
            raise AlreadyStarted("The game has already started")
        opener = state.config.opener
        if opener is not None and action.payload.player_id != opener:
            raise OnlyOpenerCanStart(f"Only {opener} can start this game")
        if state.forming_rounds_remaining > 0:
            raise NotYetFormed(
                f"{state.forming_rounds_remaining} forming round(s) remaining"
            )
        if not state.players:
            raise NoPlayers("At least one player must register before starting")

        logger.info("Game %s started with %d player(s)", state.game_id, state.num_players)
        return state._copy_with(phase=GamePhase.ACTIVE), [
            GameEvent(EventType.GAME_STARTED, data={"players": state.num_players})
        ]

    def _handle_tick(self, state: GameState, action: Action):
        """
        External clock signal.

        Forming: counts the forming rounds down.
        Active: closes the current round, even if some players did not move.
        """
        if state.phase == GamePhase.FINISHED:
            raise GameFinished("The game has finished")

        if state.phase == GamePhase.FORMING:
            remaining = max(0, state.forming_rounds_remaining - 1)
            return state._copy_with(forming_rounds_remaining=remaining), [
                GameEvent(EventType.FORMING_TICK, data={"forming_rounds_remaining": remaining})
            ]

        return self._end_round(state)

    def _handle_turn(self, state: GameState, action: Action):
        """
        Move a player onto an adjacent cell and paint it.

        Checks, in order: phase, player, once-per-round, adjacency, bounds.
        """
        if state.phase == GamePhase.FINISHED:
            raise GameFinished("The game has finished")
        if state.phase != GamePhase.ACTIVE:
            raise GameNotActive("Turns are only accepted while the game is active")

        player_id = action.payload.player_id
        player = state.get_player(player_id)
        if player is None:
            raise UnknownPlayer(f"Player {player_id} is not registered")
        if player.has_moved:
            raise AlreadyMoved(f"Player {player_id} already moved this round")

        move = action.payload.move
        if move is None:
            raise IllegalMove("No move given")
        target = move.target
        if not is_adjacent(player.position, target):
            raise IllegalMove(
                f"({target.x}, {target.y}) is not adjacent to "
                f"({player.position.x}, {player.position.y})"
            )
        if not state.grid.in_bounds(target):
            raise OutOfBounds(f"({target.x}, {target.y}) is outside the grid")

        previous_owner = state.grid.cell_at(target)
        if target == player.position and previous_owner == player_id:
            raise IllegalMove(f"Player {player_id} already owns ({target.x}, {target.y})")

        grid = state.grid.copy()
        changed = grid.claim(target, player_id, round_no=state.rounds_played)

        new_players = []
        for p in state.players:
            if p.player_id == player_id:
                p = p.with_changes(
                    position=target,
                    score=p.score + (1 if changed else 0),
                    has_moved=True,
                    turns_taken=p.turns_taken + 1,
                )
            elif changed and p.player_id == previous_owner:
                p = p.with_changes(score=p.score - 1)
            new_players.append(p)

        new_state = state._copy_with(grid=grid, players=new_players)
        events = [
            GameEvent(
                EventType.TURN_TAKEN,
                player_id=player_id,
                data={
                    "target": target.as_tuple(),
                    "previous_owner": previous_owner,
                    "changed": changed,
                },
            )
        ]

        if new_state.all_moved():
            new_state, round_events = self._end_round(new_state)
            events.extend(round_events)

        return new_state, events

    def _end_round(self, state: GameState):
        """Close the current round; finish the game after the last one."""
        rounds_remaining = state.rounds_remaining - 1
        rounds_played = state.rounds_played + 1
        players = [p.with_changes(has_moved=False) for p in state.players]
        events = [GameEvent(EventType.ROUND_INCREMENTED, data={"rounds_played": rounds_played})]

        if rounds_remaining <= 0:
            new_state = state._copy_with(
                phase=GamePhase.FINISHED,
                rounds_remaining=0,
                rounds_played=rounds_played,
                players=players,
            )
            winners = [p.player_id for p in new_state.winners()]
            events.append(GameEvent(EventType.GAME_ENDED, data={"winners": winners}))
            logger.info("Game %s finished, winner(s): %s", state.game_id, ", ".join(winners))
            return new_state, events

        logger.debug("Game %s round %d finished", state.game_id, rounds_played)
        return state._copy_with(
            rounds_remaining=rounds_remaining,
            rounds_played=rounds_played,
            players=players,
        ), events


def apply_action(state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer()
    return reducer.apply(state, action)
