"""
Action Generator - Enumerates the moves the engine would accept.

Used by:
1. Policies to choose a move
2. The match runner to detect players that are stuck
3. Tests (every generated move must pass the reducer)

Order is fixed (STAY, LEFT, RIGHT, UP, DOWN) so deterministic
policies can rely on it for tie-breaking.
"""

from __future__ import annotations

from .grid import Coord, Direction, Grid
from .action import Move
from .state import GameState, GamePhase, PlayerView


MOVE_ORDER = (
    Direction.STAY,
    Direction.LEFT,
    Direction.RIGHT,
    Direction.UP,
    Direction.DOWN,
)


def is_adjacent(position: Coord, target: Coord) -> bool:
    """Closed 4-neighborhood: the cell itself or one orthogonal step."""
    return position.distance(target) <= 1


def candidate_moves(grid: Grid, player_id: str, position: Coord) -> list[Move]:
    """Adjacent in-bounds moves, minus repainting a cell the player already owns."""
    moves = []
    for direction in MOVE_ORDER:
        move = Move.step(position, direction)
        if not grid.in_bounds(move.target):
            continue
        if direction == Direction.STAY and grid.cell_at(position) == player_id:
            continue
        moves.append(move)
    return moves


def legal_moves(view: PlayerView) -> list[Move]:
    """Legal moves for the observing player. Empty outside the Active phase."""
    if view.phase != GamePhase.ACTIVE or view.has_moved:
        return []
    return candidate_moves(view.grid, view.player_id, view.position)


def legal_moves_for(state: GameState, player_id: str) -> list[Move]:
    """Legal moves for a player straight from a GameState."""
    player = state.get_player(player_id)
    if player is None or state.phase != GamePhase.ACTIVE or player.has_moved:
        return []
    return candidate_moves(state.grid, player_id, player.position)
