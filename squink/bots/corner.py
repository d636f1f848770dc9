"""
Corner Policy - Sweeps the board from the bottom-right corner.

The sweep visits rows bottom to top, each row right to left. The
policy heads for the first unclaimed cell in that order; once no cell
is unclaimed it goes after cells painted by other players.

Every choice is deterministic so two runs on the same board produce
the same moves.
"""

from __future__ import annotations

from .policy import PlayerPolicy
from ..engine_core.action import Move
from ..engine_core.action_generator import legal_moves, MOVE_ORDER
from ..engine_core.errors import NoLegalMove
from ..engine_core.grid import Coord, Grid
from ..engine_core.state import PlayerView


def sweep_order(grid: Grid) -> list[Coord]:
    """All cells, bottom row first, right to left within a row."""
    return [
        Coord(x, y)
        for y in range(grid.height - 1, -1, -1)
        for x in range(grid.width - 1, -1, -1)
    ]


class CornerPolicy(PlayerPolicy):
    """
    Corner-sweeping policy.

    Step choice, in priority order:
    1. Smallest Manhattan distance to the target cell
    2. Cells that are still unclaimed
    3. STAY, LEFT, RIGHT, UP, DOWN (horizontal before vertical)
    """

    def decide(self, view: PlayerView) -> Move:
        moves = legal_moves(view)
        if not moves:
            raise NoLegalMove(f"No legal move for {view.player_id}")

        target = self.find_target(view)
        if target is None:
            # Every cell is ours already
            return moves[0]

        rank = {direction: i for i, direction in enumerate(MOVE_ORDER)}

        def score(move: Move):
            unclaimed = view.owner_of(move.target) is None
            return (
                move.target.distance(target),
                0 if unclaimed else 1,
                rank[move.direction],
            )

        return min(moves, key=score)

    def find_target(self, view: PlayerView) -> Coord | None:
        """First unclaimed cell in sweep order, else first cell owned by someone else."""
        foreign = None
        for coord in sweep_order(view.grid):
            owner = view.owner_of(coord)
            if owner is None:
                return coord
            if foreign is None and owner != view.player_id:
                foreign = coord
        return foreign
