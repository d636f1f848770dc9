"""
Tests for player policies.

Tests:
- Policies only propose legal moves
- NoLegalMove when nothing is left to do
- Corner sweep order is deterministic
"""

import pytest

from .conftest import make_view
from ..bots import BasePolicy, RandomPolicy, CornerPolicy, POLICIES, create_policy, sweep_order
from ..engine_core.action_generator import legal_moves
from ..engine_core.errors import NoLegalMove
from ..engine_core.grid import Coord, Direction, Grid
from ..engine_core.state import GamePhase


class TestLegalMoves:
    """Tests for the move generator the policies share."""

    def test_corner_moves(self):
        """From (0, 0) of an empty grid: stay, right and down."""
        view = make_view(Grid.create(3, 3), Coord(0, 0))

        directions = [m.direction for m in legal_moves(view)]
        assert directions == [Direction.STAY, Direction.RIGHT, Direction.DOWN]

    def test_own_cell_excludes_stay(self):
        grid = Grid.create(3, 3)
        grid.claim(Coord(1, 1), "me")

        directions = [m.direction for m in legal_moves(make_view(grid, Coord(1, 1)))]
        assert Direction.STAY not in directions
        assert len(directions) == 4

    def test_nothing_outside_active_phase(self):
        view = make_view(Grid.create(2, 2), Coord(0, 0), phase=GamePhase.FORMING)

        assert legal_moves(view) == []


class TestRandomPolicy:
    """Tests for RandomPolicy."""

    def test_single_cell_grid(self):
        """On a 1x1 grid the only move is painting the start cell."""
        view = make_view(Grid.create(1, 1), Coord(0, 0))

        move = RandomPolicy(seed=3).decide(view)
        assert move.target == Coord(0, 0)
        assert move.direction == Direction.STAY

    def test_single_legal_move(self):
        """With exactly one legal move, that move is chosen."""
        grid = Grid.create(2, 1)
        grid.claim(Coord(0, 0), "me")
        view = make_view(grid, Coord(0, 0))

        for seed in range(10):
            assert RandomPolicy(seed=seed).decide(view).target == Coord(1, 0)

    def test_no_legal_move(self):
        grid = Grid.create(1, 1)
        grid.claim(Coord(0, 0), "me")

        with pytest.raises(NoLegalMove):
            RandomPolicy(seed=1).decide(make_view(grid, Coord(0, 0)))

    def test_always_legal(self):
        grid = Grid.create(4, 4)
        grid.claim(Coord(2, 2), "me")
        view = make_view(grid, Coord(2, 2))
        legal = legal_moves(view)

        policy = RandomPolicy(seed=42)
        for _ in range(20):
            assert policy.decide(view) in legal

    def test_seed_is_reproducible(self):
        view = make_view(Grid.create(5, 5), Coord(2, 2))

        first = [RandomPolicy(seed=7).decide(view) for _ in range(3)]
        second = [RandomPolicy(seed=7).decide(view) for _ in range(3)]
        assert first == second


class TestCornerPolicy:
    """Tests for CornerPolicy."""

    def test_sweep_order(self):
        order = sweep_order(Grid.create(2, 2))

        assert order == [Coord(1, 1), Coord(0, 1), Coord(1, 0), Coord(0, 0)]

    def test_sweeps_from_bottom_right(self):
        """Alone on a 3x3 grid it paints every cell without revisiting."""
        grid = Grid.create(3, 3)
        position = Coord(2, 2)
        policy = CornerPolicy()
        painted = []

        for _ in range(9):
            move = policy.decide(make_view(grid, position))
            grid.claim(move.target, "me")
            position = move.target
            painted.append(position.as_tuple())

        assert painted == [
            (2, 2), (1, 2), (0, 2),
            (0, 1), (1, 1), (2, 1),
            (2, 0), (1, 0), (0, 0),
        ]
        assert grid.claimed_count() == 9

    def test_heads_for_the_corner(self):
        """From the top-left it walks toward the bottom-right cell."""
        move = CornerPolicy().decide(make_view(Grid.create(3, 3), Coord(0, 0)))

        assert move.target in (Coord(1, 0), Coord(0, 1))
        assert move.direction == Direction.RIGHT

    def test_goes_after_foreign_cells(self):
        """Once nothing is unclaimed it targets other players' cells."""
        grid = Grid.create(2, 1)
        grid.claim(Coord(0, 0), "me")
        grid.claim(Coord(1, 0), "rival")

        move = CornerPolicy().decide(make_view(grid, Coord(0, 0)))
        assert move.target == Coord(1, 0)

    def test_deterministic(self):
        grid = Grid.create(4, 3)
        grid.claim(Coord(3, 2), "rival")
        view = make_view(grid, Coord(1, 1))

        assert CornerPolicy().decide(view) == CornerPolicy().decide(view)

    def test_no_legal_move(self):
        grid = Grid.create(1, 1)
        grid.claim(Coord(0, 0), "me")

        with pytest.raises(NoLegalMove):
            CornerPolicy().decide(make_view(grid, Coord(0, 0)))


class TestBasePolicy:
    """Tests for the template policy."""

    def test_first_legal_move(self):
        view = make_view(Grid.create(3, 3), Coord(1, 1))

        assert BasePolicy().decide(view) == legal_moves(view)[0]
        assert BasePolicy().get_name() == "BasePolicy"


class TestRegistry:
    """Tests for create_policy."""

    def test_all_policies_exist(self):
        assert set(POLICIES) == {"base", "random", "corner"}

    def test_create_policy(self):
        assert isinstance(create_policy("corner"), CornerPolicy)
        assert isinstance(create_policy("Random", seed=4), RandomPolicy)

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            create_policy("telepathic")
