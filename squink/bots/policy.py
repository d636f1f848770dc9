"""
Player Policy - Interface for move decision-making.

A PlayerPolicy takes a PlayerView and returns a Move.
Policies never touch the engine: they only propose a move,
which the engine validates and applies.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import random

from ..engine_core.action import Move
from ..engine_core.action_generator import legal_moves
from ..engine_core.errors import NoLegalMove
from ..engine_core.state import PlayerView


class PlayerPolicy(ABC):
    """
    Abstract base class for player policies.

    A policy defines how a player picks its next move.
    Implementations range from a fixed template to
    systematic sweeps of the board.
    """

    @abstractmethod
    def decide(self, view: PlayerView) -> Move:
        """
        Pick the next move.

        Args:
            view: What the player can observe of the game

        Returns:
            The proposed Move

        Raises:
            NoLegalMove: if no move the engine would accept exists
        """
        pass

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class BasePolicy(PlayerPolicy):
    """
    Template policy - always takes the first legal move.

    Legal moves come in the fixed order STAY, LEFT, RIGHT, UP, DOWN,
    so the result only depends on the view. Copy this class to start
    a new policy.
    """

    def decide(self, view: PlayerView) -> Move:
        moves = legal_moves(view)
        if not moves:
            raise NoLegalMove(f"No legal move for {view.player_id}")
        return moves[0]


class RandomPolicy(PlayerPolicy):
    """
    Random policy - selects among the legal moves uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def decide(self, view: PlayerView) -> Move:
        moves = legal_moves(view)
        if not moves:
            raise NoLegalMove(f"No legal move for {view.player_id}")
        return self.rng.choice(moves)
