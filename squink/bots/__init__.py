"""
Bots module - Player policies.

Provides:
- PlayerPolicy: Interface for move decisions
- BasePolicy: Template policy (first legal move)
- RandomPolicy: Uniform choice among legal moves
- CornerPolicy: Deterministic bottom-right to top-left sweep
"""

from .policy import PlayerPolicy, BasePolicy, RandomPolicy
from .corner import CornerPolicy, sweep_order
from .registry import POLICIES, create_policy

__all__ = [
    "PlayerPolicy",
    "BasePolicy",
    "RandomPolicy",
    "CornerPolicy",
    "sweep_order",
    "POLICIES",
    "create_policy",
]
