"""
Policy registry - Built-in policies by name.

Used by the CLI, the API and match setups:
    create_policy("corner")
    create_policy("random", seed=7)
"""

from __future__ import annotations
from typing import Callable

from .policy import PlayerPolicy, BasePolicy, RandomPolicy
from .corner import CornerPolicy


POLICIES: dict[str, Callable[[int | None], PlayerPolicy]] = {
    "base": lambda seed: BasePolicy(),
    "random": lambda seed: RandomPolicy(seed=seed),
    "corner": lambda seed: CornerPolicy(),
}


def create_policy(name: str, seed: int | None = None) -> PlayerPolicy:
    """Instantiate a built-in policy. Raises ValueError for unknown names."""
    factory = POLICIES.get(name.lower())
    if factory is None:
        raise ValueError(
            f"Unknown policy {name!r}, choose from: {', '.join(sorted(POLICIES))}"
        )
    return factory(seed)
