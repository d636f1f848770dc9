"""
Pytest fixtures for squink tests.
"""

import pytest

from ..engine_core.engine import GameEngine
from ..engine_core.grid import Coord, Grid
from ..engine_core.state import GameConfig, GamePhase, GameState, PlayerView


def make_view(
    grid: Grid,
    position: Coord,
    player_id: str = "me",
    phase: GamePhase = GamePhase.ACTIVE,
    score: int = 0,
) -> PlayerView:
    """A PlayerView built by hand, no engine involved."""
    return PlayerView(
        player_id=player_id,
        position=position,
        score=score,
        phase=phase,
        grid=grid,
        rounds_remaining=5,
        rounds_played=0,
    )


@pytest.fixture
def small_config() -> GameConfig:
    """3x3 board, buy-in 10, no forming rounds, 3 rounds."""
    return GameConfig(dimensions=(3, 3), buy_in=10, forming_rounds=0, rounds=3)


@pytest.fixture
def forming_state(small_config: GameConfig) -> GameState:
    """Fresh state in the Forming phase."""
    return GameState.create("test_game", small_config)


@pytest.fixture
def engine(small_config: GameConfig) -> GameEngine:
    """Engine with no players yet."""
    return GameEngine(small_config, game_id="test_game")


@pytest.fixture
def active_engine(engine: GameEngine) -> GameEngine:
    """
    Engine with alice at (0, 0) and bob at (1, 0), started.
    """
    engine.register_player("alice", payment=10).unwrap()
    engine.register_player("bob", payment=10).unwrap()
    engine.start_game().unwrap()
    return engine
