"""
Game State - The canonical, snapshot-friendly game container.

Design principles:
- Copy-on-write: the reducer returns a new GameState for every change,
  so a published state is never mutated afterwards
- Serializable: plain dataclasses, the API turns them into pydantic models
- Observable: players get a read-only PlayerView for decision making
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable
from collections.abc import Sequence
from itertools import islice
import os

from .grid import Grid, Coord, MAX_EXTENT
from .errors import InvalidConfig, InvalidDimensions


# Maximum number of players allowed to register for a single game.
PLAYER_LIMIT = 80

# Allowed display name length (characters).
NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 16


class GamePhase(Enum):
    """Lifecycle phases. Transitions only ever move forward."""
    FORMING = "forming"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameConfig:
    """
    Parameters fixed at game creation.

    - dimensions: (width, height) of the grid
    - buy_in: minimum payment to register
    - forming_rounds: ticks that must pass before the game can start
    - rounds: number of rounds played once the game is active
    - opener: player allowed to start the game, anyone when None
    """
    dimensions: tuple[int, int]
    buy_in: int = 0
    forming_rounds: int = 0
    rounds: int = 1
    opener: str | None = None

    def __post_init__(self):
        if len(self.dimensions) != 2:
            raise InvalidDimensions(f"Dimensions must be (width, height), got {self.dimensions!r}")
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        width, height = self.dimensions
        for extent in (width, height):
            if not isinstance(extent, int) or extent < 1 or extent > MAX_EXTENT:
                raise InvalidDimensions(
                    f"Grid extents must be between 1 and {MAX_EXTENT}, got {width}x{height}"
                )
        if self.buy_in < 0:
            raise InvalidConfig(f"buy_in must not be negative, got {self.buy_in}")
        if self.forming_rounds < 0:
            raise InvalidConfig(f"forming_rounds must not be negative, got {self.forming_rounds}")
        if self.rounds < 1:
            raise InvalidConfig(f"rounds must be at least 1, got {self.rounds}")

    @property
    def width(self) -> int:
        return self.dimensions[0]

    @property
    def height(self) -> int:
        return self.dimensions[1]

    @property
    def max_players(self) -> int:
        return min(PLAYER_LIMIT, self.width * self.height)

    @classmethod
    def from_env(cls, prefix: str = "SQUINK_") -> GameConfig:
        """Build a config from SQUINK_WIDTH, SQUINK_HEIGHT, SQUINK_BUY_IN, ... and SQUINK_OPENER."""
        try:
            return cls(
                dimensions=(
                    int(os.getenv(f"{prefix}WIDTH", "8")),
                    int(os.getenv(f"{prefix}HEIGHT", "8")),
                ),
                buy_in=int(os.getenv(f"{prefix}BUY_IN", "0")),
                forming_rounds=int(os.getenv(f"{prefix}FORMING_ROUNDS", "0")),
                rounds=int(os.getenv(f"{prefix}ROUNDS", "10")),
                opener=os.getenv(f"{prefix}OPENER") or None,
            )
        except ValueError as e:
            raise InvalidConfig(f"Invalid game configuration in environment: {e}")


@dataclass(frozen=True)
class PlayerState:
    """A registered player."""
    player_id: str
    name: str
    position: Coord
    score: int = 0
    paid: int = 0
    has_moved: bool = False
    turns_taken: int = 0

    def with_changes(self, **kwargs) -> PlayerState:
        return replace(self, **kwargs)


@dataclass(frozen=True)
class PlayerView:
    """
    What a player may observe when deciding its move.

    Built from a GameState snapshot. Holds its own grid copy so
    a policy can never reach engine state through it.
    """
    player_id: str
    position: Coord
    score: int
    phase: GamePhase
    grid: Grid
    rounds_remaining: int
    rounds_played: int
    has_moved: bool = False
    others: dict[str, tuple[Coord, int]] = field(default_factory=dict)  # id -> (position, score)

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self.grid.width, self.grid.height)

    def owner_of(self, coord: Coord) -> str | None:
        return self.grid.cell_at(coord)


class History(Sequence):
    """
    Append-only log shared by successive snapshots.

    Every snapshot sees the prefix that existed when it was made. Extending
    the newest snapshot appends in place; extending an older one copies its
    prefix first, so branches never see each other's entries.
    """

    def __init__(self, items: Iterable[Any] = ()):
        self._items = list(items)
        self._length = len(self._items)

    def extend(self, new_items: Iterable[Any]) -> History:
        if len(self._items) == self._length:
            items = self._items
        else:
            items = self._items[:self._length]
        items.extend(new_items)
        history = History.__new__(History)
        history._items = items
        history._length = len(items)
        return history

    def __len__(self) -> int:
        return self._length

    def __iter__(self):
        return islice(self._items, self._length)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._items[:self._length][index]
        return self._items[range(self._length)[index]]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"History({list(self)!r})"


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    All state changes go through the reducer, which hands back a
    fresh instance. Players are kept in registration order, which is
    also the order used for starting positions and tie reporting.
    """
    game_id: str
    config: GameConfig
    grid: Grid

    phase: GamePhase = GamePhase.FORMING
    forming_rounds_remaining: int = 0
    rounds_remaining: int = 0
    rounds_played: int = 0

    players: list[PlayerState] = field(default_factory=list)

    # History (GameEvent and Action logs, for replay and observers)
    events: History = field(default_factory=History)
    action_history: History = field(default_factory=History)

    @classmethod
    def create(cls, game_id: str, config: GameConfig) -> GameState:
        """Fresh game in the Forming phase."""
        return cls(
            game_id=game_id,
            config=config,
            grid=Grid.create(config.width, config.height),
            phase=GamePhase.FORMING,
            forming_rounds_remaining=config.forming_rounds,
            rounds_remaining=config.rounds,
        )

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.config.dimensions

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def pot(self) -> int:
        return sum(p.paid for p in self.players)

    def get_player(self, player_id: str) -> PlayerState | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def all_moved(self) -> bool:
        return bool(self.players) and all(p.has_moved for p in self.players)

    def scores(self) -> dict[str, int]:
        return {p.player_id: p.score for p in self.players}

    def leaderboard(self) -> list[PlayerState]:
        """Players by score, highest first; registration order breaks ties."""
        order = {p.player_id: i for i, p in enumerate(self.players)}
        return sorted(self.players, key=lambda p: (-p.score, order[p.player_id]))

    def winners(self) -> list[PlayerState]:
        """
        All players sharing the top score.

        Ties are reported, never broken. Empty when nobody has registered.
        """
        if not self.players:
            return []
        best = max(p.score for p in self.players)
        return [p for p in self.players if p.score == best]

    def view_for(self, player_id: str) -> PlayerView | None:
        """Read-only observation for one player, None if not registered."""
        player = self.get_player(player_id)
        if player is None:
            return None
        return PlayerView(
            player_id=player.player_id,
            position=player.position,
            score=player.score,
            phase=self.phase,
            grid=self.grid.copy(),
            rounds_remaining=self.rounds_remaining,
            rounds_played=self.rounds_played,
            has_moved=player.has_moved,
            others={
                p.player_id: (p.position, p.score)
                for p in self.players
                if p.player_id != player_id
            },
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain summary, the shape returned by query_state()."""
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "dimensions": self.dimensions,
            "buy_in": self.config.buy_in,
            "pot": self.pot,
            "rounds_remaining": self.rounds_remaining,
            "rounds_played": self.rounds_played,
            "forming_rounds_remaining": self.forming_rounds_remaining,
            "grid": self.grid.snapshot(),
            "players": [
                {
                    "id": p.player_id,
                    "name": p.name,
                    "position": p.position.as_tuple(),
                    "score": p.score,
                    "has_moved": p.has_moved,
                }
                for p in self.players
            ],
        }
