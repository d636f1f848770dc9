"""
Grid - The shared painting board.

A fixed-size rectangle of cells. Each cell is either unclaimed or owned
by exactly one player. Cells are stored sparsely by flat index
(x + y * width), so an empty grid costs nothing.

Coordinates: x grows to the right, y grows downward.
(0, 0) is the top-left cell, (width - 1, height - 1) the bottom-right.

The grid does not check whether a claim is legal - that is the reducer's job.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidDimensions, OutOfBounds


# Upper bound per side, keeps a single board's storage bounded.
MAX_EXTENT = 256


@dataclass(frozen=True)
class Coord:
    """A cell address on the grid."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Coord:
        return Coord(self.x + dx, self.y + dy)

    def distance(self, other: Coord) -> int:
        """Manhattan distance."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)


class Direction(Enum):
    """Moves relative to a player's position. STAY paints the current cell."""
    STAY = "stay"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    def apply(self, coord: Coord) -> Coord:
        dx, dy = self.delta
        return coord.offset(dx, dy)


_DELTAS = {
    Direction.STAY: (0, 0),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
}


@dataclass(frozen=True)
class Cell:
    """Ownership record for a claimed cell."""
    owner: str
    claimed_at: int = 0  # Round in which the current owner painted it


@dataclass
class Grid:
    """
    The board of cells.

    Mutated only through claim(). The reducer copies the grid before
    claiming so that published GameState snapshots never change.
    """
    width: int
    height: int
    cells: dict[int, Cell] = field(default_factory=dict)

    @classmethod
    def create(cls, width: int, height: int) -> Grid:
        """Create an empty grid, all cells unclaimed."""
        for extent in (width, height):
            if not isinstance(extent, int) or isinstance(extent, bool):
                raise InvalidDimensions(f"Grid extents must be integers, got {extent!r}")
            if extent < 1 or extent > MAX_EXTENT:
                raise InvalidDimensions(
                    f"Grid extents must be between 1 and {MAX_EXTENT}, got {width}x{height}"
                )
        return cls(width=width, height=height)

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, coord: Coord) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def index(self, coord: Coord) -> int:
        """Flat index of a coordinate."""
        if not self.in_bounds(coord):
            raise OutOfBounds(
                f"({coord.x}, {coord.y}) is outside the {self.width}x{self.height} grid"
            )
        return coord.x + coord.y * self.width

    def coord(self, index: int) -> Coord:
        """Coordinate of a flat index."""
        if not 0 <= index < self.size:
            raise OutOfBounds(f"Index {index} is outside the grid")
        return Coord(index % self.width, index // self.width)

    def cell_at(self, coord: Coord) -> str | None:
        """Owner of the cell, None if unclaimed."""
        entry = self.cells.get(self.index(coord))
        return entry.owner if entry else None

    def entry_at(self, coord: Coord) -> Cell | None:
        return self.cells.get(self.index(coord))

    def claim(self, coord: Coord, player_id: str, round_no: int = 0) -> bool:
        """
        Paint a cell for a player.

        Returns True if the owner changed. Repainting a cell the player already owns keeps
        the earlier claimed_at round.
        """
        idx = self.index(coord)
        previous = self.cells.get(idx)
        if previous is not None and previous.owner == player_id:
            return False
        self.cells[idx] = Cell(owner=player_id, claimed_at=round_no)
        return True

    def neighbors(self, coord: Coord) -> list[Coord]:
        """In-bounds 4-neighborhood of a coordinate."""
        result = []
        for direction in (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN):
            candidate = direction.apply(coord)
            if self.in_bounds(candidate):
                result.append(candidate)
        return result

    def claimed_count(self) -> int:
        return len(self.cells)

    def counts_by_owner(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for entry in self.cells.values():
            counts[entry.owner] = counts.get(entry.owner, 0) + 1
        return counts

    def iter_coords(self):
        """All coordinates in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Coord(x, y)

    def snapshot(self) -> list[str | None]:
        """Flat list of owners, indexed by x + y * width."""
        return [
            self.cells[idx].owner if idx in self.cells else None
            for idx in range(self.size)
        ]

    def copy(self) -> Grid:
        return Grid(width=self.width, height=self.height, cells=dict(self.cells))
