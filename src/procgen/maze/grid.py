"""Maze cells and the wall graph."""

from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import InvalidCoordinateError


class Direction(str, Enum):
    """Cardinal directions, in the order neighbors are listed."""

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}

_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.EAST: Direction.WEST,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
}


@dataclass
class Walls:
    """Wall flags of a cell; True means the side is closed."""

    north: bool = True
    east: bool = True
    south: bool = True
    west: bool = True

    def get(self, direction: Direction) -> bool:
        return getattr(self, direction.value)

    def set(self, direction: Direction, closed: bool) -> None:
        setattr(self, direction.value, closed)

    def open_count(self) -> int:
        return sum(not closed for closed in (self.north, self.east, self.south, self.west))


@dataclass(eq=False)
class MazeCell:
    """One maze cell.

    ``distance`` and ``parent`` are search scratch space, reset on every solve.
    """

    x: int
    y: int
    walls: Walls = field(default_factory=Walls)
    visited: bool = False
    distance: int | None = None
    parent: "MazeCell | None" = field(default=None, repr=False)


@dataclass
class MazeGrid:
    """Rectangular grid of cells with symmetric walls."""

    width: int
    height: int
    cells: list[list[MazeCell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [
                [MazeCell(x=x, y=y) for x in range(self.width)] for y in range(self.height)
            ]

    def __iter__(self):
        for row in self.cells:
            yield from row

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> MazeCell:
        if not self.in_bounds(x, y):
            raise InvalidCoordinateError(
                f"Cell ({x}, {y}) outside {self.width}x{self.height} maze"
            )
        return self.cells[y][x]

    def neighbor(self, cell: MazeCell, direction: Direction) -> MazeCell | None:
        dx, dy = direction.delta
        nx, ny = cell.x + dx, cell.y + dy
        if not self.in_bounds(nx, ny):
            return None
        return self.cells[ny][nx]

    def neighbors(self, cell: MazeCell) -> list[tuple[Direction, MazeCell]]:
        """In-bounds neighbors in north, east, south, west order."""
        result = []
        for direction in Direction:
            other = self.neighbor(cell, direction)
            if other is not None:
                result.append((direction, other))
        return result

    def unvisited_neighbors(self, cell: MazeCell) -> list[MazeCell]:
        return [other for _, other in self.neighbors(cell) if not other.visited]

    def walled_neighbors(self, cell: MazeCell) -> list[MazeCell]:
        return [other for d, other in self.neighbors(cell) if cell.walls.get(d)]

    def open_neighbors(self, cell: MazeCell) -> list[MazeCell]:
        """Neighbors reachable without crossing a wall."""
        return [other for d, other in self.neighbors(cell) if not cell.walls.get(d)]

    def remove_wall_between(self, a: MazeCell, b: MazeCell) -> None:
        """Open the shared wall of two adjacent cells on both sides."""
        delta = (b.x - a.x, b.y - a.y)
        for direction in Direction:
            if direction.delta == delta:
                a.walls.set(direction, False)
                b.walls.set(direction.opposite, False)
                return
        raise ValueError(f"Cells ({a.x}, {a.y}) and ({b.x}, {b.y}) are not adjacent")

    def is_dead_end(self, cell: MazeCell) -> bool:
        return cell.walls.open_count() == 1

    def dead_ends(self) -> list[MazeCell]:
        """Cells with exactly one open side, row-major."""
        return [cell for cell in self if self.is_dead_end(cell)]

    def passage_count(self) -> int:
        """Number of internal walls that have been removed."""
        count = 0
        for cell in self:
            if cell.x < self.width - 1 and not cell.walls.east:
                count += 1
            if cell.y < self.height - 1 and not cell.walls.south:
                count += 1
        return count

    def reset_search(self) -> None:
        for cell in self:
            cell.distance = None
            cell.parent = None
