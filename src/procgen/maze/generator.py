"""Maze generation, analysis and rendering."""

import json
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from ..helpers import validate_positive, validate_range
from ..rng import SeededRandom
from . import algorithms
from .config import MazeAlgorithm, MazeConfig
from .grid import MazeCell, MazeGrid, Walls

if TYPE_CHECKING:
    from ..engine import GenerationContext

logger = structlog.get_logger()


@dataclass
class MazeStats:
    """Structural summary of a maze."""

    total_cells: int
    dead_ends: int
    junctions: int
    corridors: int
    connectivity: float


def validate_config(config: MazeConfig) -> None:
    """Raise ConfigError for configurations that cannot produce a maze."""
    validate_positive(config.width, "Maze width")
    validate_positive(config.height, "Maze height")
    if config.dead_end_removal is not None:
        validate_range(config.dead_end_removal, 0, 1, "dead_end_removal")
    if config.bias is not None:
        validate_range(config.bias.horizontal, -1, 1, "bias.horizontal")


class MazeGenerator:
    """Builds and analyses mazes for a MazeConfig.

    Every ``generate`` call starts from a closed grid and a PRNG seeded from
    ``config.seed``, so repeated calls return identical mazes.

    Usage:
        generator = MazeGenerator(MazeConfig(width=20, height=10, algorithm="prim"))
        generator.generate()
        path = generator.solve()
        print(generator.to_ascii())
    """

    def __init__(self, config: MazeConfig):
        validate_config(config)
        self.config = config
        self.grid = MazeGrid(config.width, config.height)
        self._rng = SeededRandom(config.seed)

    @property
    def cells(self) -> list[list[MazeCell]]:
        return self.grid.cells

    def generate(self, context: "GenerationContext | None" = None) -> list[list[MazeCell]]:
        """Build a maze with the configured algorithm.

        Args:
            context: Optional generation context receiving progress updates.

        Returns:
            Grid of cells indexed ``[y][x]``.
        """
        config = self.config
        self.grid = MazeGrid(config.width, config.height)
        self._rng = SeededRandom(config.seed)
        grid, rng = self.grid, self._rng

        def progress(fraction: float, stage: str) -> None:
            if context is not None:
                context.report_progress(fraction, stage)

        match MazeAlgorithm(config.algorithm):
            case MazeAlgorithm.RECURSIVE_BACKTRACK:
                algorithms.recursive_backtrack(grid, rng, config.bias, progress)
            case MazeAlgorithm.KRUSKAL:
                algorithms.kruskal(grid, rng, progress)
            case MazeAlgorithm.PRIM:
                algorithms.prim(grid, rng, progress)
            case MazeAlgorithm.BINARY_TREE:
                algorithms.binary_tree(grid, rng, progress)
            case MazeAlgorithm.SIDEWINDER:
                algorithms.sidewinder(grid, rng, progress)

        opened = 0
        if config.dead_end_removal:
            opened = algorithms.remove_dead_ends(grid, rng, config.dead_end_removal)

        logger.info(
            "maze_generated",
            algorithm=MazeAlgorithm(config.algorithm).value,
            width=config.width,
            height=config.height,
            seed=config.seed,
            passages=grid.passage_count(),
            dead_ends_opened=opened,
        )
        return grid.cells

    # Analysis

    def solve(
        self,
        start_x: int = 0,
        start_y: int = 0,
        end_x: int | None = None,
        end_y: int | None = None,
    ) -> list[MazeCell]:
        """Shortest open path between two cells.

        Args:
            start_x: Start column.
            start_y: Start row.
            end_x: Target column; defaults to the last column.
            end_y: Target row; defaults to the last row.

        Returns:
            Cells from start to target inclusive, or an empty list when the
            target cannot be reached.

        Raises:
            InvalidCoordinateError: If either endpoint is outside the grid.
        """
        grid = self.grid
        target_x = grid.width - 1 if end_x is None else end_x
        target_y = grid.height - 1 if end_y is None else end_y
        start = grid.cell(start_x, start_y)
        target = grid.cell(target_x, target_y)

        grid.reset_search()
        start.distance = 0
        queue: deque[MazeCell] = deque([start])

        while queue:
            current = queue.popleft()
            if current is target:
                break
            for other in grid.open_neighbors(current):
                if other.distance is None:
                    other.distance = current.distance + 1
                    other.parent = current
                    queue.append(other)

        if target.distance is None:
            logger.debug(
                "maze_unsolvable",
                start=(start_x, start_y),
                end=(target_x, target_y),
            )
            return []

        path: list[MazeCell] = []
        node: MazeCell | None = target
        while node is not None:
            path.append(node)
            node = node.parent
        path.reverse()
        return path

    def dead_ends(self) -> list[MazeCell]:
        return self.grid.dead_ends()

    def passage_count(self) -> int:
        return self.grid.passage_count()

    def connected_components(self) -> int:
        """Number of regions mutually reachable through open walls."""
        seen: set[tuple[int, int]] = set()
        components = 0
        for cell in self.grid:
            if (cell.x, cell.y) in seen:
                continue
            components += 1
            seen.add((cell.x, cell.y))
            queue = deque([cell])
            while queue:
                current = queue.popleft()
                for other in self.grid.open_neighbors(current):
                    if (other.x, other.y) not in seen:
                        seen.add((other.x, other.y))
                        queue.append(other)
        return components

    def stats(self) -> MazeStats:
        dead_ends = junctions = corridors = 0
        for cell in self.grid:
            open_sides = cell.walls.open_count()
            if open_sides == 1:
                dead_ends += 1
            elif open_sides == 2:
                corridors += 1
            elif open_sides > 2:
                junctions += 1

        total = self.grid.width * self.grid.height
        return MazeStats(
            total_cells=total,
            dead_ends=dead_ends,
            junctions=junctions,
            corridors=corridors,
            connectivity=(corridors + junctions * 2) / total,
        )

    # Rendering and export

    def to_ascii(self) -> str:
        """Render the maze as ``+---+`` ASCII art, one line per text row."""
        lines = ["+" + "---+" * self.grid.width]
        for row in self.grid.cells:
            lines.append("|" + "".join("   " + ("|" if c.walls.east else " ") for c in row))
            lines.append("+" + "".join(("---" if c.walls.south else "   ") + "+" for c in row))
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready projection without search scratch fields."""
        return {
            "config": self.config.model_dump(mode="json"),
            "maze": [
                [
                    {
                        "x": cell.x,
                        "y": cell.y,
                        "walls": {
                            "north": cell.walls.north,
                            "east": cell.walls.east,
                            "south": cell.walls.south,
                            "west": cell.walls.west,
                        },
                    }
                    for cell in row
                ]
                for row in self.grid.cells
            ],
        }

    def export_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str) -> "MazeGenerator":
        """Rebuild a generator and its grid from ``export_json`` output."""
        parsed = json.loads(data)
        generator = cls(MazeConfig.model_validate(parsed["config"]))
        cells = [
            [
                MazeCell(x=entry["x"], y=entry["y"], walls=Walls(**entry["walls"]), visited=True)
                for entry in row
            ]
            for row in parsed["maze"]
        ]
        generator.grid = MazeGrid(generator.config.width, generator.config.height, cells)
        return generator
