"""Maze construction algorithms.

Each function carves passages into a fresh grid (all walls closed) using the
given random source. All except the dead-end pass yield a perfect maze.
"""

from typing import Callable

from ..rng import SeededRandom
from .config import MazeBias
from .grid import MazeCell, MazeGrid

Progress = Callable[[float, str], None]

# Progress is reported every this many cells
CELL_REPORT_INTERVAL = 100
# Progress is reported every this many edges (Kruskal) or walls (Prim)
EDGE_REPORT_INTERVAL = 50


def _no_progress(fraction: float, stage: str) -> None:
    pass


def _choose_neighbor(
    neighbors: list[MazeCell],
    current: MazeCell,
    rng: SeededRandom,
    bias: MazeBias | None,
) -> MazeCell:
    if bias is None:
        return neighbors[rng.index(len(neighbors))]

    horizontal = [n for n in neighbors if n.y == current.y]
    vertical = [n for n in neighbors if n.x == current.x]
    strength = bias.horizontal

    if strength > 0 and horizontal and rng.random() < abs(strength):
        return horizontal[rng.index(len(horizontal))]
    if strength < 0 and vertical and rng.random() < abs(strength):
        return vertical[rng.index(len(vertical))]
    return neighbors[rng.index(len(neighbors))]


def recursive_backtrack(
    grid: MazeGrid,
    rng: SeededRandom,
    bias: MazeBias | None = None,
    progress: Progress = _no_progress,
) -> None:
    """Depth-first carve from the grid center with an explicit stack."""
    total = grid.width * grid.height
    start = grid.cells[grid.height // 2][grid.width // 2]
    start.visited = True
    stack = [start]
    processed = 1

    while stack:
        current = stack[-1]
        neighbors = grid.unvisited_neighbors(current)
        if not neighbors:
            stack.pop()
            continue

        chosen = _choose_neighbor(neighbors, current, rng, bias)
        grid.remove_wall_between(current, chosen)
        chosen.visited = True
        stack.append(chosen)
        processed += 1

        if processed % CELL_REPORT_INTERVAL == 0:
            progress(processed / total, "Generating maze")


def kruskal(
    grid: MazeGrid, rng: SeededRandom, progress: Progress = _no_progress
) -> None:
    """Join randomly ordered edges whose cells lie in different sets."""
    sets: dict[tuple[int, int], set[tuple[int, int]]] = {}
    edges: list[tuple[MazeCell, MazeCell]] = []

    for row in grid.cells:
        for cell in row:
            key = (cell.x, cell.y)
            sets[key] = {key}
            if cell.x < grid.width - 1:
                edges.append((cell, grid.cells[cell.y][cell.x + 1]))
            if cell.y < grid.height - 1:
                edges.append((cell, grid.cells[cell.y + 1][cell.x]))

    rng.shuffle_in_place(edges)
    total = len(edges)

    for processed, (a, b) in enumerate(edges, start=1):
        set_a = sets[(a.x, a.y)]
        set_b = sets[(b.x, b.y)]
        if set_a is not set_b:
            grid.remove_wall_between(a, b)
            smaller, larger = (set_a, set_b) if len(set_a) <= len(set_b) else (set_b, set_a)
            larger |= smaller
            for key in smaller:
                sets[key] = larger

        if processed % EDGE_REPORT_INTERVAL == 0:
            progress(processed / total, "Generating maze (Kruskal)")


def prim(grid: MazeGrid, rng: SeededRandom, progress: Progress = _no_progress) -> None:
    """Grow from the center by carving random frontier walls."""
    total = grid.width * grid.height
    start = grid.cells[grid.height // 2][grid.width // 2]
    start.visited = True
    frontier = [(start, other) for other in grid.unvisited_neighbors(start)]
    visited = 1
    processed = 0

    while frontier:
        cell, other = frontier.pop(rng.index(len(frontier)))
        if not other.visited:
            grid.remove_wall_between(cell, other)
            other.visited = True
            visited += 1
            frontier.extend((other, n) for n in grid.unvisited_neighbors(other))

        processed += 1
        if processed % EDGE_REPORT_INTERVAL == 0:
            progress(visited / total, "Generating maze (Prim)")


def binary_tree(
    grid: MazeGrid, rng: SeededRandom, progress: Progress = _no_progress
) -> None:
    """Carve north or east from every cell, row-major."""
    total = grid.width * grid.height
    processed = 0

    for row in grid.cells:
        for cell in row:
            candidates = []
            if cell.y > 0:
                candidates.append(grid.cells[cell.y - 1][cell.x])
            if cell.x < grid.width - 1:
                candidates.append(grid.cells[cell.y][cell.x + 1])
            if candidates:
                grid.remove_wall_between(cell, candidates[rng.index(len(candidates))])

            processed += 1
            if processed % CELL_REPORT_INTERVAL == 0:
                progress(processed / total, "Generating maze (Binary Tree)")


def sidewinder(
    grid: MazeGrid, rng: SeededRandom, progress: Progress = _no_progress
) -> None:
    """Carve horizontal runs, closing each with one northward passage."""
    total = grid.width * grid.height
    processed = 0

    for y, row in enumerate(grid.cells):
        run_start = 0
        for x, cell in enumerate(row):
            # The first row is one long run; the last column always closes one
            carve_east = x < grid.width - 1 and (y == 0 or rng.random() < 0.5)
            if carve_east:
                grid.remove_wall_between(cell, row[x + 1])
            else:
                if y > 0:
                    member = row[run_start + rng.index(x - run_start + 1)]
                    grid.remove_wall_between(member, grid.cells[y - 1][member.x])
                run_start = x + 1

            processed += 1
            if processed % CELL_REPORT_INTERVAL == 0:
                progress(processed / total, "Generating maze (Sidewinder)")


def remove_dead_ends(grid: MazeGrid, rng: SeededRandom, fraction: float) -> int:
    """Open walls at a fraction of the dead ends.

    Picks ``floor(len(dead_ends) * fraction)`` times from a pool seeded with
    the current dead ends. A pick that is still a dead end gets a wall opened
    toward a random walled neighbor; that neighbor rejoins the pool if it has
    become a dead end. Picks that stopped being dead ends are consumed.

    Returns:
        Number of walls opened.
    """
    pool = grid.dead_ends()
    picks = int(len(pool) * fraction)
    opened = 0

    for _ in range(picks):
        if not pool:
            break
        cell = pool.pop(rng.index(len(pool)))
        if not grid.is_dead_end(cell):
            continue
        walled = grid.walled_neighbors(cell)
        if not walled:
            continue

        other = walled[rng.index(len(walled))]
        grid.remove_wall_between(cell, other)
        opened += 1
        if grid.is_dead_end(other):
            pool.append(other)

    return opened
