"""Shared numeric and grid helpers for generators."""

import math
from collections import deque
from enum import Enum
from typing import Any, Callable, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .exceptions import ConfigError


class DistanceMetric(str, Enum):
    """Distance metrics for point comparisons."""

    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"
    MINKOWSKI = "minkowski"


class InterpolationType(str, Enum):
    """Easing curves for interpolate()."""

    LINEAR = "linear"
    COSINE = "cosine"
    CUBIC = "cubic"
    QUINTIC = "quintic"


# Exponent used for the Minkowski metric
MINKOWSKI_P = 3


def distance(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    metric: DistanceMetric = DistanceMetric.EUCLIDEAN,
) -> float:
    """Distance between two 2D points."""
    return _distance((x2 - x1, y2 - y1), metric)


def distance_3d(
    x1: float,
    y1: float,
    z1: float,
    x2: float,
    y2: float,
    z2: float,
    metric: DistanceMetric = DistanceMetric.EUCLIDEAN,
) -> float:
    """Distance between two 3D points."""
    return _distance((x2 - x1, y2 - y1, z2 - z1), metric)


def _distance(deltas: Sequence[float], metric: DistanceMetric) -> float:
    abs_deltas = [abs(d) for d in deltas]
    match DistanceMetric(metric):
        case DistanceMetric.EUCLIDEAN:
            return math.sqrt(sum(d * d for d in abs_deltas))
        case DistanceMetric.MANHATTAN:
            return sum(abs_deltas)
        case DistanceMetric.CHEBYSHEV:
            return max(abs_deltas)
        case DistanceMetric.MINKOWSKI:
            return sum(d**MINKOWSKI_P for d in abs_deltas) ** (1 / MINKOWSKI_P)


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp value into [min_value, max_value]."""
    return max(min_value, min(max_value, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation with t clamped to [0, 1]."""
    return a + (b - a) * clamp(t, 0.0, 1.0)


def smoothstep(edge0: float, edge1: float, x: float) -> float:
    """Scalar Hermite smoothstep between two edges."""
    t = clamp((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def step(edge: float, x: float) -> float:
    """0 below the edge, 1 at or above it."""
    return 0.0 if x < edge else 1.0


def map_range(
    value: float, in_min: float, in_max: float, out_min: float, out_max: float
) -> float:
    """Linearly remap value from one range to another (unclamped)."""
    return out_min + (value - in_min) * (out_max - out_min) / (in_max - in_min)


def interpolate(
    a: float,
    b: float,
    t: float,
    kind: InterpolationType = InterpolationType.LINEAR,
) -> float:
    """Interpolate between a and b with the given easing curve.

    Args:
        a: Start value.
        b: End value.
        t: Position in [0, 1] (clamped).
        kind: Easing curve.

    Returns:
        Interpolated value.
    """
    t = clamp(t, 0.0, 1.0)
    match InterpolationType(kind):
        case InterpolationType.LINEAR:
            eased = t
        case InterpolationType.COSINE:
            eased = (1 - math.cos(t * math.pi)) / 2
        case InterpolationType.CUBIC:
            eased = t * t * (3 - 2 * t)
        case InterpolationType.QUINTIC:
            eased = t * t * t * (t * (t * 6 - 15) + 10)
    return a + (b - a) * eased


def bilinear_interpolate(
    v00: float, v10: float, v01: float, v11: float, tx: float, ty: float
) -> float:
    """Bilinear interpolation between four corner values."""
    top = interpolate(v00, v10, tx)
    bottom = interpolate(v01, v11, tx)
    return interpolate(top, bottom, ty)


def smooth_value(
    noise_map: NDArray[np.float64], x: int, y: int, radius: int = 1
) -> float:
    """Mean of the in-bounds window of ``radius`` around (x, y)."""
    if noise_map.size == 0:
        return 0.0
    height, width = noise_map.shape
    window = noise_map[
        max(0, y - radius) : min(height, y + radius + 1),
        max(0, x - radius) : min(width, x + radius + 1),
    ]
    return float(window.mean()) if window.size else 0.0


def normalize_map(noise_map: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rescale a 2D map to [0, 1]; constant maps are returned unchanged."""
    if noise_map.size == 0:
        return noise_map
    low = float(np.min(noise_map))
    high = float(np.max(noise_map))
    if high == low:
        return noise_map
    return (noise_map - low) / (high - low)


def apply_cellular_automata(
    grid: NDArray[np.bool_],
    iterations: int = 5,
    birth_limit: int = 4,
    death_limit: int = 3,
) -> NDArray[np.bool_]:
    """Run a birth/death cellular automaton over a boolean grid.

    Out-of-bounds neighbors count as alive, which closes cave edges.

    Args:
        grid: Boolean grid where True = alive (wall).
        iterations: Number of simulation steps.
        birth_limit: Dead cells with more than this many neighbors come alive.
        death_limit: Alive cells with fewer than this many neighbors die.

    Returns:
        New grid after the final step.
    """
    kernel = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int32)
    current = np.asarray(grid, dtype=bool).copy()

    for _ in range(iterations):
        neighbors = ndimage.convolve(
            current.astype(np.int32), kernel, mode="constant", cval=1
        )
        current = np.where(current, neighbors >= death_limit, neighbors > birth_limit)

    return current


def flood_fill(
    grid: list[list[Any]],
    start_x: int,
    start_y: int,
    new_value: Any,
    should_fill: Callable[[int, int, Any], bool] | None = None,
) -> list[tuple[int, int]]:
    """4-connected flood fill that overwrites matching cells in place.

    Args:
        grid: Row-major grid indexed ``grid[y][x]``.
        start_x: Seed column.
        start_y: Seed row.
        new_value: Value written into each filled cell.
        should_fill: Predicate (x, y, value); defaults to cells equal to the
            seed's original value.

    Returns:
        List of (x, y) cells filled, in visit order.
    """
    if not grid or not grid[0]:
        return []
    height, width = len(grid), len(grid[0])
    if not (0 <= start_x < width and 0 <= start_y < height):
        return []

    if should_fill is None:
        original = grid[start_y][start_x]

        def should_fill(x: int, y: int, value: Any) -> bool:
            return value == original

    filled: list[tuple[int, int]] = []
    visited: set[tuple[int, int]] = set()
    queue: deque[tuple[int, int]] = deque([(start_x, start_y)])

    while queue:
        x, y = queue.popleft()
        if (x, y) in visited:
            continue
        visited.add((x, y))
        if not (0 <= x < width and 0 <= y < height):
            continue
        if not should_fill(x, y, grid[y][x]):
            continue

        grid[y][x] = new_value
        filled.append((x, y))
        queue.extend([(x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)])

    return filled


def voronoi_labels(
    width: int,
    height: int,
    sites: Sequence[tuple[float, float, str]],
    metric: DistanceMetric = DistanceMetric.EUCLIDEAN,
) -> list[list[str]]:
    """Label each cell with the id of its nearest site.

    Args:
        width: Grid width.
        height: Grid height.
        sites: (x, y, id) triples; ties go to the earlier site.
        metric: Distance metric.

    Returns:
        Grid of site ids indexed ``[y][x]``.
    """
    if not sites:
        raise ConfigError("voronoi_labels requires at least one site")
    labels: list[list[str]] = []
    for y in range(height):
        row = []
        for x in range(width):
            best_id = sites[0][2]
            best = math.inf
            for sx, sy, site_id in sites:
                d = distance(x, y, sx, sy, metric)
                if d < best:
                    best = d
                    best_id = site_id
            row.append(best_id)
        labels.append(row)
    return labels


def grid_neighbors(
    x: int, y: int, width: int, height: int, diagonal: bool = False
) -> list[tuple[int, int]]:
    """In-bounds neighbor coordinates of (x, y)."""
    result = []
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            if not diagonal and dx != 0 and dy != 0:
                continue
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height:
                result.append((nx, ny))
    return result


def validate_range(value: float, min_value: float, max_value: float, name: str = "Value") -> None:
    """Raise ConfigError unless min_value <= value <= max_value."""
    if not (min_value <= value <= max_value):
        raise ConfigError(f"{name} must be between {min_value} and {max_value}, got {value}")


def validate_positive(value: float, name: str = "Value") -> None:
    """Raise ConfigError unless value > 0."""
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str = "Value") -> None:
    """Raise ConfigError unless value >= 0."""
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {value}")


def validate_integer(value: float, name: str = "Value") -> None:
    """Raise ConfigError unless value is integral."""
    if int(value) != value:
        raise ConfigError(f"{name} must be an integer, got {value}")
