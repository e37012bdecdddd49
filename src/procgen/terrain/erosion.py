"""Droplet-based hydraulic erosion."""

import math

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import ErosionSettings

logger = structlog.get_logger()

# Maximum steps a single droplet may take
MAX_DROPLET_STEPS = 100
# Droplets stop once their water falls below this
MIN_WATER = 0.01
# Floor on a droplet's carrying capacity
MIN_CAPACITY = 0.01


def _steepest_neighbor(
    heights: list[list[float]], x: int, y: int
) -> tuple[int, int, float]:
    """Lowest of the 8 neighbors strictly below (x, y), or (x, y) itself."""
    rows, cols = len(heights), len(heights[0])
    best_x, best_y = x, y
    best_height = heights[y][x]
    for dy in (-1, 0, 1):
        ny = y + dy
        if ny < 0 or ny >= rows:
            continue
        for dx in (-1, 0, 1):
            nx = x + dx
            if nx < 0 or nx >= cols:
                continue
            h = heights[ny][nx]
            if h < best_height:
                best_x, best_y, best_height = nx, ny, h
    return best_x, best_y, best_height


def simulate_droplet(
    heights: list[list[float]], start_x: int, start_y: int, settings: ErosionSettings
) -> None:
    """Run one droplet from (start_x, start_y), editing heights in place."""
    x, y = start_x, start_y
    water = 1.0
    sediment = 0.0
    velocity = 1.0

    for _ in range(MAX_DROPLET_STEPS):
        current = heights[y][x]
        best_x, best_y, best_height = _steepest_neighbor(heights, x, y)

        if best_x == x and best_y == y:
            # Pit: drop what we carry and stop
            heights[y][x] += sediment * settings.deposition_speed
            break

        diff = current - best_height
        capacity = max(
            MIN_CAPACITY, velocity * water * diff * settings.sediment_capacity
        )

        if sediment > capacity:
            deposit = (sediment - capacity) * settings.deposition_speed
            heights[y][x] += deposit
            sediment -= deposit
        else:
            pickup = min(capacity - sediment, settings.erosion_speed)
            heights[y][x] -= pickup
            sediment += pickup

        x, y = best_x, best_y
        velocity = math.sqrt(velocity * velocity + diff)
        water *= 1.0 - settings.evaporation_rate

        if water < MIN_WATER:
            break


def erode(heights: list[list[float]], settings: ErosionSettings) -> None:
    """Run ``settings.iterations`` passes of droplets over every interior cell.

    Cells are visited in row-major order; each droplet sees the edits of the
    ones before it. Elevation is not clamped and may go negative.
    """
    rows = len(heights)
    cols = len(heights[0]) if rows else 0
    for _ in range(settings.iterations):
        for y in range(1, rows - 1):
            for x in range(1, cols - 1):
                simulate_droplet(heights, x, y, settings)


def apply_erosion(
    elevation: NDArray[np.float64], settings: ErosionSettings
) -> NDArray[np.float64]:
    """Erode an elevation field.

    Args:
        elevation: 2D elevation array (not modified).
        settings: Erosion parameters.

    Returns:
        New eroded elevation array.
    """
    heights = elevation.tolist()
    erode(heights, settings)
    result = np.asarray(heights, dtype=np.float64).reshape(elevation.shape)

    logger.debug(
        "erosion_applied",
        iterations=settings.iterations,
        mean_change=float(np.mean(result - elevation)) if result.size else 0.0,
        min_elevation=float(result.min()) if result.size else 0.0,
    )
    return result
