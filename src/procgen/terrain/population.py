"""Vegetation and structure placement."""

import math
from typing import Callable

import numpy as np
from numpy.typing import NDArray

from ..rng import SeededRandom
from .config import (
    BiomeDefinition,
    StructureCondition,
    StructureRule,
    VegetationRule,
)
from .types import StructureInstance, Terrain, TerrainPoint, VegetationInstance

# Elevation tolerance for the "equals" structure operator
ELEVATION_EQUALS_TOLERANCE = 0.1
# Sub-cell jitter span for vegetation positions
POSITION_JITTER = 0.8


def vegetation_conditions_met(
    point: TerrainPoint, rule: VegetationRule, slope: float
) -> bool:
    for condition in rule.conditions:
        match condition.property:
            case "elevation":
                value = point.elevation
            case "temperature":
                value = point.temperature
            case "humidity":
                value = point.humidity
            case "slope":
                value = slope
        if value < condition.min or value > condition.max:
            return False
    return True


def _structure_condition_met(point: TerrainPoint, condition: StructureCondition) -> bool:
    match condition.property:
        case "elevation":
            target = float(condition.value)
            if condition.operator == "greater":
                return point.elevation > target
            if condition.operator == "less":
                return point.elevation < target
            if condition.operator == "equals":
                return abs(point.elevation - target) <= ELEVATION_EQUALS_TOLERANCE
            return True
        case "biome":
            target = str(condition.value)
            if condition.operator == "equals":
                return point.biome == target
            if condition.operator == "contains":
                return target in point.biome
            return True
        case "proximity":
            # Proximity to other features is not modelled; always satisfied
            return True
    return True


def structure_conditions_met(point: TerrainPoint, rule: StructureRule) -> bool:
    return all(_structure_condition_met(point, c) for c in rule.conditions)


def has_clearance(terrain: Terrain, x: int, y: int, min_distance: float) -> bool:
    """True if no structure lies strictly within min_distance of (x, y)."""
    radius = math.ceil(min_distance)
    height, width = len(terrain), len(terrain[0])
    for dy in range(-radius, radius + 1):
        cy = y + dy
        if cy < 0 or cy >= height:
            continue
        for dx in range(-radius, radius + 1):
            cx = x + dx
            if cx < 0 or cx >= width:
                continue
            if terrain[cy][cx].structures and math.sqrt(dx * dx + dy * dy) < min_distance:
                return False
    return True


def place_vegetation(
    point: TerrainPoint, biome: BiomeDefinition, slope: float, rng: SeededRandom
) -> list[VegetationInstance]:
    """Roll every vegetation rule of the biome for one cell."""
    placed: list[VegetationInstance] = []
    for rule in biome.vegetation:
        if not vegetation_conditions_met(point, rule, slope):
            continue
        if rng.random() > rule.probability:
            continue

        count = math.floor(rule.density * (0.5 + rng.random() * 0.5))
        for _ in range(count):
            placed.append(
                VegetationInstance(
                    type=rule.type,
                    x=point.x + (rng.random() - 0.5) * POSITION_JITTER,
                    y=point.y + (rng.random() - 0.5) * POSITION_JITTER,
                    size=rule.min_size + rng.random() * (rule.max_size - rule.min_size),
                    health=0.8 + rng.random() * 0.2,
                    age=rng.random() * 100,
                )
            )
    return placed


def place_structures(
    point: TerrainPoint,
    biome: BiomeDefinition,
    terrain: Terrain,
    rng: SeededRandom,
) -> list[StructureInstance]:
    """Roll every structure rule of the biome for one cell.

    Clearance is checked against structures already on the map; structures
    placed for this cell in the same call do not block each other.
    """
    placed: list[StructureInstance] = []
    for rule in biome.structures:
        if not structure_conditions_met(point, rule):
            continue
        if rng.random() > rule.probability:
            continue
        if not has_clearance(terrain, point.x, point.y, rule.min_distance):
            continue

        placed.append(
            StructureInstance(
                type=rule.type,
                x=point.x,
                y=point.y,
                z=point.elevation,
                width=rule.size.width,
                height=rule.size.height,
                depth=rule.size.depth,
                rotation=rng.random() * 360,
                metadata={"biome": biome.id},
            )
        )
    return placed


def populate(
    terrain: Terrain,
    biomes: dict[str, BiomeDefinition],
    slope: NDArray[np.float64],
    rng: SeededRandom,
    on_row: Callable[[int], None] | None = None,
) -> None:
    """Place vegetation and structures on every cell in row-major order.

    Args:
        terrain: Grid indexed ``[y][x]``; points are updated in place.
        biomes: Biome definitions by id.
        slope: Slope field matching the grid.
        rng: Random source; draw order is fixed by cell and rule order.
        on_row: Called with the row index after each row is populated.
    """
    for y, row in enumerate(terrain):
        for point in row:
            biome = biomes.get(point.biome)
            if biome is None:
                continue
            point.vegetation = place_vegetation(point, biome, float(slope[y, point.x]), rng)
            point.structures = place_structures(point, biome, terrain, rng)
        if on_row is not None:
            on_row(y)
