"""Biome classification over (elevation, temperature, humidity)."""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .config import (
    BiomeDefinition,
    Color,
    Range,
    VegetationCondition,
    VegetationRule,
)

# Score for a value inside a biome interval
INSIDE_SCORE = 100.0
# Penalty per unit of distance outside an interval
DISTANCE_PENALTY = 10.0


def _axis_score(interval: Range, value):
    inside = (value >= interval.min) & (value <= interval.max)
    dist = np.minimum(np.abs(value - interval.min), np.abs(value - interval.max))
    return np.where(inside, INSIDE_SCORE, -dist * DISTANCE_PENALTY)


def score_biome(
    biome: BiomeDefinition, elevation: float, temperature: float, humidity: float
) -> float:
    """Sum of per-axis scores for a single point."""
    score = 0.0
    for interval, value in (
        (biome.elevation, elevation),
        (biome.temperature, temperature),
        (biome.humidity, humidity),
    ):
        if interval.contains(value):
            score += INSIDE_SCORE
        else:
            score -= interval.distance(value) * DISTANCE_PENALTY
    return score


def classify_point(
    biomes: Sequence[BiomeDefinition],
    elevation: float,
    temperature: float,
    humidity: float,
) -> BiomeDefinition:
    """Highest-scoring biome for a point; ties go to the earliest biome."""
    best = biomes[0]
    best_score = -np.inf
    for biome in biomes:
        score = score_biome(biome, elevation, temperature, humidity)
        if score > best_score:
            best_score = score
            best = biome
    return best


def classify_biomes(
    biomes: Sequence[BiomeDefinition],
    elevation: NDArray[np.float64],
    temperature: NDArray[np.float64],
    humidity: NDArray[np.float64],
) -> NDArray[np.intp]:
    """Classify every cell into a biome.

    Args:
        biomes: Ordered, non-empty biome list.
        elevation: Elevation field.
        temperature: Temperature field.
        humidity: Humidity field.

    Returns:
        2D array of indices into ``biomes``.
    """
    best_index = np.zeros(elevation.shape, dtype=np.intp)
    best_score = np.full(elevation.shape, -np.inf)

    for index, biome in enumerate(biomes):
        score = (
            _axis_score(biome.elevation, elevation)
            + _axis_score(biome.temperature, temperature)
            + _axis_score(biome.humidity, humidity)
        )
        # Strict comparison keeps the earlier biome on ties
        better = score > best_score
        best_index[better] = index
        best_score[better] = score[better]

    return best_index


def default_biomes() -> list[BiomeDefinition]:
    """Stock biome set: ocean, beach, grassland, forest, mountain, desert."""
    return [
        BiomeDefinition(
            id="ocean",
            name="Ocean",
            elevation=Range(min=0.0, max=0.1),
            temperature=Range(min=-0.2, max=0.8),
            humidity=Range(min=0.8, max=1.0),
            color=Color(r=0, g=100, b=200),
        ),
        BiomeDefinition(
            id="beach",
            name="Beach",
            elevation=Range(min=0.1, max=0.15),
            temperature=Range(min=0.3, max=0.9),
            humidity=Range(min=0.4, max=0.8),
            color=Color(r=255, g=255, b=200),
            vegetation=[
                VegetationRule(
                    type="palm_tree", density=0.3, min_size=0.8, max_size=1.2, probability=0.4
                ),
            ],
        ),
        BiomeDefinition(
            id="grassland",
            name="Grassland",
            elevation=Range(min=0.15, max=0.6),
            temperature=Range(min=0.0, max=0.7),
            humidity=Range(min=0.3, max=0.8),
            color=Color(r=100, g=200, b=100),
            vegetation=[
                VegetationRule(
                    type="grass", density=2.0, min_size=0.1, max_size=0.3, probability=0.9
                ),
                VegetationRule(
                    type="tree", density=0.1, min_size=0.8, max_size=1.5, probability=0.2
                ),
            ],
        ),
        BiomeDefinition(
            id="forest",
            name="Forest",
            elevation=Range(min=0.2, max=0.8),
            temperature=Range(min=-0.1, max=0.6),
            humidity=Range(min=0.5, max=1.0),
            color=Color(r=50, g=150, b=50),
            vegetation=[
                VegetationRule(
                    type="tree", density=1.5, min_size=1.0, max_size=2.0, probability=0.8
                ),
                VegetationRule(
                    type="bush", density=0.8, min_size=0.3, max_size=0.8, probability=0.6
                ),
            ],
        ),
        BiomeDefinition(
            id="mountain",
            name="Mountain",
            elevation=Range(min=0.8, max=1.0),
            temperature=Range(min=-1.0, max=0.2),
            humidity=Range(min=0.1, max=0.7),
            color=Color(r=150, g=150, b=150),
            vegetation=[
                VegetationRule(
                    type="pine_tree",
                    density=0.2,
                    min_size=0.5,
                    max_size=1.0,
                    probability=0.3,
                    conditions=[
                        VegetationCondition(property="elevation", min=0.8, max=0.9)
                    ],
                ),
            ],
        ),
        BiomeDefinition(
            id="desert",
            name="Desert",
            elevation=Range(min=0.1, max=0.7),
            temperature=Range(min=0.5, max=1.0),
            humidity=Range(min=-1.0, max=0.2),
            color=Color(r=255, g=200, b=100),
            vegetation=[
                VegetationRule(
                    type="cactus", density=0.1, min_size=0.3, max_size=1.2, probability=0.3
                ),
            ],
        ),
    ]
