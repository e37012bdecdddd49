"""Terrain output records."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class VegetationInstance:
    """A single plant placed on the map."""

    type: str
    x: float
    y: float
    size: float
    health: float
    age: float


@dataclass
class StructureInstance:
    """A single structure placed on the map."""

    type: str
    x: int
    y: int
    z: float
    width: float
    height: float
    depth: float
    rotation: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class TerrainPoint:
    """One cell of generated terrain.

    Created by the base pass; erosion rewrites ``elevation`` and population
    fills ``vegetation`` and ``structures``.
    """

    x: int
    y: int
    elevation: float
    temperature: float
    humidity: float
    biome: str
    vegetation: list[VegetationInstance] = field(default_factory=list)
    structures: list[StructureInstance] = field(default_factory=list)


@dataclass
class TerrainStats:
    """Summary of a generated terrain grid."""

    min_elevation: float
    max_elevation: float
    avg_elevation: float
    biome_distribution: dict[str, int]
    vegetation_count: int
    structure_count: int


Terrain = list[list[TerrainPoint]]
