"""Procedural terrain generation package.

This package implements noise-based terrain generation: elevation,
temperature and humidity fields, biome classification, droplet erosion,
and vegetation/structure placement.
"""

from .classification import classify_biomes, classify_point, default_biomes
from .config import (
    BiomeDefinition,
    Color,
    ErosionSettings,
    Range,
    StructureCondition,
    StructureRule,
    StructureSize,
    TerrainConfig,
    VegetationCondition,
    VegetationRule,
)
from .generator import TerrainGenerator, elevation_array, field_array, terrain_stats
from .persistence import export_terrain, load_terrain, save_terrain, terrain_to_records
from .types import (
    StructureInstance,
    Terrain,
    TerrainPoint,
    TerrainStats,
    VegetationInstance,
)

__all__ = [
    "BiomeDefinition",
    "Color",
    "ErosionSettings",
    "Range",
    "StructureCondition",
    "StructureInstance",
    "StructureRule",
    "StructureSize",
    "Terrain",
    "TerrainConfig",
    "TerrainGenerator",
    "TerrainPoint",
    "TerrainStats",
    "VegetationCondition",
    "VegetationInstance",
    "VegetationRule",
    "classify_biomes",
    "classify_point",
    "default_biomes",
    "elevation_array",
    "export_terrain",
    "field_array",
    "load_terrain",
    "save_terrain",
    "terrain_stats",
    "terrain_to_records",
]
