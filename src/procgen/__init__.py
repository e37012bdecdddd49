"""Procedural content generation core."""

from .cache import CacheEntry, CacheStats, GenerationCache
from .config import EngineConfig, ProcgenConfig, find_config, list_configs, load_config
from .engine import (
    GenerationContext,
    GenerationEngine,
    GenerationOptions,
    GenerationStats,
)
from .exceptions import (
    CacheConsistencyError,
    ConfigError,
    GenerationFailure,
    GenerationTimeout,
    InvalidCoordinateError,
    ProcgenError,
)
from .logs import configure_logging
from .maze import MazeAlgorithm, MazeBias, MazeConfig, MazeGenerator
from .noise import NoiseConfig, NoiseSource, PerlinNoise
from .rng import SeededRandom
from .terrain import TerrainConfig, TerrainGenerator, default_biomes

__all__ = [
    "CacheConsistencyError",
    "CacheEntry",
    "CacheStats",
    "ConfigError",
    "EngineConfig",
    "GenerationCache",
    "GenerationContext",
    "GenerationEngine",
    "GenerationFailure",
    "GenerationOptions",
    "GenerationStats",
    "GenerationTimeout",
    "InvalidCoordinateError",
    "MazeAlgorithm",
    "MazeBias",
    "MazeConfig",
    "MazeGenerator",
    "NoiseConfig",
    "NoiseSource",
    "PerlinNoise",
    "ProcgenConfig",
    "ProcgenError",
    "SeededRandom",
    "TerrainConfig",
    "TerrainGenerator",
    "configure_logging",
    "default_biomes",
    "find_config",
    "list_configs",
    "load_config",
]
