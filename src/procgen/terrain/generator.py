"""Main terrain generation orchestration."""

from typing import TYPE_CHECKING, Callable

import numpy as np
import structlog
from numpy.typing import NDArray

from ..exceptions import ConfigError
from ..helpers import validate_non_negative, validate_positive, validate_range
from ..noise import NoiseConfig, NoiseSource, PerlinNoise
from ..rng import SeededRandom
from .classification import classify_biomes
from .config import TerrainConfig
from .erosion import apply_erosion
from .fields import compute_slope, make_elevation, make_humidity, make_temperature
from .population import populate
from .types import Terrain, TerrainPoint, TerrainStats

if TYPE_CHECKING:
    from ..engine import GenerationContext

logger = structlog.get_logger()

NoiseFactory = Callable[[NoiseConfig], NoiseSource]

# Seed offsets and overrides for the derived noise sources
TEMPERATURE_SEED_OFFSET = 1000
HUMIDITY_SEED_OFFSET = 2000
DETAIL_SEED_OFFSET = 3000


def validate_config(config: TerrainConfig) -> None:
    """Reject configurations that cannot produce a terrain.

    Raises:
        ConfigError: On empty biomes, non-positive dimensions or height
            multiplier, an interval with min > max, or out-of-range erosion
            settings.
    """
    validate_positive(config.width, "Terrain width")
    validate_positive(config.height, "Terrain height")
    validate_positive(config.height_multiplier, "height_multiplier")
    if not config.biomes:
        raise ConfigError("Terrain config needs at least one biome")

    for biome in config.biomes:
        for axis in ("elevation", "temperature", "humidity"):
            interval = getattr(biome, axis)
            if interval.min > interval.max:
                raise ConfigError(
                    f"Biome '{biome.id}' {axis} range is inverted "
                    f"({interval.min} > {interval.max})"
                )
        for rule in biome.vegetation:
            validate_range(rule.probability, 0.0, 1.0, f"Vegetation '{rule.type}' probability")
            if rule.min_size > rule.max_size:
                raise ConfigError(
                    f"Biome '{biome.id}' vegetation '{rule.type}' has min_size > max_size"
                )
        for rule in biome.structures:
            validate_non_negative(rule.min_distance, f"Structure '{rule.type}' min_distance")

    if config.erosion is not None:
        validate_non_negative(config.erosion.iterations, "erosion.iterations")
        validate_range(config.erosion.evaporation_rate, 0.0, 1.0, "erosion.evaporation_rate")


class TerrainGenerator:
    """Generates terrain grids from a TerrainConfig.

    Usage:
        generator = TerrainGenerator(TerrainConfig(width=64, height=64, biomes=default_biomes()))
        terrain = generator.generate()
        terrain[y][x].biome
    """

    def __init__(
        self,
        config: TerrainConfig,
        noise_factory: NoiseFactory = PerlinNoise,
    ):
        validate_config(config)
        self.config = config

        base = config.noise
        self.elevation_noise = noise_factory(base)
        self.temperature_noise = noise_factory(
            base.model_copy(
                update={
                    "seed": base.seed + TEMPERATURE_SEED_OFFSET,
                    "frequency": base.frequency * 0.5,
                    "octaves": 3,
                }
            )
        )
        self.humidity_noise = noise_factory(
            base.model_copy(
                update={
                    "seed": base.seed + HUMIDITY_SEED_OFFSET,
                    "frequency": base.frequency * 0.7,
                    "octaves": 4,
                }
            )
        )
        self.detail_noise = noise_factory(
            base.model_copy(
                update={
                    "seed": base.seed + DETAIL_SEED_OFFSET,
                    "frequency": base.frequency * 4,
                    "octaves": 2,
                    "amplitude": 0.1,
                }
            )
        )

    def generate(self, context: "GenerationContext | None" = None) -> Terrain:
        """Generate a terrain grid.

        Args:
            context: Optional generation context. Its RNG drives population
                and its progress callback receives stage updates.

        Returns:
            Grid of TerrainPoint indexed ``[y][x]``.
        """
        config = self.config
        width, height = config.width, config.height
        rng = context.rng if context is not None else SeededRandom(config.noise.seed)

        def report(fraction: float, stage: str) -> None:
            if context is not None:
                context.report_progress(fraction, stage)

        # Base pass
        elevation = make_elevation(width, height, self.elevation_noise, config.height_multiplier)
        temperature = make_temperature(
            width, height, self.temperature_noise, elevation, config.height_multiplier
        )
        humidity = make_humidity(
            width, height, self.humidity_noise, elevation, config.height_multiplier
        )
        biome_index = classify_biomes(config.biomes, elevation, temperature, humidity)
        biome_ids = [biome.id for biome in config.biomes]

        terrain: Terrain = []
        for y in range(height):
            terrain.append(
                [
                    TerrainPoint(
                        x=x,
                        y=y,
                        elevation=float(elevation[y, x]),
                        temperature=float(temperature[y, x]),
                        humidity=float(humidity[y, x]),
                        biome=biome_ids[biome_index[y, x]],
                    )
                    for x in range(width)
                ]
            )
            report(y / height * 0.5, "Generating base terrain")

        if config.erosion is not None:
            elevation = apply_erosion(elevation, config.erosion)
            for y, row in enumerate(terrain):
                for point in row:
                    point.elevation = float(elevation[y, point.x])

        slope = compute_slope(elevation)
        populate(
            terrain,
            {biome.id: biome for biome in config.biomes},
            slope,
            rng,
            on_row=lambda y: report(0.5 + y / height * 0.5, "Populating terrain"),
        )

        stats = terrain_stats(terrain)
        logger.info(
            "terrain_generated",
            width=width,
            height=height,
            seed=config.noise.seed,
            eroded=config.erosion is not None,
            vegetation=stats.vegetation_count,
            structures=stats.structure_count,
        )
        return terrain

    def detail_map(self, offset_x: float = 0.0, offset_y: float = 0.0) -> NDArray[np.float64]:
        """Fine-detail noise over the map, for surface texturing."""
        return self.detail_noise.sample_grid(
            self.config.width, self.config.height, offset_x, offset_y
        )

    def stats(self, terrain: Terrain) -> TerrainStats:
        return terrain_stats(terrain)


def terrain_stats(terrain: Terrain) -> TerrainStats:
    """Summarize elevation, biome coverage and placements of a grid."""
    points = [point for row in terrain for point in row]
    if not points:
        return TerrainStats(0.0, 0.0, 0.0, {}, 0, 0)

    elevations = np.array([p.elevation for p in points])
    distribution: dict[str, int] = {}
    for point in points:
        distribution[point.biome] = distribution.get(point.biome, 0) + 1

    return TerrainStats(
        min_elevation=float(elevations.min()),
        max_elevation=float(elevations.max()),
        avg_elevation=float(elevations.mean()),
        biome_distribution=distribution,
        vegetation_count=sum(len(p.vegetation) for p in points),
        structure_count=sum(len(p.structures) for p in points),
    )


def field_array(terrain: Terrain, name: str) -> NDArray[np.float64]:
    """Project a numeric point field (elevation, temperature, humidity) to 2D."""
    if name not in ("elevation", "temperature", "humidity"):
        raise ValueError(f"Unknown terrain field: {name}")
    return np.array([[getattr(p, name) for p in row] for row in terrain], dtype=np.float64)


def elevation_array(terrain: Terrain) -> NDArray[np.float64]:
    return field_array(terrain, "elevation")
