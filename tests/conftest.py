"""Shared test fixtures for procgen tests."""

import pytest
import structlog

from procgen.engine import GenerationContext, GenerationEngine, GenerationOptions
from procgen.noise import NoiseConfig
from procgen.terrain.classification import default_biomes
from procgen.terrain.config import BiomeDefinition, Range, TerrainConfig


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fast_options() -> GenerationOptions:
    """Options with a fixed seed and no real backoff delay."""
    return GenerationOptions(seed=42, retry_base_delay_ms=0, timeout_ms=1000)


@pytest.fixture
def engine(fast_options: GenerationOptions) -> GenerationEngine:
    return GenerationEngine(fast_options)


@pytest.fixture
def context() -> GenerationContext:
    return GenerationContext.create(seed=7)


@pytest.fixture
def terrain_config() -> TerrainConfig:
    """Small terrain with the stock biomes."""
    return TerrainConfig(
        width=24,
        height=16,
        noise=NoiseConfig(seed=99, frequency=0.08),
        biomes=default_biomes(),
    )


@pytest.fixture
def everything_biome() -> BiomeDefinition:
    """Biome whose intervals cover any plausible value."""
    return BiomeDefinition(
        id="everything",
        name="Everything",
        elevation=Range(min=-1000.0, max=1000.0),
        temperature=Range(min=-1000.0, max=1000.0),
        humidity=Range(min=-1000.0, max=1000.0),
    )
