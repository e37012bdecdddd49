"""Generation configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from .cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_MAX_MEMORY_BYTES,
    DEFAULT_TTL_SECONDS,
    GenerationCache,
)
from .engine import GenerationEngine, GenerationOptions
from .exceptions import ConfigError
from .logs import configure_logging
from .maze.config import MazeConfig
from .terrain.classification import default_biomes
from .terrain.config import TerrainConfig


class EngineConfig(BaseModel):
    """Engine policy from TOML."""

    seed: int | None = Field(default=None, description="Fixed seed (None = random)")
    use_cache: bool = True
    max_retries: int = Field(default=3, description="Retries after the first attempt")
    timeout_ms: float | None = Field(default=30_000, description="Per-attempt timeout")
    retry_base_delay_ms: float = Field(default=100, description="Backoff base delay")
    cache_max_entries: int = DEFAULT_MAX_ENTRIES
    cache_max_memory_bytes: int = DEFAULT_MAX_MEMORY_BYTES
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS
    log_level: str = "INFO"

    def to_options(self) -> GenerationOptions:
        return GenerationOptions(
            seed=self.seed,
            use_cache=self.use_cache,
            max_retries=self.max_retries,
            timeout_ms=self.timeout_ms,
            retry_base_delay_ms=self.retry_base_delay_ms,
        )

    def to_cache(self) -> GenerationCache:
        return GenerationCache(
            max_entries=self.cache_max_entries,
            max_memory_bytes=self.cache_max_memory_bytes,
            ttl_seconds=self.cache_ttl_seconds,
        )


class ProcgenConfig(BaseModel):
    """Complete configuration bundle.

    A terrain section without biomes gets the stock biome set.
    """

    engine: EngineConfig = Field(default_factory=EngineConfig)
    terrain: TerrainConfig = Field(default_factory=TerrainConfig)
    maze: MazeConfig = Field(default_factory=MazeConfig)

    @model_validator(mode="after")
    def _fill_biomes(self) -> "ProcgenConfig":
        if not self.terrain.biomes:
            self.terrain.biomes = default_biomes()
        return self

    def build_engine(self) -> GenerationEngine:
        """Configure logging at the configured level and build an engine."""
        configure_logging(self.engine.log_level)
        return GenerationEngine(self.engine.to_options(), self.engine.to_cache())


def load_config(config_path: Path) -> ProcgenConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed ProcgenConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        ConfigError: If values fail validation.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    try:
        return ProcgenConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {config_path}: {exc}") from exc


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))
