"""Terrain persistence: JSON export and compressed save/load."""

import dataclasses
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np
import structlog

from .config import TerrainConfig
from .generator import field_array
from .types import StructureInstance, Terrain, TerrainPoint, VegetationInstance

logger = structlog.get_logger()

FORMAT_VERSION = 1


def point_to_record(point: TerrainPoint, include_features: bool = False) -> dict[str, Any]:
    record: dict[str, Any] = {
        "x": point.x,
        "y": point.y,
        "elevation": point.elevation,
        "temperature": point.temperature,
        "humidity": point.humidity,
        "biome": point.biome,
    }
    if include_features:
        record["vegetation"] = [dataclasses.asdict(v) for v in point.vegetation]
        record["structures"] = [dataclasses.asdict(s) for s in point.structures]
    return record


def terrain_to_records(
    terrain: Terrain, include_features: bool = False
) -> list[list[dict[str, Any]]]:
    """JSON-ready projection of a grid.

    Args:
        terrain: Grid indexed ``[y][x]``.
        include_features: Include vegetation and structure lists.
    """
    return [[point_to_record(p, include_features) for p in row] for row in terrain]


def export_terrain(
    terrain: Terrain, config: TerrainConfig, include_features: bool = False
) -> str:
    """Serialize a grid and the config that produced it to JSON."""
    return json.dumps(
        {
            "config": config.model_dump(mode="json"),
            "terrain": terrain_to_records(terrain, include_features),
        }
    )


def save_terrain(path: Path, terrain: Terrain, config: TerrainConfig) -> None:
    """Save a generated terrain to disk.

    Uses numpy's compressed .npz format for the numeric fields.

    Args:
        path: Output path (should end with .npz).
        terrain: Generated grid.
        config: Generation configuration used.
    """
    biome_ids = [biome.id for biome in config.biomes]
    index_of = {biome_id: i for i, biome_id in enumerate(biome_ids)}
    biomes = np.array(
        [[index_of[p.biome] for p in row] for row in terrain], dtype=np.uint16
    )

    features = [
        {
            "x": p.x,
            "y": p.y,
            "vegetation": [dataclasses.asdict(v) for v in p.vegetation],
            "structures": [dataclasses.asdict(s) for s in p.structures],
        }
        for row in terrain
        for p in row
        if p.vegetation or p.structures
    ]

    metadata = {
        "version": FORMAT_VERSION,
        "seed": config.noise.seed,
        "width": config.width,
        "height": config.height,
        "biome_ids": biome_ids,
        "config": config.model_dump(mode="json"),
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }

    np.savez_compressed(
        path,
        elevation=field_array(terrain, "elevation"),
        temperature=field_array(terrain, "temperature"),
        humidity=field_array(terrain, "humidity"),
        biomes=biomes,
        features=np.frombuffer(json.dumps(features).encode("utf-8"), dtype=np.uint8),
        metadata=np.frombuffer(json.dumps(metadata).encode("utf-8"), dtype=np.uint8),
    )

    file_size = path.stat().st_size / 1024
    logger.info("terrain_saved", path=str(path), size_kb=round(file_size, 1))


def load_terrain(path: Path) -> tuple[Terrain, dict[str, Any]]:
    """Load a terrain saved by save_terrain.

    Args:
        path: Path to .npz file.

    Returns:
        Tuple of (terrain grid, metadata dict).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValueError: If file format is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Terrain file not found: {path}")

    with np.load(path) as data:
        for name in ("elevation", "temperature", "humidity", "biomes", "metadata"):
            if name not in data:
                raise ValueError(f"Invalid terrain file: missing '{name}' array")
        elevation = data["elevation"]
        temperature = data["temperature"]
        humidity = data["humidity"]
        biomes = data["biomes"]
        metadata = json.loads(data["metadata"].tobytes().decode("utf-8"))
        features = (
            json.loads(data["features"].tobytes().decode("utf-8"))
            if "features" in data
            else []
        )

    biome_ids = metadata["biome_ids"]
    height, width = elevation.shape
    terrain: Terrain = [
        [
            TerrainPoint(
                x=x,
                y=y,
                elevation=float(elevation[y, x]),
                temperature=float(temperature[y, x]),
                humidity=float(humidity[y, x]),
                biome=biome_ids[int(biomes[y, x])],
            )
            for x in range(width)
        ]
        for y in range(height)
    ]

    for entry in features:
        point = terrain[entry["y"]][entry["x"]]
        point.vegetation = [VegetationInstance(**v) for v in entry["vegetation"]]
        point.structures = [StructureInstance(**s) for s in entry["structures"]]

    logger.info("terrain_loaded", path=str(path), width=width, height=height)
    return terrain, metadata
