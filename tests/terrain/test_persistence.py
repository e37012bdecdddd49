"""Tests for terrain export and save/load."""

import json
from pathlib import Path

import numpy as np
import pytest

from procgen.terrain.config import StructureRule, TerrainConfig, VegetationRule
from procgen.terrain.generator import TerrainGenerator
from procgen.terrain.persistence import (
    export_terrain,
    load_terrain,
    save_terrain,
    terrain_to_records,
)


@pytest.fixture
def populated_config(terrain_config: TerrainConfig) -> TerrainConfig:
    """Stock biomes with a grass rule and a sparse structure rule on each."""
    biomes = []
    for biome in terrain_config.biomes:
        biomes.append(
            biome.model_copy(
                update={
                    "vegetation": [VegetationRule(type="grass", density=2.0)],
                    "structures": [StructureRule(type="cairn", probability=0.3, min_distance=4.0)],
                }
            )
        )
    return terrain_config.model_copy(update={"biomes": biomes})


class TestExport:
    """Tests for the JSON projection."""

    def test_records_without_features(self, terrain_config: TerrainConfig) -> None:
        terrain = TerrainGenerator(terrain_config).generate()
        records = terrain_to_records(terrain)
        assert set(records[0][0]) == {"x", "y", "elevation", "temperature", "humidity", "biome"}

    def test_records_with_features(self, populated_config: TerrainConfig) -> None:
        terrain = TerrainGenerator(populated_config).generate()
        record = terrain_to_records(terrain, include_features=True)[3][4]
        assert len(record["vegetation"]) == len(terrain[3][4].vegetation)
        assert record["vegetation"][0]["type"] == "grass"

    def test_export_contains_config(self, terrain_config: TerrainConfig) -> None:
        terrain = TerrainGenerator(terrain_config).generate()
        data = json.loads(export_terrain(terrain, terrain_config))

        assert data["config"]["width"] == terrain_config.width
        assert data["config"]["noise"]["seed"] == 99
        assert len(data["terrain"]) == terrain_config.height
        assert data["terrain"][1][2]["biome"] == terrain[1][2].biome
        assert TerrainConfig.model_validate(data["config"]) == terrain_config


class TestSaveLoad:
    """Tests for compressed persistence."""

    def test_round_trip(self, tmp_path: Path, populated_config: TerrainConfig) -> None:
        terrain = TerrainGenerator(populated_config).generate()
        path = tmp_path / "terrain.npz"

        save_terrain(path, terrain, populated_config)
        loaded, metadata = load_terrain(path)

        assert loaded == terrain
        assert metadata["seed"] == 99
        assert metadata["width"] == populated_config.width
        assert metadata["biome_ids"] == [b.id for b in populated_config.biomes]
        assert "generated_at" in metadata

    def test_structures_survive(self, tmp_path: Path, populated_config: TerrainConfig) -> None:
        terrain = TerrainGenerator(populated_config).generate()
        path = tmp_path / "terrain.npz"
        save_terrain(path, terrain, populated_config)
        loaded, _ = load_terrain(path)

        original = [s for row in terrain for p in row for s in p.structures]
        restored = [s for row in loaded for p in row for s in p.structures]
        assert original
        assert restored == original

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_terrain(tmp_path / "nope.npz")

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.npz"
        np.savez_compressed(path, elevation=np.zeros((2, 2)))
        with pytest.raises(ValueError, match="missing"):
            load_terrain(path)
