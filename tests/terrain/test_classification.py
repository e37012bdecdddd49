"""Tests for biome classification."""

import numpy as np
import pytest

from procgen.terrain.classification import (
    classify_biomes,
    classify_point,
    default_biomes,
    score_biome,
)
from procgen.terrain.config import BiomeDefinition, Range


def _biome(biome_id: str, elevation: tuple[float, float]) -> BiomeDefinition:
    return BiomeDefinition(
        id=biome_id,
        name=biome_id.title(),
        elevation=Range(min=elevation[0], max=elevation[1]),
        temperature=Range(min=-1.0, max=1.0),
        humidity=Range(min=-1.0, max=1.0),
    )


class TestRange:
    """Tests for closed intervals."""

    def test_contains_is_inclusive(self) -> None:
        interval = Range(min=0.2, max=0.4)
        assert interval.contains(0.2)
        assert interval.contains(0.4)
        assert not interval.contains(0.41)

    def test_distance_to_nearest_bound(self) -> None:
        interval = Range(min=0.2, max=0.4)
        assert interval.distance(0.5) == pytest.approx(0.1)
        assert interval.distance(0.0) == pytest.approx(0.2)


class TestScoring:
    """Tests for per-biome scoring."""

    def test_inside_all_axes(self) -> None:
        assert score_biome(_biome("a", (0, 1)), 0.5, 0.0, 0.0) == 300

    def test_penalty_outside(self) -> None:
        # 1.5 is 0.5 above the elevation max
        assert score_biome(_biome("a", (0, 1)), 1.5, 0.0, 0.0) == pytest.approx(195.0)

    def test_best_biome_wins(self) -> None:
        biomes = [_biome("low", (0, 0.5)), _biome("high", (0.5, 1))]
        assert classify_point(biomes, 0.9, 0, 0).id == "high"
        assert classify_point(biomes, 0.1, 0, 0).id == "low"

    def test_tie_goes_to_first_declared(self) -> None:
        biomes = [_biome("first", (0, 1)), _biome("second", (0, 1))]
        assert classify_point(biomes, 0.5, 0, 0).id == "first"
        result = classify_biomes(biomes, np.full((2, 2), 0.5), np.zeros((2, 2)), np.zeros((2, 2)))
        assert (result == 0).all()

    def test_nearest_region_when_nothing_matches(self) -> None:
        biomes = [_biome("near", (2, 3)), _biome("far", (10, 11))]
        assert classify_point(biomes, 0.0, 0, 0).id == "near"


class TestVectorizedClassification:
    """Grid classification agrees with the per-point classifier."""

    def test_matches_point_classifier(self) -> None:
        rng = np.random.default_rng(0)
        elevation = rng.uniform(-0.2, 1.2, size=(12, 12))
        temperature = rng.uniform(-1.2, 1.2, size=(12, 12))
        humidity = rng.uniform(-1.2, 1.2, size=(12, 12))
        biomes = default_biomes()

        result = classify_biomes(biomes, elevation, temperature, humidity)
        for y in range(12):
            for x in range(12):
                expected = classify_point(
                    biomes, elevation[y, x], temperature[y, x], humidity[y, x]
                )
                assert biomes[result[y, x]].id == expected.id

    def test_result_indexes_configured_biomes(self) -> None:
        biomes = default_biomes()
        values = np.linspace(-5, 5, 25).reshape(5, 5)
        result = classify_biomes(biomes, values, values, values)
        assert result.min() >= 0
        assert result.max() < len(biomes)


class TestDefaultBiomes:
    """Tests for the stock biome set."""

    def test_ids_in_order(self) -> None:
        ids = [b.id for b in default_biomes()]
        assert ids == ["ocean", "beach", "grassland", "forest", "mountain", "desert"]

    def test_intervals_well_formed(self) -> None:
        for biome in default_biomes():
            for interval in (biome.elevation, biome.temperature, biome.humidity):
                assert interval.min <= interval.max

    def test_mountain_pine_condition(self) -> None:
        mountain = next(b for b in default_biomes() if b.id == "mountain")
        condition = mountain.vegetation[0].conditions[0]
        assert condition.property == "elevation"
        assert (condition.min, condition.max) == (0.8, 0.9)
