"""Tests for Perlin noise sources."""

import numpy as np
import pytest

from procgen.noise import NoiseConfig, NoiseSource, PerlinNoise


class TestPerlinSampling:
    """Tests for point and grid sampling."""

    def test_grid_shape(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=1))
        assert noise.sample_grid(30, 12).shape == (12, 30)

    def test_deterministic_with_same_seed(self) -> None:
        a = PerlinNoise(NoiseConfig(seed=5, frequency=0.1)).sample_grid(32, 32)
        b = PerlinNoise(NoiseConfig(seed=5, frequency=0.1)).sample_grid(32, 32)
        np.testing.assert_array_equal(a, b)

    def test_different_seed_different_output(self) -> None:
        a = PerlinNoise(NoiseConfig(seed=5, frequency=0.1)).sample_grid(32, 32)
        b = PerlinNoise(NoiseConfig(seed=6, frequency=0.1)).sample_grid(32, 32)
        assert not np.allclose(a, b)

    def test_point_matches_grid(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=3, frequency=0.13))
        grid = noise.sample_grid(10, 8)
        for x, y in [(0, 0), (3, 5), (9, 7)]:
            assert noise.sample_2d(x, y) == pytest.approx(grid[y, x])

    def test_grid_offset(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=3, frequency=0.13))
        full = noise.sample_grid(10, 10)
        shifted = noise.sample_grid(5, 5, offset_x=5, offset_y=5)
        np.testing.assert_allclose(shifted, full[5:, 5:])

    def test_zero_at_lattice_points(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=2, frequency=1.0, octaves=1))
        assert noise.sample_2d(4, 7) == pytest.approx(0.0)
        assert noise.sample_3d(1, 2, 3) == pytest.approx(0.0)

    def test_output_range_reasonable(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=8, frequency=0.05))
        values = noise.sample_grid(64, 64)
        assert values.min() >= -2.0
        assert values.max() <= 2.0
        assert values.std() > 0.01

    def test_3d_varies_with_z(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=4, frequency=0.3))
        assert noise.sample_3d(1.5, 2.5, 0.25) != noise.sample_3d(1.5, 2.5, 1.75)


class TestNormalize:
    """Tests for linear normalization."""

    def test_maps_nominal_range(self) -> None:
        assert PerlinNoise.normalize(-1.0, 0.0, 1.0) == 0.0
        assert PerlinNoise.normalize(1.0, 0.0, 1.0) == 1.0
        assert PerlinNoise.normalize(0.0, -1.0, 1.0) == 0.0

    def test_does_not_clip(self) -> None:
        assert PerlinNoise.normalize(3.0, 0.0, 1.0) == 2.0

    def test_height_map_scaled(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=1, frequency=0.1))
        expected = (noise.sample_grid(8, 8) + 1.0) * 0.5 * 4.0
        np.testing.assert_allclose(noise.height_map(8, 8, height_multiplier=4.0), expected)


class TestVariants:
    """Tests for derived noise shapes and reseeding."""

    def test_with_seed_copies_parameters(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=1, octaves=2, frequency=0.2))
        other = noise.with_seed(9)
        assert other.config.seed == 9
        assert other.config.octaves == 2
        assert noise.config.seed == 1

    def test_with_seed_matches_fresh_source(self) -> None:
        reseeded = PerlinNoise(NoiseConfig(seed=1)).with_seed(9).sample_grid(8, 8)
        fresh = PerlinNoise(NoiseConfig(seed=9)).sample_grid(8, 8)
        np.testing.assert_array_equal(reseeded, fresh)

    def test_billow_non_negative(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=2, frequency=0.2))
        xs, ys = np.meshgrid(np.arange(16.0), np.arange(16.0))
        assert (noise.billow(xs, ys) >= 0).all()
        assert (noise.turbulence(xs, ys) >= 0).all()

    def test_ridged_non_negative(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=2, frequency=0.2))
        xs, ys = np.meshgrid(np.arange(16.0), np.arange(16.0))
        assert (noise.ridged(xs, ys) >= 0).all()

    def test_domain_warp_changes_field(self) -> None:
        noise = PerlinNoise(NoiseConfig(seed=2, frequency=0.2))
        xs, ys = np.meshgrid(np.arange(16.0), np.arange(16.0))
        plain = noise.sample_points(xs, ys)
        warped = noise.domain_warped(xs, ys, warp_strength=4.0)
        assert not np.allclose(plain, warped)

    def test_threshold(self) -> None:
        np.testing.assert_array_equal(
            PerlinNoise.threshold([0.1, 0.5, 0.9], 0.5), [0.0, 0.0, 1.0]
        )

    def test_satisfies_protocol(self) -> None:
        source: NoiseSource = PerlinNoise()
        assert isinstance(source.sample_2d(1.5, 2.5), float)
