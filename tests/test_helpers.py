"""Tests for shared numeric and grid helpers."""

import numpy as np
import pytest

from procgen.exceptions import ConfigError
from procgen.helpers import (
    DistanceMetric,
    InterpolationType,
    apply_cellular_automata,
    bilinear_interpolate,
    clamp,
    distance,
    distance_3d,
    flood_fill,
    grid_neighbors,
    interpolate,
    lerp,
    map_range,
    normalize_map,
    smooth_value,
    smoothstep,
    validate_integer,
    validate_non_negative,
    validate_positive,
    validate_range,
    voronoi_labels,
)


class TestDistance:
    """Tests for distance metrics."""

    def test_euclidean(self) -> None:
        assert distance(0, 0, 3, 4) == pytest.approx(5.0)

    def test_manhattan(self) -> None:
        assert distance(0, 0, 3, -4, DistanceMetric.MANHATTAN) == 7

    def test_chebyshev(self) -> None:
        assert distance(1, 1, 4, 5, DistanceMetric.CHEBYSHEV) == 4

    def test_minkowski(self) -> None:
        assert distance(0, 0, 3, 4, DistanceMetric.MINKOWSKI) == pytest.approx(91 ** (1 / 3))

    def test_metric_by_name(self) -> None:
        assert distance(0, 0, 1, 1, "manhattan") == 2

    def test_distance_3d(self) -> None:
        assert distance_3d(0, 0, 0, 1, 2, 2) == pytest.approx(3.0)


class TestInterpolation:
    """Tests for interpolation helpers."""

    def test_lerp_clamps_t(self) -> None:
        assert lerp(0, 10, 1.5) == 10
        assert lerp(0, 10, -1) == 0
        assert lerp(0, 10, 0.25) == 2.5

    @pytest.mark.parametrize("kind", list(InterpolationType))
    def test_endpoints_and_midpoint(self, kind: InterpolationType) -> None:
        assert interpolate(2.0, 4.0, 0.0, kind) == pytest.approx(2.0)
        assert interpolate(2.0, 4.0, 1.0, kind) == pytest.approx(4.0)
        assert interpolate(2.0, 4.0, 0.5, kind) == pytest.approx(3.0)

    def test_cubic_eases_in(self) -> None:
        assert interpolate(0.0, 1.0, 0.25, InterpolationType.CUBIC) < 0.25

    def test_bilinear_center(self) -> None:
        assert bilinear_interpolate(0, 1, 2, 3, 0.5, 0.5) == pytest.approx(1.5)

    def test_smoothstep(self) -> None:
        assert smoothstep(0, 1, -1) == 0
        assert smoothstep(0, 1, 2) == 1
        assert smoothstep(0, 1, 0.5) == pytest.approx(0.5)

    def test_clamp_and_map(self) -> None:
        assert clamp(5, 0, 3) == 3
        assert map_range(5, 0, 10, 100, 200) == 150


class TestNoiseMaps:
    """Tests for smoothing and normalizing 2D maps."""

    def test_smooth_value_window_mean(self) -> None:
        grid = np.arange(9, dtype=np.float64).reshape(3, 3)
        assert smooth_value(grid, 1, 1) == pytest.approx(4.0)
        # Corner window only includes in-bounds cells: 0, 1, 3, 4
        assert smooth_value(grid, 0, 0) == pytest.approx(2.0)

    def test_normalize_map_range(self) -> None:
        result = normalize_map(np.array([[2.0, 4.0], [6.0, 10.0]]))
        assert result.min() == 0.0
        assert result.max() == 1.0

    def test_normalize_constant_map_unchanged(self) -> None:
        grid = np.full((2, 2), 3.0)
        np.testing.assert_array_equal(normalize_map(grid), grid)


class TestCellularAutomata:
    """Tests for the birth/death automaton."""

    def test_full_grid_is_stable(self) -> None:
        grid = np.ones((6, 6), dtype=bool)
        np.testing.assert_array_equal(apply_cellular_automata(grid, iterations=3), grid)

    def test_out_of_bounds_counts_as_alive(self) -> None:
        grid = np.zeros((5, 5), dtype=bool)
        result = apply_cellular_automata(grid, iterations=1)
        # Corners see 5 out-of-bounds neighbors, edges only 3
        assert result[0, 0] and result[0, 4] and result[4, 0] and result[4, 4]
        assert not result[0, 2]
        assert not result[2, 2]

    def test_input_not_modified(self) -> None:
        grid = np.zeros((4, 4), dtype=bool)
        apply_cellular_automata(grid, iterations=2)
        assert not grid.any()


class TestFloodFill:
    """Tests for 4-connected flood fill."""

    def test_fill_stops_at_walls(self) -> None:
        grid = [
            [0, 1, 0],
            [0, 1, 0],
            [0, 1, 0],
        ]
        filled = flood_fill(grid, 0, 0, 7)
        assert sorted(filled) == [(0, 0), (0, 1), (0, 2)]
        assert [row[0] for row in grid] == [7, 7, 7]
        assert [row[2] for row in grid] == [0, 0, 0]

    def test_custom_predicate(self) -> None:
        grid = [[1, 2, 3, 4]]
        filled = flood_fill(grid, 0, 0, 0, should_fill=lambda x, y, v: v < 3)
        assert filled == [(0, 0), (1, 0)]
        assert grid == [[0, 0, 3, 4]]

    def test_out_of_bounds_start(self) -> None:
        assert flood_fill([[0]], 5, 5, 1) == []

    def test_no_diagonal_leak(self) -> None:
        grid = [
            [0, 1],
            [1, 0],
        ]
        assert flood_fill(grid, 0, 0, 9) == [(0, 0)]


class TestVoronoi:
    """Tests for nearest-site labelling."""

    def test_two_sites_split_grid(self) -> None:
        labels = voronoi_labels(4, 1, [(0, 0, "a"), (3, 0, "b")])
        assert labels == [["a", "a", "b", "b"]]

    def test_requires_sites(self) -> None:
        with pytest.raises(ConfigError):
            voronoi_labels(2, 2, [])


class TestGridNeighbors:
    """Tests for neighbor enumeration."""

    def test_corner_orthogonal(self) -> None:
        assert sorted(grid_neighbors(0, 0, 3, 3)) == [(0, 1), (1, 0)]

    def test_center_diagonal(self) -> None:
        assert len(grid_neighbors(1, 1, 3, 3, diagonal=True)) == 8


class TestValidation:
    """Tests for validation helpers."""

    def test_range(self) -> None:
        validate_range(0.5, 0, 1)
        with pytest.raises(ConfigError, match="between"):
            validate_range(2, 0, 1, "fraction")

    def test_positive(self) -> None:
        with pytest.raises(ConfigError):
            validate_positive(0)

    def test_non_negative(self) -> None:
        validate_non_negative(0)
        with pytest.raises(ConfigError):
            validate_non_negative(-1)

    def test_integer(self) -> None:
        validate_integer(3.0)
        with pytest.raises(ConfigError):
            validate_integer(3.5)

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_positive(-5)
