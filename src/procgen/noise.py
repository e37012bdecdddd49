"""Coherent noise sources for terrain generation.

Provides the ``NoiseSource`` protocol consumed by the terrain generator and a
seeded fractal Perlin implementation. All sampling goes through vectorized
numpy code, so a single point and a full grid produce identical values.
"""

from typing import Protocol

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pydantic import BaseModel, Field

# Gradient set for 3D Perlin noise (x, y, z)
GRADIENTS_3D = np.array(
    [
        [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
        [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
        [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
        [1, 1, 0], [-1, 1, 0], [0, -1, 1], [0, -1, -1],
    ],
    dtype=np.float64,
)


class NoiseConfig(BaseModel):
    """Fractal noise parameters."""

    seed: int = Field(default=1337, description="Seed for the permutation table")
    octaves: int = Field(default=4, description="Number of octaves summed")
    frequency: float = Field(default=0.01, description="Base sampling frequency")
    amplitude: float = Field(default=1.0, description="Base octave amplitude")
    persistence: float = Field(
        default=0.5, description="Amplitude multiplier per octave"
    )
    lacunarity: float = Field(default=2.0, description="Frequency multiplier per octave")


class NoiseSource(Protocol):
    """Deterministic coherent noise function."""

    def sample_2d(self, x: float, y: float) -> float: ...

    def sample_3d(self, x: float, y: float, z: float) -> float: ...

    def sample_grid(
        self, width: int, height: int, offset_x: float = 0.0, offset_y: float = 0.0
    ) -> NDArray[np.float64]: ...

    def normalize(self, value, out_min: float = -1.0, out_max: float = 1.0): ...

    def with_seed(self, seed: int) -> "NoiseSource": ...


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Quintic fade curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(t: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    return a + t * (b - a)


def _grad_2d(
    hash_: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]
) -> NDArray[np.float64]:
    h = hash_ & 3
    u = np.where(h < 2, x, y)
    v = np.where(h < 2, y, x)
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


def _grad_3d(
    hash_: NDArray[np.int64],
    x: NDArray[np.float64],
    y: NDArray[np.float64],
    z: NDArray[np.float64],
) -> NDArray[np.float64]:
    g = GRADIENTS_3D[hash_ & 15]
    return g[..., 0] * x + g[..., 1] * y + g[..., 2] * z


class PerlinNoise:
    """Seeded fractal Perlin noise.

    Usage:
        noise = PerlinNoise(NoiseConfig(seed=7, octaves=6))
        value = noise.sample_2d(10.0, 20.0)
        field = noise.sample_grid(128, 128)
    """

    def __init__(self, config: NoiseConfig | None = None):
        self.config = config or NoiseConfig()
        rng = np.random.default_rng(self.config.seed)
        table = rng.permutation(256).astype(np.int64)
        # Doubled so corner lookups never wrap
        self._perm = np.concatenate([table, table])

    def with_seed(self, seed: int) -> "PerlinNoise":
        """Copy of this source with a different seed."""
        return PerlinNoise(self.config.model_copy(update={"seed": seed}))

    def with_config(self, **updates) -> "PerlinNoise":
        """Copy of this source with updated parameters."""
        return PerlinNoise(self.config.model_copy(update=updates))

    # Sampling

    def sample_2d(self, x: float, y: float) -> float:
        """Fractal noise at a single 2D point."""
        return float(self._fractal(self._perlin_2d, np.float64(x), np.float64(y)))

    def sample_3d(self, x: float, y: float, z: float) -> float:
        """Fractal noise at a single 3D point."""
        return float(
            self._fractal(self._perlin_3d, np.float64(x), np.float64(y), np.float64(z))
        )

    def sample_grid(
        self, width: int, height: int, offset_x: float = 0.0, offset_y: float = 0.0
    ) -> NDArray[np.float64]:
        """Fractal noise sampled at every integer cell of a grid.

        Returns:
            Array of shape (height, width).
        """
        ys, xs = np.meshgrid(
            np.arange(height, dtype=np.float64) + offset_y,
            np.arange(width, dtype=np.float64) + offset_x,
            indexing="ij",
        )
        return self._fractal(self._perlin_2d, xs, ys)

    def sample_points(self, xs: ArrayLike, ys: ArrayLike) -> NDArray[np.float64]:
        """Fractal noise at arbitrary coordinates."""
        return self._fractal(
            self._perlin_2d,
            np.asarray(xs, dtype=np.float64),
            np.asarray(ys, dtype=np.float64),
        )

    def height_map(
        self,
        width: int,
        height: int,
        height_multiplier: float = 1.0,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
    ) -> NDArray[np.float64]:
        """Grid normalized to [0, 1] and scaled by ``height_multiplier``."""
        raw = self.sample_grid(width, height, offset_x, offset_y)
        return self.normalize(raw, 0.0, 1.0) * height_multiplier

    # Variants

    def ridged(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
        """Ridged multifractal: squared inverted absolute octaves."""

        def octave(px, py):
            signal = 1.0 - np.abs(self._perlin_2d(px, py))
            return signal * signal

        return self._fractal(octave, np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))

    def billow(self, x: ArrayLike, y: ArrayLike) -> NDArray[np.float64]:
        """Billow noise: sum of absolute octaves."""
        return self._fractal(
            lambda px, py: np.abs(self._perlin_2d(px, py)),
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
        )

    # Turbulence shares billow's octave shape
    turbulence = billow

    def domain_warped(
        self, x: ArrayLike, y: ArrayLike, warp_strength: float = 1.0
    ) -> NDArray[np.float64]:
        """Fractal noise sampled at coordinates offset by low-frequency noise."""
        px = np.asarray(x, dtype=np.float64)
        py = np.asarray(y, dtype=np.float64)
        warp_x = self._perlin_2d(px * 0.1, py * 0.1) * warp_strength
        warp_y = self._perlin_2d((px + 100) * 0.1, (py + 100) * 0.1) * warp_strength
        return self._fractal(self._perlin_2d, px + warp_x, py + warp_y)

    # Helpers

    @staticmethod
    def normalize(value, out_min: float = -1.0, out_max: float = 1.0):
        """Map a nominal [-1, 1] value linearly onto [out_min, out_max].

        Values outside [-1, 1] are mapped, not clipped.
        """
        return (value + 1.0) * 0.5 * (out_max - out_min) + out_min

    @staticmethod
    def threshold(value, level: float):
        """1 where value exceeds level, else 0."""
        return np.where(np.asarray(value) > level, 1.0, 0.0)

    def _fractal(self, octave_fn, *coords: NDArray[np.float64]) -> NDArray[np.float64]:
        value = np.zeros(np.broadcast(*coords).shape, dtype=np.float64)
        amplitude = self.config.amplitude
        frequency = self.config.frequency

        for _ in range(self.config.octaves):
            value = value + octave_fn(*(c * frequency for c in coords)) * amplitude
            amplitude *= self.config.persistence
            frequency *= self.config.lacunarity

        return value

    def _perlin_2d(self, x: NDArray[np.float64], y: NDArray[np.float64]) -> NDArray[np.float64]:
        p = self._perm
        x0 = np.floor(x)
        y0 = np.floor(y)
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255
        xf = x - x0
        yf = y - y0
        u = _fade(xf)
        v = _fade(yf)

        aa = p[p[xi] + yi]
        ab = p[p[xi] + yi + 1]
        ba = p[p[xi + 1] + yi]
        bb = p[p[xi + 1] + yi + 1]

        x1 = _lerp(u, _grad_2d(aa, xf, yf), _grad_2d(ba, xf - 1, yf))
        x2 = _lerp(u, _grad_2d(ab, xf, yf - 1), _grad_2d(bb, xf - 1, yf - 1))
        return _lerp(v, x1, x2)

    def _perlin_3d(
        self, x: NDArray[np.float64], y: NDArray[np.float64], z: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        p = self._perm
        x0, y0, z0 = np.floor(x), np.floor(y), np.floor(z)
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255
        zi = z0.astype(np.int64) & 255
        xf, yf, zf = x - x0, y - y0, z - z0
        u, v, w = _fade(xf), _fade(yf), _fade(zf)

        a = p[xi] + yi
        b = p[xi + 1] + yi
        aaa = p[p[a] + zi]
        aba = p[p[a + 1] + zi]
        aab = p[p[a] + zi + 1]
        abb = p[p[a + 1] + zi + 1]
        baa = p[p[b] + zi]
        bba = p[p[b + 1] + zi]
        bab = p[p[b] + zi + 1]
        bbb = p[p[b + 1] + zi + 1]

        x1 = _lerp(u, _grad_3d(aaa, xf, yf, zf), _grad_3d(baa, xf - 1, yf, zf))
        x2 = _lerp(u, _grad_3d(aba, xf, yf - 1, zf), _grad_3d(bba, xf - 1, yf - 1, zf))
        x3 = _lerp(u, _grad_3d(aab, xf, yf, zf - 1), _grad_3d(bab, xf - 1, yf, zf - 1))
        x4 = _lerp(
            u, _grad_3d(abb, xf, yf - 1, zf - 1), _grad_3d(bbb, xf - 1, yf - 1, zf - 1)
        )
        return _lerp(w, _lerp(v, x1, x2), _lerp(v, x3, x4))
