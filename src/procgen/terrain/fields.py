"""Base field generation for terrain: elevation, temperature, humidity, slope."""

import numpy as np
from numpy.typing import NDArray

from ..noise import NoiseSource


def make_elevation(
    width: int,
    height: int,
    noise: NoiseSource,
    height_multiplier: float,
) -> NDArray[np.float64]:
    """Generate the elevation field.

    Args:
        width: Map width in cells.
        height: Map height in cells.
        noise: Elevation noise source.
        height_multiplier: Elevation of a normalized value of 1.

    Returns:
        2D elevation array in [0, height_multiplier] for nominal noise.
    """
    raw = noise.sample_grid(width, height)
    return noise.normalize(raw, 0.0, 1.0) * height_multiplier


def latitude_factor(height: int) -> NDArray[np.float64]:
    """Per-row distance from the equator, 0 at the middle row and 1 at the poles."""
    half = height / 2
    rows = np.arange(height, dtype=np.float64)
    return np.abs(rows - half) / half


def make_temperature(
    width: int,
    height: int,
    noise: NoiseSource,
    elevation: NDArray[np.float64],
    height_multiplier: float,
) -> NDArray[np.float64]:
    """Generate the temperature field.

    Base noise in [-1, 1] is damped toward zero on high ground and at the
    poles (up to 70% at the pole rows).
    """
    base = noise.normalize(noise.sample_grid(width, height), -1.0, 1.0)
    elevation_factor = np.maximum(0.0, 1.0 - elevation / height_multiplier)
    latitude = latitude_factor(height)[:, np.newaxis]
    return base * elevation_factor * (1.0 - latitude * 0.7)


def make_humidity(
    width: int,
    height: int,
    noise: NoiseSource,
    elevation: NDArray[np.float64],
    height_multiplier: float,
) -> NDArray[np.float64]:
    """Generate the humidity field; peaks lose up to 30%."""
    base = noise.normalize(noise.sample_grid(width, height), -1.0, 1.0)
    return base * (1.0 - elevation / height_multiplier * 0.3)


def compute_slope(elevation: NDArray[np.float64]) -> NDArray[np.float64]:
    """Compute slope magnitude from elevation.

    Args:
        elevation: 2D elevation array.

    Returns:
        2D slope magnitude array (|gradient|). Axes of length 1 contribute
        no gradient.
    """
    grad_y = (
        np.gradient(elevation, axis=0)
        if elevation.shape[0] > 1
        else np.zeros_like(elevation)
    )
    grad_x = (
        np.gradient(elevation, axis=1)
        if elevation.shape[1] > 1
        else np.zeros_like(elevation)
    )
    return np.sqrt(grad_x**2 + grad_y**2)
