"""
Island elevation from simplex noise and a square falloff.

Coordinates are normalized to ``nx = x / D - 0.5`` (same for y), so the
domain centre maps to (0, 0) and its corners to (+-0.5, +-0.5). The falloff
``d = 2 * max(|nx|, |ny|)`` is 0 at the centre and 1 on the domain border,
which gives the map a square island outline whatever the noise does.
"""

import numpy as np
import structlog
from typing import Optional, Protocol
from opensimplex import OpenSimplex

logger = structlog.get_logger()

DEFAULT_DOMAIN_SIZE = 25.0
NOISE_SCALE = 0.5


class NoiseSource(Protocol):
    def noise2(self, x: float, y: float) -> float:
        ...


def noise_seed(seed: int) -> int:
    """Fold a 64-bit map seed into the 32-bit noise seed."""
    return seed & 0xFFFFFFFF


def elevation_at(x: float, y: float, noise: NoiseSource,
                 domain_size: float = DEFAULT_DOMAIN_SIZE) -> float:
    """
    Elevation of a single site.

    Args:
        x, y: Site coordinates
        noise: 2D coherent noise field returning values in [-1, 1]
        domain_size: Normalization extent D

    Returns:
        Elevation, around 1 at the domain centre and 0.5 or less at its edges
    """
    nx = x / domain_size - 0.5
    ny = y / domain_size - 0.5

    noise_sample = noise.noise2(nx / NOISE_SCALE, ny / NOISE_SCALE) / 2.0
    raw = 1.0 + noise_sample

    d = 2.0 * max(abs(nx), abs(ny))
    return (1.0 + raw - d) / 2.0


def assign_elevation(points: np.ndarray, seed: int,
                     domain_size: float = DEFAULT_DOMAIN_SIZE,
                     noise: Optional[NoiseSource] = None) -> np.ndarray:
    """
    Compute the elevation field for all sites.

    Args:
        points: Array of [x, y] site coordinates
        seed: Map seed, folded to 32 bits for the noise generator
        domain_size: Normalization extent D
        noise: Noise source override, OpenSimplex(seed) by default

    Returns:
        Array of elevations indexed by site
    """
    if domain_size <= 0:
        raise ValueError(f"domain_size must be positive, got {domain_size}")
    if noise is None:
        noise = OpenSimplex(noise_seed(seed))

    elevation = np.empty(len(points), dtype=np.float64)
    for i, (x, y) in enumerate(points):
        elevation[i] = elevation_at(float(x), float(y), noise, domain_size)

    if len(elevation):
        logger.info("Elevation assigned", sites=len(elevation),
                    min=float(elevation.min()), max=float(elevation.max()))
    return elevation
