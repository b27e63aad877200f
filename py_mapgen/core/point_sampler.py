"""Jittered grid sampling of map sites."""

import numpy as np
import structlog
from typing import Optional

from .alea_prng import AleaPRNG

logger = structlog.get_logger()


def get_jittered_grid(grid_size: int, jitter: float, prng: AleaPRNG) -> np.ndarray:
    """
    Generate a jittered square grid of sites.

    Integer lattice points (x, y) for x, y in [0, grid_size) are each moved
    by ``jitter * (u1 - u2)`` per axis, with all draws taken from ``prng``.
    x is the outer loop, so site ``x * grid_size + y`` sits near (x, y).

    Args:
        grid_size: Number of lattice points per side
        jitter: Maximum deviation scale, non-negative
        prng: Stream to draw from; the caller is responsible for seeding

    Returns:
        Array of shape (grid_size ** 2, 2) with [x, y] coordinates
    """
    points = np.empty((grid_size * grid_size, 2), dtype=np.float64)

    i = 0
    for x in range(grid_size):
        for y in range(grid_size):
            u1, u2 = prng.random_pair()
            u3, u4 = prng.random_pair()
            points[i, 0] = x + jitter * (u1 - u2)
            points[i, 1] = y + jitter * (u3 - u4)
            i += 1

    return points


def sample_sites(settings, prng: Optional[AleaPRNG] = None) -> np.ndarray:
    """Re-seed ``prng`` from ``settings.seed`` and sample the site grid."""
    if prng is None:
        prng = AleaPRNG(settings.seed)
    else:
        prng.reseed(settings.seed)

    points = get_jittered_grid(settings.grid_size, settings.jitter, prng)
    logger.info("Sites sampled", count=len(points),
                grid_size=settings.grid_size, jitter=settings.jitter)
    return points
