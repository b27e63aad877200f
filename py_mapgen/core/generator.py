"""
One-shot map generation pipeline.

sites -> (relaxation) -> elevation -> triangulation -> dual cells -> biomes.
Everything here is a pure function of the settings and the sampled sites;
the RegenerationController decides when to run it and what to expose.
"""

import numpy as np
import structlog
from dataclasses import dataclass, replace
from typing import Any, Iterator, Optional, Tuple

from ..config.mapgen_settings import MapgenSettings
from .alea_prng import AleaPRNG
from .biomes import BiomeClassifier
from .dual_graph import DualGraph
from .elevation import assign_elevation
from .point_sampler import sample_sites
from .relaxation import relax_points
from .triangulation import Triangulation, triangulate

logger = structlog.get_logger()


@dataclass(frozen=True, eq=False)
class Cell:
    """A map cell as handed to the renderer."""
    site_index: int
    vertices: np.ndarray  # (k, 2) triangle centroids in walk order
    closed: bool          # False for sites on the convex hull
    elevation: float
    biome: Any

    def segments(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Boundary segments; open cells have no closing segment."""
        for i in range(len(self.vertices) - 1):
            yield self.vertices[i], self.vertices[i + 1]
        if self.closed and len(self.vertices) > 2:
            yield self.vertices[-1], self.vertices[0]

    def with_biome(self, biome) -> "Cell":
        return replace(self, biome=biome)


@dataclass(frozen=True, eq=False)
class MapGeneration:
    """Complete output of one pipeline run."""
    settings: MapgenSettings
    sites: np.ndarray
    triangulation: Optional[Triangulation]
    centroids: np.ndarray
    cells: Tuple[Cell, ...]
    elevation: np.ndarray

    @classmethod
    def empty(cls, settings: MapgenSettings) -> "MapGeneration":
        return cls(
            settings=settings,
            sites=np.empty((0, 2), dtype=np.float64),
            triangulation=None,
            centroids=np.empty((0, 2), dtype=np.float64),
            cells=(),
            elevation=np.empty(0, dtype=np.float64),
        )

    @property
    def is_empty(self) -> bool:
        return len(self.cells) == 0


def build_generation(settings: MapgenSettings, points: np.ndarray) -> MapGeneration:
    """
    Run every stage after sampling.

    Args:
        settings: Run settings
        points: Sampled sites

    Returns:
        MapGeneration; empty when there are no sites

    Raises:
        DegenerateInputError: if the sites cannot be triangulated
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(points) == 0:
        logger.info("No sites to generate from")
        return MapGeneration.empty(settings)

    if settings.relaxation_iterations:
        points = relax_points(points, settings.relaxation_iterations)

    elevation = assign_elevation(points, settings.seed, settings.effective_domain_size)

    triangulation = triangulate(points)
    graph = DualGraph(triangulation)
    classifier = BiomeClassifier.from_settings(settings)

    cells = tuple(
        Cell(
            site_index=polygon.site_index,
            vertices=polygon.vertices,
            closed=polygon.closed,
            elevation=float(elevation[polygon.site_index]),
            biome=classifier.category(elevation[polygon.site_index]),
        )
        for polygon in graph.cells()
    )

    elevation.setflags(write=False)
    return MapGeneration(
        settings=settings,
        sites=triangulation.points,
        triangulation=triangulation,
        centroids=graph.centroids(),
        cells=cells,
        elevation=elevation,
    )


def generate_map(settings: MapgenSettings, prng: Optional[AleaPRNG] = None) -> MapGeneration:
    """Sample sites from ``settings`` and run the full pipeline."""
    logger.info("Generating map", seed=settings.seed,
                grid_size=settings.grid_size, jitter=settings.jitter)
    points = sample_sites(settings, prng)
    return build_generation(settings, points)
