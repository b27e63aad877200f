"""Lloyd relaxation of sites over their centroid-dual cells."""

import numpy as np
import structlog
from typing import Optional, Tuple

from .dual_graph import DualGraph
from .triangulation import triangulate

logger = structlog.get_logger()


def compute_polygon_centroid(vertices: np.ndarray) -> np.ndarray:
    """Compute the area centroid of a polygon.

    Args:
        vertices: Array of [x, y] vertex coordinates

    Returns:
        [x, y] centroid coordinates
    """
    if len(vertices) < 3:
        return np.mean(vertices, axis=0)

    # Shoelace formula
    x = vertices[:, 0]
    y = vertices[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    area = cross.sum()

    if abs(area) < 1e-10:
        return np.mean(vertices, axis=0)

    area *= 0.5
    cx = ((x + x_next) * cross).sum() / (6.0 * area)
    cy = ((y + y_next) * cross).sum() / (6.0 * area)
    return np.array([cx, cy])


def relax_points(points: np.ndarray, iterations: int,
                 bounds: Optional[Tuple[np.ndarray, np.ndarray]] = None) -> np.ndarray:
    """
    Move each site towards the centroid of its dual cell.

    Only sites with closed cells move; hull sites keep their position so the
    map outline does not shrink. Moved sites are clamped to ``bounds``, which
    defaults to the bounding box of the input sites.

    Args:
        points: Sites to relax
        iterations: Number of relaxation passes
        bounds: (lower, upper) [x, y] corners for moved sites

    Returns:
        Relaxed copy of ``points``

    Raises:
        DegenerateInputError: if the sites cannot be triangulated
    """
    points = np.array(points, dtype=np.float64, copy=True)
    if iterations <= 0 or len(points) == 0:
        return points

    if bounds is None:
        lower, upper = points.min(axis=0), points.max(axis=0)
    else:
        lower, upper = (np.asarray(b, dtype=np.float64) for b in bounds)

    logger.info("Starting Lloyd's relaxation", iterations=iterations)

    for iteration in range(iterations):
        graph = DualGraph(triangulate(points))
        moved = 0
        for cell in graph.iter_cells():
            if not cell.closed:
                continue
            centroid = compute_polygon_centroid(cell.vertices)
            points[cell.site_index] = np.clip(centroid, lower, upper)
            moved += 1

        logger.debug("Relaxation iteration complete",
                     iteration=iteration + 1, moved=moved)

    return points
