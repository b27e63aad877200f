"""Delaunay triangulation with half-edge adjacency for map sites."""

import numpy as np
import structlog
from dataclasses import dataclass
from typing import Dict, List, Tuple
from scipy.spatial import Delaunay, QhullError

from ..errors import DegenerateInputError, IndexInvariantError

logger = structlog.get_logger()

# Half-edge value for edges on the convex hull (no opposite edge).
EMPTY = -1


def edges_of_triangle(t: int) -> Tuple[int, int, int]:
    return 3 * t, 3 * t + 1, 3 * t + 2


def triangle_of_edge(e: int) -> int:
    return e // 3


def next_halfedge(e: int) -> int:
    """Next edge of the same triangle in winding order."""
    return e - 2 if e % 3 == 2 else e + 1


def prev_halfedge(e: int) -> int:
    """Previous edge of the same triangle in winding order."""
    return e + 2 if e % 3 == 0 else e - 1


@dataclass(frozen=True, eq=False)
class Triangulation:
    """Triangle index buffer plus half-edge adjacency.

    Half-edge ``e`` runs from site ``triangles[e]`` to site
    ``triangles[next_halfedge(e)]``; ``halfedges[e]`` is the edge running the
    other way in the neighbouring triangle, or ``EMPTY`` on the hull.
    """
    points: np.ndarray
    triangles: np.ndarray  # flat, 3 site indices per triangle, CCW
    halfedges: np.ndarray  # opposite half-edge or EMPTY
    hull: np.ndarray       # hull site indices, CCW

    @property
    def num_triangles(self) -> int:
        return len(self.triangles) // 3

    @property
    def num_sites(self) -> int:
        return len(self.points)

    def validate(self) -> None:
        """Raise IndexInvariantError if grouping or pairing is broken."""
        n = len(self.triangles)
        if len(self.halfedges) != n or n % 3 != 0:
            raise IndexInvariantError(
                f"triangles ({n}) and halfedges ({len(self.halfedges)}) "
                "must have equal length divisible by 3"
            )
        for e in range(n):
            f = int(self.halfedges[e])
            if f == EMPTY:
                continue
            if not 0 <= f < n or int(self.halfedges[f]) != e:
                raise IndexInvariantError(f"half-edge {e} -> {f} is not paired")


def _orient_counter_clockwise(points: np.ndarray, simplices: np.ndarray,
                              neighbors: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    a = points[simplices[:, 0]]
    b = points[simplices[:, 1]]
    c = points[simplices[:, 2]]
    cross = ((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1])
             - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0]))

    # neighbors[t, k] faces simplices[t, k], so both swap the same columns
    clockwise = cross < 0
    oriented = simplices.copy()
    oriented[clockwise, 1] = simplices[clockwise, 2]
    oriented[clockwise, 2] = simplices[clockwise, 1]
    adjacent = neighbors.copy()
    adjacent[clockwise, 1] = neighbors[clockwise, 2]
    adjacent[clockwise, 2] = neighbors[clockwise, 1]
    return oriented, adjacent


def build_halfedges(simplices: np.ndarray, neighbors: np.ndarray) -> np.ndarray:
    """
    Pair every half-edge with the reverse edge in the adjacent triangle.

    Args:
        simplices: (T, 3) CCW triangle vertices
        neighbors: (T, 3) triangle opposite each vertex, -1 on the hull

    Returns:
        Array of opposite half-edge indices, EMPTY where none exists

    Raises:
        IndexInvariantError: if an adjacent triangle does not share the edge
    """
    n_triangles = len(simplices)
    t = np.repeat(np.arange(n_triangles), 3)
    i = np.tile(np.arange(3), n_triangles)

    # Edge 3t+i runs simplices[t, i] -> simplices[t, i+1], facing vertex i+2
    adjacent = neighbors[t, (i + 2) % 3]
    end = simplices[t, (i + 1) % 3]

    halfedges = np.full(3 * n_triangles, EMPTY, dtype=np.int64)
    paired = np.flatnonzero(adjacent != -1)
    matches = simplices[adjacent[paired]] == end[paired, None]
    if not matches.any(axis=1).all():
        raise IndexInvariantError("adjacent triangles do not share an edge")
    halfedges[paired] = 3 * adjacent[paired] + matches.argmax(axis=1)

    if np.any(halfedges[halfedges[paired]] != paired):
        raise IndexInvariantError("half-edges are not paired both ways")
    return halfedges

def build_hull(triangles: np.ndarray, halfedges: np.ndarray) -> np.ndarray:
    """
    Order the hull sites by following unpaired half-edges.

    Starts at the smallest hull site index so the result only depends on
    the tables.
    """
    hull_out: Dict[int, int] = {}
    for e in np.flatnonzero(halfedges == EMPTY):
        start = int(triangles[e])
        if start in hull_out:
            raise IndexInvariantError(f"site {start} has two outgoing hull edges")
        hull_out[start] = int(e)

    if not hull_out:
        return np.empty(0, dtype=np.int64)

    first = min(hull_out)
    hull: List[int] = []
    site = first
    for _ in range(len(hull_out)):
        hull.append(site)
        site = int(triangles[next_halfedge(hull_out[site])])
        if site == first:
            break
        if site not in hull_out:
            raise IndexInvariantError(f"hull walk reached non-hull site {site}")
    else:
        raise IndexInvariantError("hull walk did not return to its start")

    return np.array(hull, dtype=np.int64)


def triangulate(points: np.ndarray) -> Triangulation:
    """
    Triangulate sites and derive half-edge adjacency and the convex hull.

    Args:
        points: Array of [x, y] site coordinates

    Returns:
        Triangulation over the sites

    Raises:
        DegenerateInputError: fewer than 3 sites, non-finite coordinates, or
            a configuration Qhull cannot triangulate (e.g. all collinear)
    """
    points = np.array(points, dtype=np.float64).reshape(-1, 2)

    if len(points) < 3:
        raise DegenerateInputError(f"need at least 3 sites, got {len(points)}")
    if not np.all(np.isfinite(points)):
        raise DegenerateInputError("site coordinates must be finite")

    try:
        delaunay = Delaunay(points)
    except QhullError as exc:
        raise DegenerateInputError(f"sites cannot be triangulated: {exc}") from exc

    simplices = np.asarray(delaunay.simplices, dtype=np.int64)
    if len(simplices) == 0:
        raise DegenerateInputError("triangulation produced no triangles")

    if len(delaunay.coplanar):
        logger.warning("Sites left out of triangulation",
                       count=len(delaunay.coplanar))

    points.setflags(write=False)
    simplices, neighbors = _orient_counter_clockwise(
        points, simplices, np.asarray(delaunay.neighbors, dtype=np.int64))
    triangles = simplices.ravel()
    halfedges = build_halfedges(simplices, neighbors)
    hull = build_hull(triangles, halfedges)

    logger.info("Triangulation built", sites=len(points),
                triangles=len(simplices), hull=len(hull))

    return Triangulation(points=points, triangles=triangles,
                         halfedges=halfedges, hull=hull)
