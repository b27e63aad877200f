"""
Centroid-dual cells reconstructed from a half-edge triangulation.

Each site's cell is the loop of centroids of the triangles around it,
found by rotating through the half-edges that point at the site. Sites on
the convex hull get open loops: the rotation stops at the hull edge
instead of coming back to where it started.
"""

import numpy as np
import structlog
from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, List, NamedTuple, Set, Tuple

from ..errors import IndexInvariantError
from .triangulation import (
    EMPTY,
    Triangulation,
    next_halfedge,
    prev_halfedge,
    triangle_of_edge,
)

logger = structlog.get_logger()

Point = Tuple[float, float]


class Edge(NamedTuple):
    """Segment emitted for debug drawing, tagged with its half-edge."""
    edge: int
    start: Point
    end: Point


@dataclass(frozen=True, eq=False)
class CellPolygon:
    """Loop of triangle centroids around one site."""
    site_index: int
    vertices: np.ndarray   # (k, 2) centroids in walk order
    triangles: np.ndarray  # triangle ids in walk order
    closed: bool


class DualGraph:
    """Dual cells and edges of a Triangulation."""

    def __init__(self, triangulation: Triangulation):
        self.triangulation = triangulation
        self.points = triangulation.points
        self.triangles = triangulation.triangles
        self.halfedges = triangulation.halfedges

    next_halfedge = staticmethod(next_halfedge)
    prev_halfedge = staticmethod(prev_halfedge)

    def centroids(self) -> np.ndarray:
        """Mean of the three vertices of every triangle, shape (T, 2)."""
        return self._centroids

    @cached_property
    def _centroids(self) -> np.ndarray:
        corners = self.points[self.triangles].reshape(-1, 3, 2)
        centroids = corners.sum(axis=1) / 3.0
        centroids.setflags(write=False)
        return centroids

    @cached_property
    def inedges(self) -> np.ndarray:
        """
        One incoming half-edge per site, EMPTY for untriangulated sites.

        Hull sites get their incoming hull edge, which is where the
        rotation around them has to start to reach every triangle.
        """
        inedges = np.full(len(self.points), EMPTY, dtype=np.int64)
        for e in range(len(self.triangles)):
            site = self.triangles[next_halfedge(e)]
            if self.halfedges[e] == EMPTY or inedges[site] == EMPTY:
                inedges[site] = e
        return inedges

    def cell_for_site(self, start_edge: int) -> CellPolygon:
        """
        Walk around the site that ``start_edge`` points at.

        Args:
            start_edge: Half-edge whose end is the site

        Returns:
            CellPolygon, closed if the walk came back to ``start_edge`` and
            open if it ran into the hull

        Raises:
            IndexInvariantError: start edge out of range, or the walk did
                not terminate within the number of half-edges
        """
        n_edges = len(self.triangles)
        if not 0 <= start_edge < n_edges:
            raise IndexInvariantError(
                f"start edge {start_edge} outside [0, {n_edges})")

        site = int(self.triangles[next_halfedge(start_edge)])
        visited: List[int] = []
        incoming = start_edge
        closed = False

        for _ in range(n_edges):
            visited.append(triangle_of_edge(incoming))
            outgoing = next_halfedge(incoming)
            incoming = int(self.halfedges[outgoing])
            if incoming == EMPTY:
                break
            if incoming == start_edge:
                closed = True
                break
            if not 0 <= incoming < n_edges:
                raise IndexInvariantError(
                    f"half-edge {outgoing} points at {incoming}")
        else:
            raise IndexInvariantError(
                f"walk around site {site} did not terminate")

        triangles = np.array(visited, dtype=np.int64)
        return CellPolygon(
            site_index=site,
            vertices=self._centroids[triangles],
            triangles=triangles,
            closed=closed,
        )

    def cell_for_site_index(self, site: int) -> CellPolygon:
        start = int(self.inedges[site])
        if start == EMPTY:
            raise IndexInvariantError(f"site {site} is not in the triangulation")
        return self.cell_for_site(start)

    def iter_cells(self) -> Iterator[CellPolygon]:
        seen: Set[int] = set()
        for e in range(len(self.triangles)):
            site = int(self.triangles[next_halfedge(e)])
            if site in seen:
                continue
            seen.add(site)
            yield self.cell_for_site(int(self.inedges[site]))

    def cells(self) -> List[CellPolygon]:
        """One cell per triangulated site, in half-edge order."""
        cells = list(self.iter_cells())
        logger.info("Dual cells built", cells=len(cells),
                    open=sum(1 for cell in cells if not cell.closed))
        return cells

    def triangle_edges(self) -> List[Edge]:
        """Every Delaunay edge once, hull edges included."""
        edges = []
        for e in range(len(self.triangles)):
            if e > self.halfedges[e]:
                start = self.points[self.triangles[e]]
                end = self.points[self.triangles[next_halfedge(e)]]
                edges.append(Edge(e, _as_point(start), _as_point(end)))
        return edges

    def dual_edges(self) -> List[Edge]:
        """Centroid-to-centroid segments across every interior edge, once."""
        centroids = self._centroids
        edges = []
        for e in range(len(self.triangles)):
            opposite = int(self.halfedges[e])
            if opposite != EMPTY and e < opposite:
                start = centroids[triangle_of_edge(e)]
                end = centroids[triangle_of_edge(opposite)]
                edges.append(Edge(e, _as_point(start), _as_point(end)))
        return edges


def _as_point(row: np.ndarray) -> Point:
    return float(row[0]), float(row[1])
