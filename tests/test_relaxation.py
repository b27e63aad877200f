"""Tests for Lloyd relaxation of sites."""

import pytest
import numpy as np
from py_mapgen.core.alea_prng import AleaPRNG
from py_mapgen.core.dual_graph import DualGraph
from py_mapgen.core.point_sampler import get_jittered_grid
from py_mapgen.core.relaxation import compute_polygon_centroid, relax_points
from py_mapgen.core.triangulation import triangulate


class TestPolygonCentroid:
    """Test polygon centroid helper."""

    def test_square(self):
        square = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
        np.testing.assert_allclose(compute_polygon_centroid(square), [0.5, 0.5])

    def test_two_points_fall_back_to_mean(self):
        segment = np.array([[0.0, 0.0], [2.0, 4.0]])
        np.testing.assert_allclose(compute_polygon_centroid(segment), [1.0, 2.0])



class TestRelaxPoints:
    """Test relaxation passes."""

    def test_zero_iterations_is_a_copy(self):
        points = get_jittered_grid(6, 1.0, AleaPRNG(3))
        relaxed = relax_points(points, 0)
        np.testing.assert_array_equal(relaxed, points)
        assert relaxed is not points

    def test_hull_sites_fixed_interior_moved(self):
        points = get_jittered_grid(10, 1.0, AleaPRNG(3))
        hull = triangulate(points).hull
        relaxed = relax_points(points, 2)

        np.testing.assert_array_equal(relaxed[hull], points[hull])
        interior = np.setdiff1d(np.arange(len(points)), hull)
        assert np.any(relaxed[interior] != points[interior])

    def test_stays_in_input_bounding_box(self):
        points = get_jittered_grid(10, 4.0, AleaPRNG(3))
        relaxed = relax_points(points, 3)
        assert np.all(relaxed >= points.min(axis=0))
        assert np.all(relaxed <= points.max(axis=0))

    def test_explicit_bounds(self):
        points = get_jittered_grid(10, 1.0, AleaPRNG(3))
        relaxed = relax_points(points, 3, bounds=([0.0, 0.0], [10.0, 10.0]))
        interior = np.setdiff1d(np.arange(len(points)), triangulate(points).hull)
        assert np.all(relaxed[interior] >= 0.0)
        assert np.all(relaxed[interior] <= 10.0)

    def test_deterministic(self):
        points = get_jittered_grid(8, 1.0, AleaPRNG(4))
        np.testing.assert_array_equal(relax_points(points, 2),
                                      relax_points(points, 2))

    @pytest.mark.parametrize("jitter", [0.5, 1.0, 3.0, 10.0])
    @pytest.mark.parametrize("seed", [0, 1, 6, 8])
    def test_every_site_keeps_a_cell(self, jitter, seed):
        points = get_jittered_grid(10, jitter, AleaPRNG(seed))
        relaxed = relax_points(points, 5)

        assert len(np.unique(relaxed, axis=0)) == len(points)
        cells = DualGraph(triangulate(relaxed)).cells()
        assert sorted(cell.site_index for cell in cells) == list(range(len(points)))
