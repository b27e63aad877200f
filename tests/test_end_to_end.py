"""End-to-end tests of the generation pipeline."""

import pytest
import numpy as np
from py_mapgen.config import MapgenSettings
from py_mapgen.core import RegenerationController, generate_map
from py_mapgen.core.biomes import BiomeClassifier


class TestLatticeScenario:
    """seed 0xDEADBEEF, 3x3 grid, no jitter."""

    @pytest.fixture
    def generation(self):
        settings = MapgenSettings(seed=0xDEADBEEF, grid_size=3, jitter=0.0)
        controller = RegenerationController(settings)
        controller.regenerate()
        return controller.generation

    def test_sites_on_lattice(self, generation):
        expected = np.array([[x, y] for x in range(3) for y in range(3)], dtype=float)
        np.testing.assert_array_equal(generation.sites, expected)

    def test_eight_triangles(self, generation):
        assert generation.triangulation.num_triangles == 8
        assert generation.centroids.shape == (8, 2)

    def test_nine_cells(self, generation):
        assert len(generation.cells) == 9
        assert sorted(cell.site_index for cell in generation.cells) == list(range(9))

    def test_open_cells_match_hull(self, generation):
        hull = set(generation.triangulation.hull.tolist())
        assert hull == {0, 1, 2, 3, 5, 6, 7, 8}
        for cell in generation.cells:
            assert cell.closed == (cell.site_index not in hull)

    def test_centre_cell_closed(self, generation):
        centre = next(cell for cell in generation.cells if cell.site_index == 4)
        assert centre.closed
        assert len(centre.vertices) >= 4
        segments = list(centre.segments())
        assert len(segments) == len(centre.vertices)

    def test_open_cells_have_no_closing_segment(self, generation):
        for cell in generation.cells:
            if not cell.closed:
                assert len(list(cell.segments())) == max(len(cell.vertices) - 1, 0)

    def test_cells_carry_elevation_and_biome(self, generation):
        classifier = BiomeClassifier()
        for cell in generation.cells:
            assert cell.elevation == generation.elevation[cell.site_index]
            assert cell.biome == classifier.category(cell.elevation)


class TestPipeline:
    """Test the full pipeline on jittered grids."""

    @pytest.mark.parametrize("grid_size,jitter", [(5, 0.5), (10, 1.0), (16, 0.25)])
    def test_every_site_gets_a_cell(self, grid_size, jitter):
        settings = MapgenSettings(seed=2024, grid_size=grid_size, jitter=jitter)
        generation = generate_map(settings)

        assert len(generation.sites) == grid_size ** 2
        assert len(generation.cells) == grid_size ** 2
        assert generation.elevation.shape == (grid_size ** 2,)
        generation.triangulation.validate()

    def test_bit_identical_runs(self):
        settings = MapgenSettings(seed=77, grid_size=12, jitter=1.0)
        a = generate_map(settings)
        b = generate_map(settings)

        np.testing.assert_array_equal(a.sites, b.sites)
        np.testing.assert_array_equal(a.triangulation.triangles, b.triangulation.triangles)
        np.testing.assert_array_equal(a.triangulation.halfedges, b.triangulation.halfedges)
        np.testing.assert_array_equal(a.elevation, b.elevation)
        assert [c.site_index for c in a.cells] == [c.site_index for c in b.cells]

    def test_island_shape(self):
        """Test that the centre of the map is higher than its border on average."""
        generation = generate_map(MapgenSettings(seed=5, grid_size=20, jitter=0.5))
        sites = generation.sites
        centre = np.all(np.abs(sites - 9.5) < 3, axis=1)
        border = np.any((sites < 2) | (sites > 17), axis=1)
        assert generation.elevation[centre].mean() > generation.elevation[border].mean()

    def test_relaxation_enabled(self):
        settings = MapgenSettings(seed=5, grid_size=8, jitter=1.0, relaxation_iterations=2)
        relaxed = generate_map(settings)
        plain = generate_map(settings.updated(relaxation_iterations=0))
        assert len(relaxed.cells) == 64
        assert not np.array_equal(relaxed.sites, plain.sites)

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("jitter,iterations", [(3.0, 1), (10.0, 1), (10.0, 50)])
    def test_relaxation_keeps_every_cell(self, seed, jitter, iterations):
        settings = MapgenSettings(seed=seed, grid_size=10, jitter=jitter,
                                  relaxation_iterations=iterations)
        generation = generate_map(settings)
        assert len(generation.cells) == 100
        assert len(generation.elevation) == 100
        assert sorted(cell.site_index for cell in generation.cells) == list(range(100))

    def test_empty_grid(self):
        generation = generate_map(MapgenSettings(grid_size=0))
        assert generation.is_empty
        assert generation.triangulation is None
