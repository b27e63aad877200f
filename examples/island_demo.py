#!/usr/bin/env python3
"""
Simple demo script showing island generation through the controller.
"""

import numpy as np
from py_mapgen.config import MapgenSettings, settings
from py_mapgen.core import RegenerationController, TerrainCategory
from py_mapgen.utils.logging import configure_logging


class PrintingSink:
    """Stand-in renderer that just reports what it would draw."""

    def replace_cells(self, cells, elevation):
        open_cells = sum(1 for cell in cells if not cell.closed)
        print(f"  Showing {len(cells)} cells ({open_cells} open on the hull)")

    def update_biomes(self, cells):
        high = sum(1 for cell in cells if cell.biome == TerrainCategory.HIGH)
        print(f"  Recoloured: {high} high / {len(cells) - high} low")


def main():
    """Demonstrate island generation."""
    configure_logging(settings.log_level, "console")

    print("Py-Mapgen Island Generation Demo")
    print("=" * 40)

    controller = RegenerationController(MapgenSettings.from_settings(settings),
                                        sink=PrintingSink())

    print(f"\nGenerating {controller.settings.grid_size}x{controller.settings.grid_size} island...")
    controller.regenerate()

    elevation = controller.elevation
    print(f"  Elevation range: {elevation.min():.3f}-{elevation.max():.3f}")
    print(f"  Mean elevation: {np.mean(elevation):.3f}")

    print("\nRaising the threshold without regenerating...")
    controller.update_settings(elevation_threshold=0.8)

    print("\nSeveral triggers in one frame collapse to one regeneration...")
    controller.update_settings(seed=42)
    for _ in range(5):
        controller.request_regeneration()
    controller.tick()
    print(f"  Successful regenerations so far: {controller.regenerations}")

    print("\nA 1x1 grid cannot be triangulated; previous output is kept...")
    controller.update_settings(grid_size=1)
    controller.regenerate()
    print(f"  Error: {controller.last_error}")
    print(f"  Still showing {len(controller.cells)} cells")


if __name__ == "__main__":
    main()
