"""Procedural island map generation over a centroid-dual cell mesh."""

__version__ = "0.1.0"
