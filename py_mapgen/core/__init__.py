"""
Core map generation functionality.
"""

from .alea_prng import AleaPRNG
from .triangulation import EMPTY, Triangulation, triangulate
from .dual_graph import CellPolygon, DualGraph, Edge
from .elevation import assign_elevation, elevation_at
from .biomes import BiomeClassifier, TerrainCategory
from .generator import Cell, MapGeneration, build_generation, generate_map
from .controller import ControllerState, RegenerationController

__all__ = ['AleaPRNG', 'EMPTY', 'Triangulation', 'triangulate',
           'CellPolygon', 'DualGraph', 'Edge',
           'assign_elevation', 'elevation_at',
           'BiomeClassifier', 'TerrainCategory',
           'Cell', 'MapGeneration', 'build_generation', 'generate_map',
           'ControllerState', 'RegenerationController']
