"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .mapgen_settings import MapgenSettings, validate_settings

__all__ = ['Settings', 'settings', 'MapgenSettings', 'validate_settings']
