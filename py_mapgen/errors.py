"""Error types raised by the map generation pipeline."""


class MapgenError(Exception):
    """Base class for map generation errors."""


class DegenerateInputError(MapgenError):
    """Sites cannot be triangulated (too few, collinear or non-finite)."""


class IndexInvariantError(MapgenError):
    """Half-edge tables are inconsistent or a walk left the valid range.

    This signals a bug rather than bad input and is never recovered from.
    """


class ConfigurationOutOfRangeError(MapgenError, ValueError):
    """A settings value was rejected before any generation was attempted."""
