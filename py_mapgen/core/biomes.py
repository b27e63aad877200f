"""Terrain categories derived from the elevation field."""

import numpy as np
import structlog
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from ..errors import ConfigurationOutOfRangeError

logger = structlog.get_logger()


class TerrainCategory(str, Enum):
    """Default two-way split of the elevation field."""

    LOW = "low"
    HIGH = "high"


# HSL colours for display
CATEGORY_COLORS: Dict[TerrainCategory, Tuple[float, float, float]] = {
    TerrainCategory.LOW: (240.0, 0.3, 0.5),
    TerrainCategory.HIGH: (90.0, 0.3, 0.5),
}

DEFAULT_THRESHOLD = 0.65


class BiomeClassifier:
    """
    Partition elevation by an ordered list of thresholds.

    ``thresholds[i]`` separates ``categories[i]`` from ``categories[i + 1]``;
    a value equal to a threshold belongs to the upper category.
    """

    def __init__(self, thresholds: Sequence[float] = (DEFAULT_THRESHOLD,),
                 categories: Optional[Sequence] = None):
        thresholds = np.asarray(thresholds, dtype=np.float64)
        if thresholds.ndim != 1 or len(thresholds) == 0:
            raise ConfigurationOutOfRangeError("at least one threshold is required")
        if not np.all(np.isfinite(thresholds)):
            raise ConfigurationOutOfRangeError("thresholds must be finite")
        if np.any(np.diff(thresholds) <= 0):
            raise ConfigurationOutOfRangeError("thresholds must be strictly increasing")

        if categories is None:
            if len(thresholds) != 1:
                raise ConfigurationOutOfRangeError(
                    "categories are required for more than one threshold")
            categories = (TerrainCategory.LOW, TerrainCategory.HIGH)
        if len(categories) != len(thresholds) + 1:
            raise ConfigurationOutOfRangeError(
                f"{len(thresholds)} thresholds need {len(thresholds) + 1} "
                f"categories, got {len(categories)}")

        self.thresholds = thresholds
        self.categories = tuple(categories)

    @classmethod
    def from_settings(cls, settings) -> "BiomeClassifier":
        return cls(thresholds=(settings.elevation_threshold,))

    def category(self, elevation: float):
        index = int(np.searchsorted(self.thresholds, elevation, side="right"))
        return self.categories[index]

    def classify(self, elevation: np.ndarray) -> list:
        """Category of every entry of an elevation field."""
        indices = np.searchsorted(self.thresholds, np.asarray(elevation), side="right")
        return [self.categories[i] for i in indices]
