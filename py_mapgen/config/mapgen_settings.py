"""
Per-run generation settings.

A MapgenSettings value is frozen: changing anything means building a new
record, which is validated before it can reach the pipeline.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Dict, Optional

from ..errors import ConfigurationOutOfRangeError

MAX_SEED = 2 ** 64 - 1


class MapgenSettings(BaseModel):
    """Inputs of one regeneration."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    seed: int = Field(default=0xDEADBEEF, ge=0, le=MAX_SEED, description="Map seed (uint64)")
    grid_size: int = Field(default=20, ge=0, description="Sites per grid side")
    jitter: float = Field(default=1.0, ge=0.0, description="Site jitter scale")
    elevation_threshold: float = Field(default=0.65, description="Low/high elevation cutoff")
    domain_size: Optional[float] = Field(
        default=None, gt=0.0,
        description="Elevation normalization extent, grid_size when unset",
    )
    relaxation_iterations: int = Field(default=0, ge=0, description="Lloyd relaxation passes")

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationOutOfRangeError(str(exc)) from exc

    @property
    def effective_domain_size(self) -> float:
        if self.domain_size is not None:
            return self.domain_size
        return float(max(self.grid_size, 1))

    @classmethod
    def from_settings(cls, settings) -> "MapgenSettings":
        """Build the run record from application Settings defaults."""
        return validate_settings({
            "seed": settings.default_seed,
            "grid_size": settings.default_grid_size,
            "jitter": settings.default_jitter,
            "elevation_threshold": settings.default_elevation_threshold,
            "domain_size": settings.default_domain_size,
            "relaxation_iterations": settings.default_relaxation_iterations,
        })

    def updated(self, **changes: Any) -> "MapgenSettings":
        """Validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return validate_settings(data)


def validate_settings(data: Dict[str, Any]) -> MapgenSettings:
    """
    Validate raw settings values.

    Raises:
        ConfigurationOutOfRangeError: if any value is missing its constraints
    """
    try:
        return MapgenSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationOutOfRangeError(str(exc)) from exc
