"""
Regeneration controller.

Owns the run settings and the seeded stream, runs the pipeline when a
regeneration has been requested, and exposes the latest successful output.
Triggers are coalesced: any number of requests before the next tick lead
to a single regeneration, and a request made while a regeneration is in
flight leads to exactly one more right after it.
"""

import numpy as np
import structlog
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple

from ..config.mapgen_settings import MapgenSettings
from ..errors import DegenerateInputError, IndexInvariantError
from .alea_prng import AleaPRNG
from .biomes import BiomeClassifier
from .generator import Cell, MapGeneration, generate_map

logger = structlog.get_logger()

Pipeline = Callable[[MapgenSettings, AleaPRNG], MapGeneration]


class ControllerState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"


class CellSink(Protocol):
    """Renderer-side collaborator receiving the exposed cells."""

    def replace_cells(self, cells: Sequence[Cell], elevation: np.ndarray) -> None:
        """Drop every previously shown cell, then show ``cells``."""

    def update_biomes(self, cells: Sequence[Cell]) -> None:
        """Recolour the shown cells without replacing them."""


class RegenerationController:
    """Idle/Generating state machine around the generation pipeline."""

    def __init__(self, settings: Optional[MapgenSettings] = None,
                 sink: Optional[CellSink] = None,
                 pipeline: Pipeline = generate_map):
        self._settings = settings or MapgenSettings()
        self._sink = sink
        self._pipeline = pipeline
        self._prng = AleaPRNG(self._settings.seed)

        self._state = ControllerState.IDLE
        self._pending = False
        self._generation = MapGeneration.empty(self._settings)
        self._last_error: Optional[Exception] = None
        self._regenerations = 0

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def settings(self) -> MapgenSettings:
        return self._settings

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def generation(self) -> MapGeneration:
        return self._generation

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return self._generation.cells

    @property
    def elevation(self) -> np.ndarray:
        return self._generation.elevation

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def regenerations(self) -> int:
        """Number of successful regenerations so far."""
        return self._regenerations

    def request_regeneration(self) -> None:
        """Zero-payload trigger; repeated calls collapse into one request."""
        if self._pending:
            logger.debug("Regeneration already pending, coalescing trigger")
        self._pending = True

    def tick(self) -> bool:
        """
        Run the pending regeneration, if any.

        Returns:
            True if a regeneration was attempted
        """
        if self._state is ControllerState.GENERATING or not self._pending:
            return False

        ran = False
        while self._pending:
            self._pending = False
            self._run_once()
            ran = True
        return ran

    def regenerate(self) -> bool:
        """Request a regeneration and process it immediately.

        Returns:
            True if the new output was exposed, False if it was rejected
        """
        before = self._regenerations
        self.request_regeneration()
        self.tick()
        return self._regenerations > before

    def update_settings(self, **changes: Any) -> MapgenSettings:
        """
        Validate and store new settings.

        New settings are used by the next regeneration. A threshold change
        is applied to the exposed cells right away from the stored
        elevation field, without regenerating.

        Raises:
            ConfigurationOutOfRangeError: if the new values are rejected
        """
        new_settings = self._settings.updated(**changes)
        threshold_changed = (new_settings.elevation_threshold
                             != self._settings.elevation_threshold)
        self._settings = new_settings
        logger.info("Settings updated", **changes)

        if threshold_changed:
            self._reclassify()
        return new_settings

    def _reclassify(self) -> None:
        generation = self._generation
        if generation.is_empty:
            return

        classifier = BiomeClassifier.from_settings(self._settings)
        cells = tuple(cell.with_biome(classifier.category(cell.elevation))
                      for cell in generation.cells)
        self._generation = replace(generation, cells=cells)
        logger.info("Cells reclassified", cells=len(cells),
                    threshold=self._settings.elevation_threshold)
        if self._sink is not None:
            self._sink.update_biomes(cells)

    def _run_once(self) -> None:
        settings = self._settings
        log = logger.bind(seed=settings.seed, grid_size=settings.grid_size)
        log.info("Regeneration started")
        self._state = ControllerState.GENERATING

        try:
            self._prng.reseed(settings.seed)
            try:
                generation = self._pipeline(settings, self._prng)
            except DegenerateInputError as exc:
                self._last_error = exc
                log.warning("Regeneration failed, keeping previous output",
                            error=str(exc), cells=len(self._generation.cells))
                return
            except IndexInvariantError:
                log.exception("Half-edge invariant violated during regeneration")
                raise

            self._generation = generation
            self._last_error = None
            self._regenerations += 1
            log.info("Regeneration complete", cells=len(generation.cells))

            # Sink sees the whole new set in one call, never a mix
            if self._sink is not None:
                self._sink.replace_cells(generation.cells, generation.elevation)
        finally:
            self._state = ControllerState.IDLE
