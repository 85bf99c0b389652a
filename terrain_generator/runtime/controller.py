# terrain_generator/runtime/controller.py

"""
================================================================================
TERRAIN CONTROLLER
================================================================================
Host-side regeneration policy. A host calls `update(config)` whenever it wants
the terrain to reflect the given settings (e.g. once per frame); the controller
compares them with the last captured snapshot and only regenerates when
something changed.

Data Contract:
---------------
- Inputs: A TerrainSurface (on initialization) and configuration dictionaries.
- Public Methods:
    - has_changed(config): True if config differs from the last snapshot.
    - update(config): Regenerates on change; returns whether it did.
    - regenerate(config): Unconditionally regenerates.
- Side Effects: Writes heights and splat weights to the surface.
- Invariants: At most one generation runs against the surface at a time, and
  the snapshot is only captured after a generation completes successfully.
================================================================================
"""

import copy
import logging
import threading

from ..generator import TerrainGenerator
from ..params import GenerationParameters


class TerrainController:
    """Regenerates a surface on demand when its settings change."""

    def __init__(self, surface, logger: logging.Logger = None):
        self.surface = surface
        self.logger = logger or logging.getLogger(__name__)
        self.generator = None
        self.last_params: GenerationParameters = None
        self._snapshot = None
        self._lock = threading.Lock()

    def has_changed(self, config: dict) -> bool:
        """Waits for any in-flight generation, then compares against its snapshot."""
        with self._lock:
            return self._differs(config)

    def _differs(self, config: dict) -> bool:
        return self._snapshot is None or self._snapshot != config

    def update(self, config: dict) -> bool:
        """Regenerates the surface if config differs from the last snapshot."""
        with self._lock:
            if not self._differs(config):
                return False
            self.logger.info("Terrain settings changed, regenerating.")
            self._regenerate_locked(config)
            return True

    def regenerate(self, config: dict) -> GenerationParameters:
        with self._lock:
            return self._regenerate_locked(config)

    def _regenerate_locked(self, config: dict) -> GenerationParameters:
        # A new generator per change keeps the permutation table in step with the seed.
        generator = TerrainGenerator(config=config, logger=self.logger)
        params = generator.regenerate(self.surface)

        self.generator = generator
        self.last_params = params
        self._snapshot = copy.deepcopy(config)
        return params
