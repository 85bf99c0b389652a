# terrain_generator/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the main TerrainGenerator class, responsible for turning
a configuration into a heightfield and a splat map and installing both on a
terrain surface.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of generation parameters which can override
      the internal defaults. Expected keys include 'seed', 'amplitude',
      'frequency', 'octaves', 'persistence', 'texture_scale', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - NumPy arrays: normalized heights [0, 1] and splat weights summing to 1.
- Side Effects: Logs messages using the provided logger. regenerate() writes
  to the surface it is given.
- Invariants: Given the same seed and configuration, the output is deterministic,
  including when the random fractal policy is enabled.
================================================================================
"""

import logging
import time

import numpy as np

from . import config as DEFAULTS
from . import heightfield
from . import noise
from . import splatmap
from .errors import ConfigurationError
from .params import GenerationParameters, randomize_fractal_parameters
from .surface import TerrainSurface


class TerrainGenerator:
    """
    Generates the raw data for a procedurally generated terrain.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger, permutation_table: np.ndarray = None):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one will be generated from the seed.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("TerrainGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'width': self.user_config.get('width', DEFAULTS.DEFAULT_WIDTH),
            'height': self.user_config.get('height', DEFAULTS.DEFAULT_HEIGHT),
            'amplitude': self.user_config.get('amplitude', DEFAULTS.DEFAULT_AMPLITUDE),
            'frequency': self.user_config.get('frequency', DEFAULTS.DEFAULT_FREQUENCY),
            'octaves': self.user_config.get('octaves', DEFAULTS.DEFAULT_OCTAVES),
            'persistence': self.user_config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE),
            'texture_scale': self.user_config.get('texture_scale', DEFAULTS.DEFAULT_TEXTURE_SCALE),

            'randomize_fractal': self.user_config.get('randomize_fractal', DEFAULTS.RANDOMIZE_FRACTAL),
            'octave_range': tuple(self.user_config.get('octave_range', DEFAULTS.OCTAVE_RANGE)),
            'persistence_range': tuple(self.user_config.get('persistence_range', DEFAULTS.PERSISTENCE_RANGE)),

            'heightmap_resolution': self.user_config.get('heightmap_resolution', DEFAULTS.DEFAULT_HEIGHTMAP_RESOLUTION),
            'alphamap_resolution': self.user_config.get('alphamap_resolution', DEFAULTS.DEFAULT_ALPHAMAP_RESOLUTION),
            'alphamap_layers': self.user_config.get('alphamap_layers', DEFAULTS.DEFAULT_ALPHAMAP_LAYERS),
            'sampling': self.user_config.get('sampling', DEFAULTS.DEFAULT_SAMPLING),
        }

        # --- Validate the core parameters before any grid work ---
        self.base_params = GenerationParameters.from_config(self.settings)
        if self.settings['sampling'] not in splatmap.SAMPLING_MODES:
            raise ConfigurationError(
                f"Unknown sampling mode '{self.settings['sampling']}', expected one of {splatmap.SAMPLING_MODES}."
            )
        self.seed = self.base_params.seed

        # The fractal policy draws from its own seeded stream so a sequence of
        # regenerations is reproducible. Nothing is drawn until the first
        # generation asks for parameters.
        self._rng = np.random.default_rng(self.seed)
        self.params = self.base_params
        if not self.settings['randomize_fractal']:
            self._check_persistence(self.params)

        # --- Initialize Noise ---
        if permutation_table is not None:
            self._p = permutation_table
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self.logger.debug("No permutation table provided, generating new one from seed.")
            self._p = noise.create_permutation_table(self.seed)

        # --- Expose the permutation table for baking workers ---
        self.permutation_table = self._p

        self.logger.info(f"TerrainGenerator initialized with seed: {self.seed}")
        self.logger.info(
            f"Terrain size: {self.base_params.width}x{self.base_params.height} "
            f"(amplitude {self.base_params.amplitude}), frequency {self.base_params.frequency}"
        )

    def next_parameters(self) -> GenerationParameters:
        """
        Returns the parameters for the next generation. With the random
        fractal policy enabled each call draws fresh octaves and persistence.
        Every entry point (regenerate, the baker) goes through here, so the
        n-th generation from a given config always uses the n-th draw.
        """
        params = self.base_params
        if self.settings['randomize_fractal']:
            params = randomize_fractal_parameters(
                params, self._rng,
                octave_range=self.settings['octave_range'],
                persistence_range=self.settings['persistence_range'],
            )
            self.logger.debug(f"Random fractal policy chose octaves={params.octaves}, persistence={params.persistence:.3f}")
            self._check_persistence(params)

        self.params = params
        return params

    def _check_persistence(self, params: GenerationParameters):
        if params.persistence >= 1.0:
            self.logger.warning(
                f"Persistence {params.persistence} >= 1: higher octaves will not decay and will dominate the terrain."
            )

    def generate_heights(self, grid_width: int, grid_height: int, row_start: int = 0, row_end: int = None, params: GenerationParameters = None) -> np.ndarray:
        """Generates the normalized heightfield (or a row band of it) for the current parameters."""
        params = params or self.params
        return heightfield.generate_heights(params, grid_width, grid_height, self._p, row_start, row_end)

    def classify(self, height_field: np.ndarray, alpha_width: int, alpha_height: int, num_layers: int = splatmap.REQUIRED_LAYERS, params: GenerationParameters = None) -> np.ndarray:
        """Builds the splat weights for a normalized heightfield."""
        params = params or self.params
        return splatmap.classify(
            height_field, params, alpha_width, alpha_height,
            num_layers=num_layers, sampling=self.settings['sampling'],
        )

    def regenerate(self, surface: TerrainSurface) -> GenerationParameters:
        """
        Regenerates a surface wholesale: heights first, then a splat map read
        back through the surface. Returns the parameters that were used.

        The world-space size is applied only if the surface has a `set_size`
        method; otherwise the host keeps its own. If classification fails the
        previous heights and size are put back when the surface exposes them
        (`heights` / `size`, as HeightmapSurface does). A host surface without
        those attributes keeps the new heights next to its old splat weights.
        """
        # Reject an unusable surface before spending time on the heightfield.
        if surface.alphamap_layers < splatmap.REQUIRED_LAYERS:
            raise ConfigurationError(
                f"Surface has {surface.alphamap_layers} alphamap layers; "
                f"the splat rules need at least {splatmap.REQUIRED_LAYERS}."
            )

        params = self.next_parameters()
        start_time = time.perf_counter()

        previous_heights = getattr(surface, "heights", None)
        previous_size = getattr(surface, "size", None)
        set_size = getattr(surface, "set_size", None)

        if set_size is not None:
            set_size(params.width, params.amplitude, params.height)
        heights = self.generate_heights(surface.heightmap_width, surface.heightmap_height, params=params)
        surface.set_heights(0, 0, heights)
        self.logger.debug(f"Installed {surface.heightmap_width}x{surface.heightmap_height} heightmap.")

        try:
            weights = splatmap.classify_surface(surface, params, sampling=self.settings['sampling'])
        except Exception:
            self.logger.error("Splat classification failed, restoring the previous heightmap.")
            if previous_heights is not None:
                surface.set_heights(0, 0, previous_heights)
            if set_size is not None and previous_size is not None:
                set_size(*previous_size)
            raise
        surface.set_alphamaps(0, 0, weights)

        elapsed = time.perf_counter() - start_time
        self.logger.info(
            f"Regenerated terrain (octaves={params.octaves}, persistence={params.persistence:.3f}) "
            f"in {elapsed:.2f} seconds."
        )
        return params
