# terrain_generator/params.py

"""
================================================================================
GENERATION PARAMETERS
================================================================================
The immutable value object that fully describes one terrain generation.

Data Contract:
---------------
- Inputs: A configuration dictionary (e.g. the 'terrain_generation_parameters'
  object of a JSON config). Missing keys fall back to the internal defaults.
- Outputs: A frozen GenerationParameters instance.
- Side Effects: None.
- Invariants: width > 0, height > 0, octaves >= 1, persistence > 0.
  Violations raise ConfigurationError on construction.
================================================================================
"""

import dataclasses
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .errors import ConfigurationError


@dataclass(frozen=True)
class GenerationParameters:
    width: float = DEFAULTS.DEFAULT_WIDTH
    height: float = DEFAULTS.DEFAULT_HEIGHT
    amplitude: float = DEFAULTS.DEFAULT_AMPLITUDE
    frequency: float = DEFAULTS.DEFAULT_FREQUENCY
    octaves: int = DEFAULTS.DEFAULT_OCTAVES
    persistence: float = DEFAULTS.DEFAULT_PERSISTENCE
    texture_scale: float = DEFAULTS.DEFAULT_TEXTURE_SCALE
    seed: int = DEFAULTS.DEFAULT_SEED

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Terrain extents must be positive, got {self.width}x{self.height}."
            )
        if int(self.octaves) != self.octaves or self.octaves < 1:
            raise ConfigurationError(f"octaves must be an integer >= 1, got {self.octaves}.")
        if not self.persistence > 0:
            raise ConfigurationError(f"persistence must be > 0, got {self.persistence}.")
        # Normalise numpy scalars so the value hashes and serializes cleanly.
        object.__setattr__(self, 'octaves', int(self.octaves))

    @classmethod
    def from_config(cls, config: dict) -> "GenerationParameters":
        """Consolidates a user config with the internal defaults."""
        return cls(
            width=config.get('width', DEFAULTS.DEFAULT_WIDTH),
            height=config.get('height', DEFAULTS.DEFAULT_HEIGHT),
            amplitude=config.get('amplitude', DEFAULTS.DEFAULT_AMPLITUDE),
            frequency=config.get('frequency', DEFAULTS.DEFAULT_FREQUENCY),
            octaves=config.get('octaves', DEFAULTS.DEFAULT_OCTAVES),
            persistence=config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE),
            texture_scale=config.get('texture_scale', DEFAULTS.DEFAULT_TEXTURE_SCALE),
            seed=config.get('seed', DEFAULTS.DEFAULT_SEED),
        )

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)


def randomize_fractal_parameters(
    params: GenerationParameters,
    rng: np.random.Generator,
    octave_range: tuple = DEFAULTS.OCTAVE_RANGE,
    persistence_range: tuple = DEFAULTS.PERSISTENCE_RANGE,
) -> GenerationParameters:
    """
    Returns a copy of params with octaves and persistence drawn from the given
    inclusive ranges. The draw comes from the caller's RNG, never from global
    state, so a seeded generator reproduces the same terrain.
    """
    min_octaves, max_octaves = octave_range
    min_persistence, max_persistence = persistence_range
    if min_octaves < 1 or max_octaves < min_octaves:
        raise ConfigurationError(f"Invalid octave range: {octave_range}.")
    if min_persistence <= 0 or max_persistence < min_persistence:
        raise ConfigurationError(f"Invalid persistence range: {persistence_range}.")

    octaves = int(rng.integers(min_octaves, max_octaves, endpoint=True))
    persistence = float(rng.uniform(min_persistence, max_persistence))
    return dataclasses.replace(params, octaves=octaves, persistence=persistence)
