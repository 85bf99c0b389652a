# terrain_generator/__init__.py

# Public API of the terrain generator package.

from .errors import ConfigurationError, NormalizationError, TerrainGenerationError
from .generator import TerrainGenerator
from .heightfield import generate_heights
from .params import GenerationParameters, randomize_fractal_parameters
from .splatmap import classify, classify_surface, calculate_splat_weights
from .surface import HeightmapSurface, TerrainSurface

__all__ = [
    "ConfigurationError",
    "NormalizationError",
    "TerrainGenerationError",
    "TerrainGenerator",
    "generate_heights",
    "GenerationParameters",
    "randomize_fractal_parameters",
    "classify",
    "classify_surface",
    "calculate_splat_weights",
    "HeightmapSurface",
    "TerrainSurface",
]
