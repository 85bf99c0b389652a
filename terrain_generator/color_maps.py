# terrain_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the color mapping constants and functions for converting
raw terrain data (heights, splat weights) into RGB color arrays for previews.

It is designed to be a pure, stateless utility with no GUI dependencies,
allowing it to be used by the offline baker and by tests alike.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS
from .splatmap import LAYER_NAMES


def create_layer_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the material layer and the value is the RGB color."""
    return np.array([DEFAULTS.LAYER_COLORS[name] for name in LAYER_NAMES], dtype=np.uint8)


def get_splat_color_array(weights: np.ndarray, layer_lut: np.ndarray) -> np.ndarray:
    """
    Blends the layer colors by their splat weights. Layers without an entry in
    the LUT are ignored; with normalized weights the result is a convex mix.
    """
    num_colored = min(weights.shape[-1], len(layer_lut))
    blended = weights[..., :num_colored] @ layer_lut[:num_colored].astype(np.float64)
    return np.clip(np.round(blended), 0, 255).astype(np.uint8)


def get_elevation_color_array(elevation_values: np.ndarray) -> np.ndarray:
    """Converts normalized elevation data [0, 1] into a grayscale RGB color array."""
    # Scale the normalized [0, 1] float values to [0, 255] integer grayscale values.
    gray_values = (np.clip(elevation_values, 0.0, 1.0) * 255).astype(np.uint8)

    # Create a 3-channel RGB array by stacking the grayscale values.
    return np.stack([gray_values] * 3, axis=-1)
