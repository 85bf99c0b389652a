# terrain_generator/grid.py

"""
Shared grid geometry helpers. Both the heightfield and the splat map work on
integer cell grids that are mapped to normalized [0, 1) coordinates; these
functions are the single authoritative place where that mapping happens.
"""

import math
import numbers

import numpy as np

from .errors import ConfigurationError


def validate_grid(width: int, height: int, name: str = "grid"):
    """Raises ConfigurationError unless both extents are positive integers."""
    for extent in (width, height):
        if (
            isinstance(extent, bool)
            or not isinstance(extent, numbers.Real)
            or not math.isfinite(extent)
            or int(extent) != extent
            or extent <= 0
        ):
            raise ConfigurationError(
                f"{name} dimensions must be positive integers, got {width}x{height}."
            )


def normalized_axis(resolution: int) -> np.ndarray:
    """Cell indices 0..resolution-1 mapped to [0, 1) as index / resolution."""
    return np.arange(resolution, dtype=np.float64) / resolution


def get_coordinate_grid(grid_width: int, grid_height: int, frequency: float, row_start: int = 0, row_end: int = None):
    """
    Generates the noise-space coordinate grid for rows [row_start, row_end).
    The mapping depends only on the full grid extents, so any band of rows
    gets exactly the coordinates it would have inside the whole grid.
    """
    if row_end is None:
        row_end = grid_height
    if not 0 <= row_start <= row_end <= grid_height:
        raise ConfigurationError(
            f"Row band [{row_start}, {row_end}) is outside a grid of height {grid_height}."
        )

    x_coords = normalized_axis(grid_width) * frequency
    y_coords = normalized_axis(grid_height)[row_start:row_end] * frequency
    return np.meshgrid(x_coords, y_coords)


def nearest_indices(target_resolution: int, source_resolution: int) -> np.ndarray:
    """
    Maps each target cell to the nearest source index by rounding
    (target / target_resolution) * source_resolution half-to-even. The result
    is clamped so any pair of resolutions stays in bounds.
    """
    indices = np.rint(normalized_axis(target_resolution) * source_resolution).astype(np.int64)
    return np.clip(indices, 0, source_resolution - 1)


def fractional_indices(target_resolution: int, source_resolution: int) -> np.ndarray:
    """Unrounded counterpart of nearest_indices, used for interpolated sampling."""
    indices = normalized_axis(target_resolution) * source_resolution
    return np.clip(indices, 0.0, source_resolution - 1)
