# terrain_generator/surface.py

"""
================================================================================
TERRAIN SURFACE
================================================================================
The collaborator the generator reads from and writes to. A host engine
implements `TerrainSurface` over its own terrain container; `HeightmapSurface`
is the in-memory implementation used by the baker and the tests.

Data Contract:
---------------
- Heights are installed as normalized [0, 1] arrays of shape
  (rows, cols) and read back one cell at a time in world units
  (normalized value * vertical size).
- Splat weights are installed as (rows, cols, layers) arrays.
- Side Effects: set_heights / set_alphamaps replace the stored arrays.
- Invariants: Installing a field never mutates the previously installed array;
  a new array is built and swapped in, so a reader holding the old snapshot
  never observes a half-written field.
================================================================================
"""

import math
from typing import Protocol

import numpy as np
from scipy.ndimage import map_coordinates

from . import config as DEFAULTS
from . import grid
from .errors import ConfigurationError


class TerrainSurface(Protocol):
    """
    A protocol defining the interface the generator expects from a terrain
    container. Any host object providing these attributes and methods can be
    regenerated, without inheriting from anything in this package.
    A `set_size(width, amplitude, height)` method is optional; the generator
    calls it when present.
    """
    heightmap_width: int
    heightmap_height: int
    alphamap_width: int
    alphamap_height: int
    alphamap_layers: int

    def set_heights(self, origin_x: int, origin_y: int, heights: np.ndarray) -> None: ...
    def get_height(self, row: int, col: int) -> float: ...
    def set_alphamaps(self, origin_x: int, origin_y: int, weights: np.ndarray) -> None: ...


def _frozen(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class HeightmapSurface:
    """An in-memory TerrainSurface backed by NumPy arrays."""

    def __init__(
        self,
        heightmap_width: int = DEFAULTS.DEFAULT_HEIGHTMAP_RESOLUTION,
        heightmap_height: int = DEFAULTS.DEFAULT_HEIGHTMAP_RESOLUTION,
        alphamap_width: int = DEFAULTS.DEFAULT_ALPHAMAP_RESOLUTION,
        alphamap_height: int = DEFAULTS.DEFAULT_ALPHAMAP_RESOLUTION,
        alphamap_layers: int = DEFAULTS.DEFAULT_ALPHAMAP_LAYERS,
        size: tuple = (DEFAULTS.DEFAULT_WIDTH, DEFAULTS.DEFAULT_AMPLITUDE, DEFAULTS.DEFAULT_HEIGHT),
    ):
        grid.validate_grid(heightmap_width, heightmap_height, "Heightmap")
        grid.validate_grid(alphamap_width, alphamap_height, "Alphamap")
        if alphamap_layers < 1:
            raise ConfigurationError(f"alphamap_layers must be >= 1, got {alphamap_layers}.")

        self.heightmap_width = int(heightmap_width)
        self.heightmap_height = int(heightmap_height)
        self.alphamap_width = int(alphamap_width)
        self.alphamap_height = int(alphamap_height)
        self.alphamap_layers = int(alphamap_layers)
        self.set_size(*size)

        self._heights = np.zeros((self.heightmap_height, self.heightmap_width))
        self._alphamaps = np.zeros((self.alphamap_height, self.alphamap_width, self.alphamap_layers))
        # First layer fully on, as a freshly created engine terrain would be.
        self._alphamaps[..., 0] = 1.0
        self._slope_cache = None

    # --- Size ---
    def set_size(self, width: float, amplitude: float, height: float):
        """Sets the world-space footprint (width, height) and vertical size."""
        if width <= 0 or height <= 0 or amplitude < 0:
            raise ConfigurationError(f"Invalid terrain size {(width, amplitude, height)}.")
        self.size = (float(width), float(amplitude), float(height))
        self._slope_cache = None

    @property
    def heights(self) -> np.ndarray:
        """Read-only snapshot of the normalized height grid."""
        return _frozen(self._heights)

    @property
    def alphamaps(self) -> np.ndarray:
        """Read-only snapshot of the splat weights."""
        return _frozen(self._alphamaps)

    # --- TerrainSurface protocol ---
    def set_heights(self, origin_x: int, origin_y: int, heights: np.ndarray):
        heights = np.asarray(heights, dtype=np.float64)
        if heights.ndim != 2:
            raise ConfigurationError(f"Heights must be 2D, got shape {heights.shape}.")
        self._check_patch(origin_x, origin_y, heights.shape, (self.heightmap_height, self.heightmap_width), "Height")

        rows, cols = heights.shape
        updated = self._heights.copy()
        updated[origin_y:origin_y + rows, origin_x:origin_x + cols] = heights
        self._heights = updated
        self._slope_cache = None

    def get_height(self, row: int, col: int) -> float:
        if not (0 <= row < self.heightmap_height and 0 <= col < self.heightmap_width):
            raise IndexError(
                f"Height sample ({row}, {col}) outside a {self.heightmap_height}x{self.heightmap_width} heightmap."
            )
        return float(self._heights[row, col] * self.size[1])

    def set_alphamaps(self, origin_x: int, origin_y: int, weights: np.ndarray):
        weights = np.asarray(weights, dtype=np.float64)
        if weights.ndim != 3 or weights.shape[2] != self.alphamap_layers:
            raise ConfigurationError(
                f"Alphamaps must have shape (rows, cols, {self.alphamap_layers}), got {weights.shape}."
            )
        self._check_patch(origin_x, origin_y, weights.shape[:2], (self.alphamap_height, self.alphamap_width), "Alphamap")

        rows, cols = weights.shape[:2]
        updated = self._alphamaps.copy()
        updated[origin_y:origin_y + rows, origin_x:origin_x + cols, :] = weights
        self._alphamaps = updated

    # --- Additional surface queries ---
    def get_steepness(self, y01: float, x01: float) -> float:
        """Slope angle in degrees at a normalized position, bilinearly sampled."""
        dz, dx = self._sample_slopes(y01, x01)
        return math.degrees(math.atan(math.hypot(dx, dz)))

    def get_interpolated_normal(self, y01: float, x01: float) -> tuple[float, float, float]:
        """Unit surface normal (x, y-up, z) at a normalized position."""
        dz, dx = self._sample_slopes(y01, x01)
        normal = np.array([-dx, 1.0, -dz])
        normal /= np.linalg.norm(normal)
        return tuple(float(c) for c in normal)

    def _sample_slopes(self, y01: float, x01: float) -> tuple[float, float]:
        if self._slope_cache is None:
            self._slope_cache = self._compute_slopes()
        dz_map, dx_map = self._slope_cache
        coords = np.array([
            [np.clip(y01, 0.0, 1.0) * (self.heightmap_height - 1)],
            [np.clip(x01, 0.0, 1.0) * (self.heightmap_width - 1)],
        ])
        dz = map_coordinates(dz_map, coords, order=1, mode='nearest')[0]
        dx = map_coordinates(dx_map, coords, order=1, mode='nearest')[0]
        return float(dz), float(dx)

    def _compute_slopes(self):
        """World-unit height change per world unit along z (rows) and x (cols)."""
        width, amplitude, height = self.size
        world_heights = self._heights * amplitude
        if min(world_heights.shape) < 2:
            zeros = np.zeros_like(world_heights)
            return zeros, zeros
        # Sample spacing in world units; the grid spans the full footprint.
        spacing_z = height / (self.heightmap_height - 1)
        spacing_x = width / (self.heightmap_width - 1)
        dz, dx = np.gradient(world_heights, spacing_z, spacing_x)
        return dz, dx

    @staticmethod
    def _check_patch(origin_x: int, origin_y: int, patch_shape: tuple, grid_shape: tuple, name: str):
        rows, cols = patch_shape
        grid_rows, grid_cols = grid_shape
        if origin_x < 0 or origin_y < 0 or origin_y + rows > grid_rows or origin_x + cols > grid_cols:
            raise ConfigurationError(
                f"{name} patch of {rows}x{cols} at ({origin_x}, {origin_y}) "
                f"does not fit a {grid_rows}x{grid_cols} grid."
            )
