# terrain_generator/heightfield.py

"""
================================================================================
HEIGHTFIELD GENERATOR
================================================================================
Produces the normalized elevation grid for a terrain.

Data Contract:
---------------
- Inputs:
    - params (GenerationParameters): frequency, octaves and persistence.
    - grid_width, grid_height: The heightmap resolution in cells.
    - permutation_table: The noise table built from params.seed.
    - row_start, row_end (optional): Restrict the work to a band of rows.
- Outputs:
    - A float64 array of shape (row_end - row_start, grid_width), values in [0, 1].
- Side Effects: None.
- Invariants: For a fixed table and parameters the output is bit-identical
  between calls. With octaves == 1 each cell is exactly the raw coherent noise
  sample at (x / grid_width * frequency, y / grid_height * frequency).
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from . import grid
from . import noise
from .params import GenerationParameters


def generate_heights(
    params: GenerationParameters,
    grid_width: int,
    grid_height: int,
    permutation_table: np.ndarray,
    row_start: int = 0,
    row_end: int = None,
) -> np.ndarray:
    """Generates the fractal heightfield (or one row band of it)."""
    grid.validate_grid(grid_width, grid_height, "Heightmap")
    x_coords, y_coords = grid.get_coordinate_grid(
        int(grid_width), int(grid_height), params.frequency, row_start, row_end
    )

    return noise.fractal_noise_2d(
        permutation_table,
        x_coords,
        y_coords,
        octaves=params.octaves,
        persistence=params.persistence,
        lacunarity=DEFAULTS.LACUNARITY,
    )


def split_rows(grid_height: int, num_bands: int) -> list[tuple[int, int]]:
    """Splits [0, grid_height) into at most num_bands disjoint, contiguous bands."""
    num_bands = max(1, min(num_bands, grid_height))
    edges = np.linspace(0, grid_height, num_bands + 1).astype(int)
    return [(int(start), int(end)) for start, end in zip(edges[:-1], edges[1:]) if end > start]
