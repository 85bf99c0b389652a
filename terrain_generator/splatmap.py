# terrain_generator/splatmap.py

"""
================================================================================
MATERIAL WEIGHT CLASSIFIER
================================================================================
Turns terrain heights into per-cell splat weights over a fixed set of material
layers (grass, mountain, water).

Data Contract:
---------------
- Inputs:
    - A normalized heightfield (or a TerrainSurface to query heights from).
    - GenerationParameters: amplitude and texture_scale.
    - The alpha grid resolution and layer count.
- Outputs:
    - A float64 array of shape (alpha_height, alpha_width, num_layers) whose
      layer weights sum to 1.0 in every cell.
- Side Effects: None.
- Invariants: The threshold ladder is applied in increasing order and every
  rule overwrites the weights it names, so the highest band crossed wins.
  Layers beyond the three material layers are always zero.
================================================================================
"""

import numpy as np
from scipy.ndimage import map_coordinates

from . import config as DEFAULTS
from . import grid
from .errors import ConfigurationError, NormalizationError
from .params import GenerationParameters

# --- Material Layer Constants ---
LAYER_GRASS = 0
LAYER_MOUNTAIN = 1
LAYER_WATER = 2
REQUIRED_LAYERS = 3

LAYER_NAMES = ("grass", "mountain", "water")

SAMPLING_MODES = ("nearest", "bilinear")

# (fraction of amplitude, {layer: weight}). A cell strictly above the
# threshold gets the listed weights written over whatever it had.
SPLAT_RULES = (
    # above water, start drawing grass
    (DEFAULTS.SPLAT_THRESHOLDS["shore"], {LAYER_WATER: 0.25, LAYER_GRASS: 0.25}),
    # fully above water
    (DEFAULTS.SPLAT_THRESHOLDS["lowland"], {LAYER_WATER: 0.0, LAYER_GRASS: 0.5}),
    # a little grass, mostly mountain
    (DEFAULTS.SPLAT_THRESHOLDS["foothills"], {LAYER_WATER: 0.0, LAYER_GRASS: 0.25, LAYER_MOUNTAIN: 0.5}),
    # all mountain
    (DEFAULTS.SPLAT_THRESHOLDS["mountains"], {LAYER_WATER: 0.0, LAYER_GRASS: 0.0, LAYER_MOUNTAIN: 0.5}),
)


def _check_layers(num_layers: int, rules) -> None:
    if num_layers < REQUIRED_LAYERS:
        raise ConfigurationError(
            f"The splat rules need at least {REQUIRED_LAYERS} layers, got {num_layers}."
        )
    for _, assignments in rules:
        for layer in assignments:
            if not 0 <= layer < num_layers:
                raise ConfigurationError(f"Splat rule targets layer {layer} of {num_layers}.")


def calculate_splat_weights(
    heights: np.ndarray,
    amplitude: float,
    num_layers: int = REQUIRED_LAYERS,
    rules=SPLAT_RULES,
) -> np.ndarray:
    """
    Classifies world-unit heights (already multiplied by the texture scale)
    into normalized splat weights. The output has one extra trailing axis of
    length num_layers.
    """
    _check_layers(num_layers, rules)
    heights = np.asarray(heights, dtype=np.float64)

    weights = np.zeros(heights.shape + (num_layers,))
    # water has constant influence
    weights[..., LAYER_WATER] = DEFAULTS.WATER_BASE_WEIGHT

    for fraction, assignments in rules:
        band_mask = heights > amplitude * fraction
        for layer, weight in assignments.items():
            weights[..., layer][band_mask] = weight

    # Sum of all weights must be 1, so divide through by the per-cell total.
    z = weights.sum(axis=-1)
    empty_cells = np.count_nonzero(z == 0)
    if empty_cells:
        raise NormalizationError(
            f"{empty_cells} cell(s) ended with a zero weight sum; check the splat rule table."
        )
    return weights / z[..., np.newaxis]


def sample_heights(height_field: np.ndarray, alpha_width: int, alpha_height: int, sampling: str = DEFAULTS.DEFAULT_SAMPLING) -> np.ndarray:
    """
    Resamples a (grid_height, grid_width) field onto the alpha grid. Nearest
    sampling rounds the normalized alpha coordinate onto the height grid;
    bilinear sampling interpolates between the four surrounding samples.
    """
    if sampling not in SAMPLING_MODES:
        raise ConfigurationError(f"Unknown sampling mode '{sampling}', expected one of {SAMPLING_MODES}.")
    height_field = np.asarray(height_field, dtype=np.float64)
    if height_field.ndim != 2 or height_field.size == 0:
        raise ConfigurationError(f"Expected a non-empty 2D heightfield, got shape {height_field.shape}.")
    grid.validate_grid(alpha_width, alpha_height, "Alphamap")

    grid_height, grid_width = height_field.shape
    if sampling == "nearest":
        rows = grid.nearest_indices(alpha_height, grid_height)
        cols = grid.nearest_indices(alpha_width, grid_width)
        return height_field[np.ix_(rows, cols)]

    rows = grid.fractional_indices(alpha_height, grid_height)
    cols = grid.fractional_indices(alpha_width, grid_width)
    row_grid, col_grid = np.meshgrid(rows, cols, indexing='ij')
    coords = np.array([row_grid.ravel(), col_grid.ravel()])
    samples = map_coordinates(height_field, coords, order=1, mode='nearest')
    return samples.reshape(alpha_height, alpha_width)


def classify(
    height_field: np.ndarray,
    params: GenerationParameters,
    alpha_width: int,
    alpha_height: int,
    num_layers: int = REQUIRED_LAYERS,
    sampling: str = DEFAULTS.DEFAULT_SAMPLING,
) -> np.ndarray:
    """
    Builds the splat weight field for a normalized heightfield. Samples are
    converted to world units (x amplitude) before the texture scale is applied,
    matching what a surface reports through get_height.
    """
    _check_layers(num_layers, SPLAT_RULES)
    samples = sample_heights(height_field, alpha_width, alpha_height, sampling)
    world_heights = samples * params.amplitude
    world_heights *= params.texture_scale
    return calculate_splat_weights(world_heights, params.amplitude, num_layers)


def classify_surface(surface, params: GenerationParameters, sampling: str = DEFAULTS.DEFAULT_SAMPLING) -> np.ndarray:
    """
    Builds the splat weight field purely from TerrainSurface queries, at the
    surface's own alpha resolution and layer count.
    """
    alpha_width = surface.alphamap_width
    alpha_height = surface.alphamap_height
    num_layers = surface.alphamap_layers
    _check_layers(num_layers, SPLAT_RULES)
    grid.validate_grid(alpha_width, alpha_height, "Alphamap")
    if sampling not in SAMPLING_MODES:
        raise ConfigurationError(f"Unknown sampling mode '{sampling}', expected one of {SAMPLING_MODES}.")

    grid_width = surface.heightmap_width
    grid_height = surface.heightmap_height

    if sampling == "nearest":
        rows = grid.nearest_indices(alpha_height, grid_height)
        cols = grid.nearest_indices(alpha_width, grid_width)
        # Query each distinct height once; the alpha grid may be far denser.
        unique_rows, row_lookup = np.unique(rows, return_inverse=True)
        unique_cols, col_lookup = np.unique(cols, return_inverse=True)
        read_back = _read_heights(surface, unique_rows, unique_cols)
        world_heights = read_back[np.ix_(row_lookup, col_lookup)]
    else:
        read_back = _read_heights(surface, np.arange(grid_height), np.arange(grid_width))
        # Interpolating world-unit heights equals scaling interpolated samples.
        world_heights = sample_heights(read_back, alpha_width, alpha_height, "bilinear")

    world_heights = world_heights * params.texture_scale
    return calculate_splat_weights(world_heights, params.amplitude, num_layers)


def _read_heights(surface, rows: np.ndarray, cols: np.ndarray) -> np.ndarray:
    heights = np.empty((len(rows), len(cols)))
    for i, row in enumerate(rows):
        for j, col in enumerate(cols):
            heights[i, j] = surface.get_height(int(row), int(col))
    return heights
