# terrain_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC TERRAIN.
Instead, pass a configuration dictionary to the TerrainGenerator instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 1337
# Size of the Perlin permutation table. The table is stored doubled so that
# p[p[i] + j] never needs a second wrap.
PERMUTATION_TABLE_SIZE = 256

# --- Terrain Extents ---
# World-space footprint of the terrain (x and z in a y-up engine).
DEFAULT_WIDTH = 200
DEFAULT_HEIGHT = 200
# Vertical scale. Heights read back from a surface are normalized * amplitude.
DEFAULT_AMPLITUDE = 20.0

# --- Fractal Noise ---
# Coordinate multiplier for the first octave. A larger number means more,
# smaller hills across the grid.
DEFAULT_FREQUENCY = 20.0
DEFAULT_OCTAVES = 1
DEFAULT_PERSISTENCE = 0.5
# Frequency growth per octave. Fixed; not exposed through the config.
LACUNARITY = 2.0

# Bounds used when the random fractal policy is enabled (both inclusive).
RANDOMIZE_FRACTAL = False
OCTAVE_RANGE = (2, 4)
PERSISTENCE_RANGE = (0.25, 0.75)

# --- Texturing ---
# Post-hoc multiplier applied to a sampled height before classification.
DEFAULT_TEXTURE_SCALE = 1.0

# --- Surface Resolutions ---
DEFAULT_HEIGHTMAP_RESOLUTION = 513
DEFAULT_ALPHAMAP_RESOLUTION = 512
DEFAULT_ALPHAMAP_LAYERS = 3

# --- Splat Rules ---
# Water keeps a constant influence until the terrain climbs out of it.
WATER_BASE_WEIGHT = 0.5

# Breakpoints as fractions of the amplitude, so the same rule table scales
# with vertical exaggeration. Each entry overwrites the listed layer weights.
SPLAT_THRESHOLDS = {
    "shore": 0.15,
    "lowland": 0.25,
    "foothills": 0.6,
    "mountains": 0.7,
}

# --- Sampling ---
# 'nearest' matches the rounding lookup of the reference terrain;
# 'bilinear' interpolates between height samples.
DEFAULT_SAMPLING = "nearest"

# --- Export & Preview ---
OUTPUT_ROOT = "baked_terrains"
LAYER_COLORS = {
    "grass": (34, 139, 34),
    "mountain": (112, 128, 144),
    "water": (26, 102, 255),
}
