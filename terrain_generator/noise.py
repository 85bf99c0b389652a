# terrain_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides functions for generating 2D Perlin noise. It is designed
to be a pure, stateless utility.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array, doubled to 512).
    - x, y: 2D NumPy arrays of noise-space coordinates.
    - octaves, persistence, lacunarity: Standard fractal noise parameters.
- Outputs:
    - A NumPy array of noise values in the range [0, 1].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
  The same table and coordinates always produce bit-identical output.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Pre-defined gradient vectors for performance.
_GRADIENT_VECTORS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]])


def create_permutation_table(seed: int) -> np.ndarray:
    """Builds the doubled permutation table for a seed."""
    p = np.arange(DEFAULTS.PERMUTATION_TABLE_SIZE, dtype=np.int64)
    rng = np.random.default_rng(seed)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _gradient(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS[h % 4]
    # Use explicit indexing for Numba compatibility
    return g[0] * x + g[1] * y

@njit
def _perlin_sample(p, x, y):
    """Raw gradient noise at one point, in [-1, 1]."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))

    xf = x - xi
    yf = y - yi

    u = _fade(xf)
    v = _fade(yf)

    px0 = xi % 256
    px1 = (px0 + 1) % 256
    py0 = yi % 256
    py1 = (py0 + 1) % 256

    # Numba requires scalar indexing
    idx00 = p[p[px0] + py0]
    idx01 = p[p[px0] + py1]
    idx10 = p[p[px1] + py0]
    idx11 = p[p[px1] + py1]

    g00 = _gradient(idx00, xf, yf)
    g01 = _gradient(idx01, xf, yf - 1)
    g10 = _gradient(idx10, xf - 1, yf)
    g11 = _gradient(idx11, xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    return _lerp(x1, x2, v)

@njit
def _coherent_sample(p, x, y):
    # Every corner contribution is bounded by 1 and the lerps are convex,
    # so the shifted value stays inside [0, 1].
    return (_perlin_sample(p, x, y) + 1.0) * 0.5

@njit
def coherent_noise_2d(p, x, y):
    """
    Single-octave Perlin noise remapped to [0, 1]. This is the raw sample the
    fractal accumulation reduces to when octaves == 1.
    """
    rows, cols = x.shape
    result = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            result[i, j] = _coherent_sample(p, x[i, j], y[i, j])

    return result

@njit
def fractal_noise_2d(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Generate fractal 2D Perlin noise using a pre-computed permutation table.
    Octaves are accumulated with amplitude decay (persistence) and frequency
    growth (lacunarity), then divided by the summed amplitudes so the result
    stays in [0, 1]. Callers must guarantee octaves >= 1.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            noise_val = 0.0
            max_possible = 0.0
            amplitude = 1.0
            frequency = 1.0

            for _ in range(octaves):
                x_sample = x[i, j] * frequency
                y_sample = y[i, j] * frequency

                noise_val += _coherent_sample(p, x_sample, y_sample) * amplitude
                max_possible += amplitude
                amplitude *= persistence
                frequency *= lacunarity

            total_noise[i, j] = noise_val / max_possible

    return total_noise
