"""
Tests for the Perlin noise kernels.
"""

import numpy as np

from terrain_generator import noise


class TestPermutationTable:

    def test_table_is_doubled_permutation(self):
        p = noise.create_permutation_table(1)

        assert p.shape == (512,)
        assert np.array_equal(p[:256], p[256:])
        assert np.array_equal(np.sort(p[:256]), np.arange(256))

    def test_same_seed_same_table(self):
        assert np.array_equal(noise.create_permutation_table(9), noise.create_permutation_table(9))

    def test_different_seeds_differ(self):
        assert not np.array_equal(noise.create_permutation_table(1), noise.create_permutation_table(2))


class TestCoherentNoise:

    def test_lattice_points_are_midpoint(self, permutation_table):
        # Gradient noise is zero on integer lattice points, i.e. 0.5 after remapping.
        x, y = np.meshgrid(np.arange(5, dtype=float), np.arange(3, dtype=float))

        values = noise.coherent_noise_2d(permutation_table, x, y)

        assert np.all(values == 0.5)

    def test_range_is_unit_interval(self, permutation_table):
        rng = np.random.default_rng(0)
        x = rng.uniform(0, 50, size=(64, 64))
        y = rng.uniform(0, 50, size=(64, 64))

        values = noise.coherent_noise_2d(permutation_table, x, y)

        assert values.min() >= 0.0
        assert values.max() <= 1.0
        assert values.std() > 0.01

    def test_noise_is_continuous(self, permutation_table):
        x, y = np.meshgrid(np.linspace(0.0, 3.0, 301), np.linspace(0.0, 3.0, 301))

        values = noise.coherent_noise_2d(permutation_table, x, y)

        assert np.max(np.abs(np.diff(values, axis=1))) < 0.05
        assert np.max(np.abs(np.diff(values, axis=0))) < 0.05

    def test_output_shape_matches_input(self, permutation_table):
        x, y = np.meshgrid(np.linspace(0, 1, 7), np.linspace(0, 1, 4))

        assert noise.coherent_noise_2d(permutation_table, x, y).shape == (4, 7)


class TestFractalNoise:

    def test_single_octave_is_raw_sample(self, permutation_table):
        x, y = np.meshgrid(np.linspace(0, 6.3, 40), np.linspace(0, 2.7, 30))

        fractal = noise.fractal_noise_2d(permutation_table, x, y, 1, 0.37, 2.0)
        raw = noise.coherent_noise_2d(permutation_table, x, y)

        assert np.array_equal(fractal, raw)

    def test_multi_octave_stays_normalized(self, permutation_table):
        x, y = np.meshgrid(np.linspace(0, 10, 50), np.linspace(0, 10, 50))

        for persistence in (0.25, 0.75, 1.0, 1.8):
            values = noise.fractal_noise_2d(permutation_table, x, y, 5, persistence, 2.0)
            assert values.min() >= 0.0
            assert values.max() <= 1.0

    def test_octaves_add_detail(self, permutation_table):
        x, y = np.meshgrid(np.linspace(0, 4, 80), np.linspace(0, 4, 80))

        smooth = noise.fractal_noise_2d(permutation_table, x, y, 1, 0.5, 2.0)
        detailed = noise.fractal_noise_2d(permutation_table, x, y, 4, 0.5, 2.0)

        assert not np.array_equal(smooth, detailed)
