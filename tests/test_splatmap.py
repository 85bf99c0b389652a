"""
Tests for the height-to-material weight classifier.
"""

import numpy as np
import pytest

from terrain_generator import splatmap
from terrain_generator.errors import ConfigurationError, NormalizationError
from terrain_generator.heightfield import generate_heights
from terrain_generator.params import GenerationParameters
from terrain_generator.splatmap import LAYER_GRASS, LAYER_MOUNTAIN, LAYER_WATER
from terrain_generator.surface import HeightmapSurface


class TestSplatBands:
    """The five bands of the threshold ladder, with amplitude 20."""

    @pytest.mark.parametrize("height, expected", [
        (1.0, (0.0, 0.0, 1.0)),          # water
        (4.0, (0.5, 0.0, 0.5)),          # shore: grass rising
        (6.0, (1.0, 0.0, 0.0)),          # lowland: grass only
        (13.0, (1 / 3, 2 / 3, 0.0)),     # foothills: grass/mountain mix
        (15.0, (0.0, 1.0, 0.0)),         # mountains
    ])
    def test_band_vectors(self, height, expected):
        weights = splatmap.calculate_splat_weights(np.array([height]), amplitude=20.0)

        assert weights.shape == (1, 3)
        assert np.allclose(weights[0], expected)

    def test_thresholds_are_strict(self):
        # Exactly on a breakpoint stays in the band below.
        weights = splatmap.calculate_splat_weights(np.array([3.0, 5.0, 12.0, 14.0]), amplitude=20.0)

        assert np.allclose(weights[0], (0.0, 0.0, 1.0))
        assert np.allclose(weights[1], (0.5, 0.0, 0.5))
        assert np.allclose(weights[2], (1.0, 0.0, 0.0))
        assert np.allclose(weights[3], (1 / 3, 2 / 3, 0.0))

    def test_higher_bands_overwrite_lower_ones(self):
        weights = splatmap.calculate_splat_weights(np.array([100.0]), amplitude=20.0)

        assert weights[0, LAYER_WATER] == 0.0
        assert weights[0, LAYER_GRASS] == 0.0
        assert weights[0, LAYER_MOUNTAIN] == 1.0

    def test_breakpoints_scale_with_amplitude(self):
        heights = np.array([4.0, 13.0])

        low = splatmap.calculate_splat_weights(heights, amplitude=20.0)
        high = splatmap.calculate_splat_weights(heights * 5, amplitude=100.0)

        assert np.array_equal(low, high)

    def test_weights_sum_to_one(self):
        heights = np.random.default_rng(1).uniform(-5, 30, size=(50, 40))

        weights = splatmap.calculate_splat_weights(heights, amplitude=20.0)

        assert weights.shape == (50, 40, 3)
        assert np.allclose(weights.sum(axis=-1), 1.0, atol=1e-5)

    def test_extra_layers_stay_empty(self):
        weights = splatmap.calculate_splat_weights(np.array([1.0, 6.0, 15.0]), amplitude=20.0, num_layers=5)

        assert weights.shape == (3, 5)
        assert np.all(weights[:, 3:] == 0.0)
        assert np.allclose(weights.sum(axis=-1), 1.0)

    def test_too_few_layers_raises(self):
        with pytest.raises(ConfigurationError):
            splatmap.calculate_splat_weights(np.array([1.0]), amplitude=20.0, num_layers=2)

    def test_rule_outside_layers_raises(self):
        rules = ((0.1, {7: 1.0}),)

        with pytest.raises(ConfigurationError):
            splatmap.calculate_splat_weights(np.array([1.0]), amplitude=20.0, rules=rules)

    def test_zero_weight_sum_raises(self):
        # A rule table that clears the water baseline leaves nothing to normalize.
        rules = ((0.0, {LAYER_WATER: 0.0}),)

        with pytest.raises(NormalizationError):
            splatmap.calculate_splat_weights(np.array([0.5, 1.0]), amplitude=20.0, rules=rules)

    def test_rule_change_only_affects_cells_above_it(self):
        heights = np.array([1.0, 4.0, 6.0, 13.0, 15.0])
        altered = splatmap.SPLAT_RULES[:-1] + (
            (splatmap.SPLAT_RULES[-1][0], {LAYER_WATER: 0.0, LAYER_GRASS: 0.5, LAYER_MOUNTAIN: 0.5}),
        )

        original = splatmap.calculate_splat_weights(heights, amplitude=20.0)
        changed = splatmap.calculate_splat_weights(heights, amplitude=20.0, rules=altered)

        assert np.array_equal(original[:4], changed[:4])
        assert not np.array_equal(original[4], changed[4])


class TestClassify:

    @pytest.fixture
    def banded_field(self):
        # Normalized heights well away from every breakpoint.
        return np.array([
            [0.1, 0.2, 0.3],
            [0.65, 0.8, 0.0],
        ])

    def test_classify_scales_by_amplitude(self, banded_field):
        params = GenerationParameters(amplitude=20.0)

        weights = splatmap.classify(banded_field, params, 3, 2)

        assert weights.shape == (2, 3, 3)
        assert np.allclose(weights[0, 0], (0.0, 0.0, 1.0))
        assert np.allclose(weights[0, 1], (0.5, 0.0, 0.5))
        assert np.allclose(weights[0, 2], (1.0, 0.0, 0.0))
        assert np.allclose(weights[1, 0], (1 / 3, 2 / 3, 0.0))
        assert np.allclose(weights[1, 1], (0.0, 1.0, 0.0))
        assert np.allclose(weights[1, 2], (0.0, 0.0, 1.0))

    def test_amplitude_alone_does_not_change_bands(self, banded_field):
        low = splatmap.classify(banded_field, GenerationParameters(amplitude=20.0), 3, 2)
        high = splatmap.classify(banded_field, GenerationParameters(amplitude=55.0), 3, 2)

        assert np.array_equal(low, high)

    def test_texture_scale_lifts_heights(self, banded_field):
        params = GenerationParameters(amplitude=20.0, texture_scale=2.0)

        weights = splatmap.classify(banded_field, params, 3, 2)

        # 0.1 * 2 = 0.2 of the amplitude: shore instead of water.
        assert np.allclose(weights[0, 0], (0.5, 0.0, 0.5))
        # 0.3 * 2 = 0.6 exactly: still the lowland band.
        assert np.allclose(weights[0, 2], (1.0, 0.0, 0.0))

    @pytest.mark.parametrize("alpha_width, alpha_height", [(1, 1), (13, 3), (64, 64), (5, 200)])
    def test_any_alpha_resolution(self, params, permutation_table, alpha_width, alpha_height):
        heights = generate_heights(params, 7, 5, permutation_table)

        for sampling in splatmap.SAMPLING_MODES:
            weights = splatmap.classify(heights, params, alpha_width, alpha_height, sampling=sampling)
            assert weights.shape == (alpha_height, alpha_width, 3)
            assert np.allclose(weights.sum(axis=-1), 1.0, atol=1e-5)

    def test_nearest_sampling_picks_grid_cells(self):
        field = np.arange(16, dtype=float).reshape(4, 4)

        samples = splatmap.sample_heights(field, 2, 2, "nearest")

        assert samples.tolist() == [[0.0, 2.0], [8.0, 10.0]]

    def test_bilinear_sampling_interpolates(self):
        field = np.array([[0.0, 1.0], [0.0, 1.0]])

        samples = splatmap.sample_heights(field, 4, 1, "bilinear")

        assert np.allclose(samples, [[0.0, 0.5, 1.0, 1.0]])

    def test_bilinear_sampling_of_flat_field_is_flat(self):
        samples = splatmap.sample_heights(np.full((9, 9), 0.4), 20, 11, "bilinear")

        assert np.allclose(samples, 0.4)

    def test_unknown_sampling_raises(self, banded_field, params):
        with pytest.raises(ConfigurationError):
            splatmap.classify(banded_field, params, 3, 2, sampling="cubic")

    def test_empty_field_raises(self, params):
        with pytest.raises(ConfigurationError):
            splatmap.classify(np.zeros((0, 4)), params, 3, 3)


class TestClassifySurface:

    def test_surface_readback_matches_direct_classification(self, params, permutation_table):
        surface = HeightmapSurface(17, 17, 12, 12, 3, size=(200, params.amplitude, 200))
        heights = generate_heights(params, 17, 17, permutation_table)
        surface.set_heights(0, 0, heights)

        from_surface = splatmap.classify_surface(surface, params)
        direct = splatmap.classify(heights, params, 12, 12)

        assert np.array_equal(from_surface, direct)

    def test_bilinear_readback_matches_direct_classification(self, params, permutation_table):
        surface = HeightmapSurface(9, 9, 20, 20, 3, size=(200, params.amplitude, 200))
        heights = generate_heights(params, 9, 9, permutation_table)
        surface.set_heights(0, 0, heights)

        from_surface = splatmap.classify_surface(surface, params, sampling="bilinear")
        direct = splatmap.classify(heights, params, 20, 20, sampling="bilinear")

        assert np.allclose(from_surface, direct)

    def test_uses_surface_layer_count(self, params):
        surface = HeightmapSurface(5, 5, 4, 4, 4)

        weights = splatmap.classify_surface(surface, params)

        assert weights.shape == (4, 4, 4)
        assert np.all(weights[..., 3] == 0.0)

    def test_surface_with_too_few_layers_raises(self, params):
        surface = HeightmapSurface(5, 5, 4, 4, 2)

        with pytest.raises(ConfigurationError):
            splatmap.classify_surface(surface, params)
