"""Shared fixtures for the terrain generator tests."""

import logging

import pytest

from terrain_generator import noise
from terrain_generator.params import GenerationParameters


@pytest.fixture
def logger():
    return logging.getLogger("terrain_generator.tests")


@pytest.fixture
def permutation_table():
    return noise.create_permutation_table(42)


@pytest.fixture
def params():
    return GenerationParameters(amplitude=20.0, frequency=4.0, octaves=3, persistence=0.5, seed=42)


@pytest.fixture
def small_config():
    """A config small enough to regenerate in a fraction of a second."""
    return {
        'seed': 7,
        'amplitude': 20.0,
        'frequency': 5.0,
        'octaves': 3,
        'persistence': 0.5,
        'heightmap_resolution': 33,
        'alphamap_resolution': 24,
        'alphamap_layers': 3,
    }
