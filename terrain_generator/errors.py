# terrain_generator/errors.py

"""Exceptions raised by the terrain generator."""


class TerrainGenerationError(Exception):
    """Base class for every failure raised by this package."""


class ConfigurationError(TerrainGenerationError, ValueError):
    """
    Invalid parameters or grid geometry. Raised before any grid work begins,
    so no partial output is ever produced.
    """


class NormalizationError(TerrainGenerationError, ArithmeticError):
    """
    A cell's splat weights summed to zero. The whole classification fails
    rather than emitting NaN/Inf weights into the material map.
    """
