# terrain_generator/runtime/__init__.py

# This file makes the 'runtime' directory a Python package.
# We can also use it to define the public API of the package.

from .controller import TerrainController

__all__ = ["TerrainController"]
