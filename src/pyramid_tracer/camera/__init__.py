"""Camera module for primary ray generation.

Components:
    pinhole: Fixed-orientation pinhole camera used by the tile renderers
"""

from .pinhole import Camera

__all__ = ["Camera"]
