"""Taichi kernel backend.

Components:
    flatten: Pre-order layout of a geometry tree with skip indices
    renderer: KernelTileRenderer, a TileRenderer backed by a Taichi kernel

Importing ``renderer`` imports Taichi; call ``ti.init()`` before creating a
KernelTileRenderer.
"""

from .flatten import FlatGeometry, flatten_geometry

__all__ = [
    "FlatGeometry",
    "flatten_geometry",
]
