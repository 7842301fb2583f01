"""Tile-parallel ray tracer for the recursive sphere pyramid scene.

This package renders a scene of recursively nested spheres with a bounding
sphere hierarchy, a simple diffuse/ambient shading model with shadow rays,
and a worker pool that renders rectangular tiles concurrently into one shared
framebuffer.

Subpackages:
    core: Vector, ray and hit primitives, the shading tracer and the framebuffer
    geometry: Sphere and Group intersectables forming the bounding volume tree
    scene: Sphere pyramid construction and the scene container
    camera: Pinhole camera mapping pixel coordinates to primary rays
    render: Tile partitioning, per-tile rendering and the worker pool scheduler
    kernel: Taichi backend rendering tiles with a flattened geometry tree
    preview: Export of finished framebuffers to image files
"""

__version__ = "0.1.0"
