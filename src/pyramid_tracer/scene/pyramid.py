"""Recursive sphere pyramid construction.

A pyramid of level L is a sphere with four half-size pyramids of level L-1
stacked around and above it, all wrapped in a group whose bounding sphere has
three times the radius of the base sphere. Level 1 is a lone sphere.

The child offset is ``3 * radius / sqrt(12)`` along ``(dx, 1, dz)`` for
``dx, dz`` in ``{-1, 1}``, so every child center sits ``1.5 * radius`` from
the parent center. The resulting tree has ``sum(4**k for k < L)`` spheres.

Example:
    >>> from pyramid_tracer.core.ray import Vec3
    >>> from pyramid_tracer.scene.pyramid import build_sphere_pyramid
    >>> tree = build_sphere_pyramid(3, Vec3(0.0, -1.0, 0.0), 1.0)
    >>> len(tree.children)
    5
"""

from __future__ import annotations

import math

from pyramid_tracer.core.ray import Vec3
from pyramid_tracer.geometry import Group, Node, Sphere

# Bounding sphere radius relative to the base sphere radius
BOUND_SCALE = 3.0


def build_sphere_pyramid(level: int, center: Vec3, radius: float) -> Node:
    """Build a sphere pyramid tree.

    Args:
        level: Recursion level (1 yields a single sphere).
        center: Center of the base sphere.
        radius: Radius of the base sphere.

    Returns:
        A Sphere for level 1, otherwise a Group of five children: the base
        sphere followed by four sub-pyramids ordered by dz then dx.

    Raises:
        ValueError: If level is below 1 or radius is not positive.
    """
    if level < 1:
        raise ValueError(f"Pyramid level must be at least 1, got {level}")
    if radius <= 0.0:
        raise ValueError(f"Pyramid radius must be positive, got {radius}")
    return _build(level, center, radius)


def _build(level: int, center: Vec3, radius: float) -> Node:
    sphere = Sphere(center, radius)
    if level == 1:
        return sphere

    offset = 3.0 * radius / math.sqrt(12.0)
    children: list[Node] = [sphere]
    for dz in (-1, 1):
        for dx in (-1, 1):
            child_center = center + Vec3(float(dx), 1.0, float(dz)) * offset
            children.append(_build(level - 1, child_center, radius * 0.5))
    return Group(bound=Sphere(center, BOUND_SCALE * radius), children=tuple(children))


def expected_sphere_count(level: int) -> int:
    """Number of leaf spheres in a pyramid of the given level."""
    return sum(4**k for k in range(level))
