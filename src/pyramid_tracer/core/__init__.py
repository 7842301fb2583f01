"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Vec3, Ray and Hit value types and vector utilities
    tracer: Single-ray shading with a shadow ray and a two-tone colour model
    framebuffer: Shared RGBA byte buffer written by tile workers

The tracer evaluates one ray at a time against a read-only geometry tree, so
any number of worker threads may share a Tracer instance.
"""

from .framebuffer import Framebuffer, color_to_byte
from .ray import (
    DELTA,
    ZERO,
    Hit,
    Ray,
    Vec3,
    as_vec3,
    dot,
    length,
    normalize,
    ray_at,
)
from .tracer import (
    AMBIENT_COLOR,
    BACKGROUND_COLOR,
    DIFFUSE_COLOR,
    Tracer,
)

__all__ = [
    # Ray primitives
    "Vec3",
    "Ray",
    "Hit",
    "ZERO",
    "DELTA",
    "as_vec3",
    "dot",
    "length",
    "normalize",
    "ray_at",
    # Tracer
    "Tracer",
    "BACKGROUND_COLOR",
    "DIFFUSE_COLOR",
    "AMBIENT_COLOR",
    # Framebuffer
    "Framebuffer",
    "color_to_byte",
]
