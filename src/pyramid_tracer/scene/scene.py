"""Scene container and the default sphere pyramid scene.

A Scene holds a directional light and the root of the geometry tree. Both are
fixed for the lifetime of a render and read concurrently by every worker.

Example:
    >>> from pyramid_tracer.scene.scene import default_scene
    >>> scene = default_scene(level=2)
    >>> round(scene.light.length(), 12)
    1.0
"""

from __future__ import annotations

from dataclasses import dataclass

from pyramid_tracer.core.ray import Vec3, as_vec3
from pyramid_tracer.geometry import Node
from pyramid_tracer.scene.pyramid import build_sphere_pyramid

# =============================================================================
# Default Scene Parameters
# =============================================================================

DEFAULT_LEVEL = 8
DEFAULT_CENTER = Vec3(0.0, -1.0, 0.0)
DEFAULT_RADIUS = 1.0
DEFAULT_LIGHT = Vec3(-1.0, -3.0, 2.0)
DEFAULT_EYE = Vec3(0.0, 0.0, -4.0)


@dataclass(frozen=True)
class Scene:
    """A directional light and the geometry it illuminates.

    Attributes:
        light: Unit direction the light travels in (pointing away from the
            light source). Normalized on construction.
        root: Root node of the geometry tree.

    Raises:
        ValueError: If the light direction has zero length.
    """

    light: Vec3
    root: Node

    def __post_init__(self) -> None:
        light = as_vec3(self.light)
        if light.length() == 0.0:
            raise ValueError("Light direction must be a non-zero vector")
        object.__setattr__(self, "light", light.normalized())


def default_scene(
    level: int = DEFAULT_LEVEL,
    light: tuple[float, float, float] | Vec3 = DEFAULT_LIGHT,
) -> Scene:
    """Create the sphere pyramid scene.

    Args:
        level: Pyramid recursion level.
        light: Light direction; normalized by the Scene.

    Returns:
        A Scene with a pyramid centered at (0, -1, 0) with base radius 1.
    """
    root = build_sphere_pyramid(level, DEFAULT_CENTER, DEFAULT_RADIUS)
    return Scene(light=as_vec3(light), root=root)
