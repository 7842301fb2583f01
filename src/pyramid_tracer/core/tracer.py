"""Single-ray shading with a shadow ray.

The shading model has two terms: an ambient colour for every surface point
and a diffuse colour scaled by the cosine to the light for points that face
the light and are not occluded. There are no reflections, no specular term and
no secondary bounces.

Example:
    >>> from pyramid_tracer.core.ray import Ray, Vec3
    >>> from pyramid_tracer.core.tracer import BACKGROUND_COLOR, Tracer
    >>> from pyramid_tracer.scene.scene import default_scene
    >>> tracer = Tracer(default_scene(level=1))
    >>> tracer.trace(Ray(Vec3(0.0, 0.0, -4.0), Vec3(0.0, 0.0, -1.0))) == BACKGROUND_COLOR
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pyramid_tracer.core.ray import DELTA, Hit, Ray, Vec3

if TYPE_CHECKING:
    from pyramid_tracer.scene.scene import Scene

# =============================================================================
# Shading Constants
# =============================================================================

BACKGROUND_COLOR = Vec3(0.1, 0.1, 0.1)
DIFFUSE_COLOR = Vec3(0.0, 0.7, 0.0)
AMBIENT_COLOR = Vec3(0.2, 0.3, 0.2)


class Tracer:
    """Evaluates the colour seen along a ray in a scene.

    The tracer keeps no per-ray state, so one instance can be shared by all
    render workers.

    Attributes:
        scene: The scene being rendered.
    """

    def __init__(self, scene: Scene) -> None:
        self.scene = scene
        self._shadow_direction = -scene.light

    def trace(self, ray: Ray) -> Vec3:
        """Trace a primary ray.

        Args:
            ray: The ray to trace, with a unit-length direction.

        Returns:
            BACKGROUND_COLOR on a miss, AMBIENT_COLOR for surfaces facing away
            from the light or in shadow, otherwise the ambient colour plus the
            diffuse colour scaled by the cosine to the light.
        """
        root = self.scene.root
        hit = Hit()
        root.intersect(hit, ray)
        if hit.missed:
            return BACKGROUND_COLOR

        g = hit.normal.dot(self.scene.light)
        if g >= 0.0:
            return AMBIENT_COLOR

        point = ray.origin + (ray.direction * hit.distance + hit.normal * DELTA)
        if self.is_occluded(point):
            return AMBIENT_COLOR

        return AMBIENT_COLOR + DIFFUSE_COLOR * -g

    def is_occluded(self, point: Vec3) -> bool:
        """Whether anything lies between a point and the light."""
        shadow = Hit()
        self.scene.root.intersect(shadow, Ray(point, self._shadow_direction))
        return not shadow.missed
