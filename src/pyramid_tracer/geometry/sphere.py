"""Sphere primitive with ray-sphere intersection.

The intersection uses the projection form of the quadratic: with
``v = center - origin`` and ``b = dot(v, direction)`` the discriminant is
``b^2 - dot(v, v) + radius^2`` and the roots are ``b -/+ sqrt(disc)``. This
form assumes a unit-length ray direction.

The near root is preferred only when it lies in front of the ray origin. When
the origin is inside the sphere the far root is returned, which is the exit
distance. Shadow rays rely on this: a shadow ray leaving a biased point just
outside a sphere never reports that sphere again, while a ray starting inside
a bounding sphere still reports a finite distance and is not pruned.

Example:
    >>> from pyramid_tracer.core.ray import Hit, Ray, Vec3
    >>> from pyramid_tracer.geometry.sphere import Sphere
    >>> sphere = Sphere(center=Vec3(0.0, 0.0, 0.0), radius=1.0)
    >>> ray = Ray(Vec3(2.0, 0.0, 0.0), Vec3(-1.0, 0.0, 0.0))
    >>> sphere.ray_sphere(ray)
    1.0
    >>> hit = Hit()
    >>> sphere.intersect(hit, ray)
    >>> hit.normal
    Vec3(x=1.0, y=0.0, z=0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pyramid_tracer.core.ray import Hit, Ray, Vec3

INFINITY = math.inf


@dataclass(frozen=True)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: Vec3
    radius: float

    def ray_sphere(self, ray: Ray) -> float:
        """Distance along the ray to the sphere surface.

        Args:
            ray: The ray to test. Its direction should be unit length.

        Returns:
            The near root if it is positive, otherwise the far root, or +inf
            if the ray misses the sphere or the sphere lies entirely behind
            the ray origin.
        """
        center = self.center
        origin = ray.origin
        direction = ray.direction
        vx = center.x - origin.x
        vy = center.y - origin.y
        vz = center.z - origin.z
        b = vx * direction.x + vy * direction.y + vz * direction.z
        disc = b * b - (vx * vx + vy * vy + vz * vz) + self.radius * self.radius
        if disc < 0.0:
            return INFINITY
        d = math.sqrt(disc)
        t2 = b + d
        if t2 < 0.0:
            return INFINITY
        t1 = b - d
        return t1 if t1 > 0.0 else t2

    def intersect(self, hit: Hit, ray: Ray) -> None:
        """Record this sphere in ``hit`` if it is strictly closer.

        Ties keep the previously recorded hit.

        Args:
            hit: The running nearest-hit record, updated in place.
            ray: The ray being traced.
        """
        distance = self.ray_sphere(ray)
        if distance >= hit.distance:
            return
        hit.distance = distance
        hit.normal = (ray.origin + (ray.direction * distance - self.center)).normalized()

    def describe(self, indent: int = 0) -> str:
        """Return a one-line text description of the sphere."""
        c = self.center
        return f"{'  ' * indent}Sphere: center=({c.x}, {c.y}, {c.z}) radius={self.radius}"
