"""Vector, ray and hit record primitives for the sphere tracer.

This module provides the value types shared by every stage of the renderer:
an immutable three-component vector, a ray made of an origin and a direction,
and the mutable nearest-hit record threaded through geometry traversal.

Vector arithmetic always returns new values, so vectors can be shared between
worker threads without copying.

Example:
    >>> from pyramid_tracer.core.ray import Hit, Ray, Vec3, normalize, ray_at
    >>> ray = Ray(origin=Vec3(0.0, 0.0, -4.0), direction=normalize(Vec3(0.0, 0.0, 1.0)))
    >>> ray_at(ray, 2.0)
    Vec3(x=0.0, y=0.0, z=-2.0)
    >>> hit = Hit()
    >>> hit.missed
    True
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from typing import NamedTuple

# Shadow-ray bias: sqrt of the machine epsilon of Python floats (float64)
DELTA = math.sqrt(sys.float_info.epsilon)


class Vec3(NamedTuple):
    """An immutable 3D vector.

    Attributes:
        x: First component.
        y: Second component.
        z: Third component.
    """

    x: float
    y: float
    z: float

    def __add__(self, other: Vec3) -> Vec3:  # type: ignore[override]
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:  # type: ignore[override]
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        """Return this vector scaled to unit length.

        Raises:
            ZeroDivisionError: If the vector has zero length.
        """
        norm = math.sqrt(self.dot(self))
        if norm == 0.0:
            raise ZeroDivisionError("Cannot normalize a zero-length vector")
        return self * (1.0 / norm)


ZERO = Vec3(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Intersection distances are only
            comparable between rays with unit-length directions, which is
            what the camera produces; this is not enforced.
    """

    origin: Vec3
    direction: Vec3


@dataclass
class Hit:
    """Nearest intersection found so far along a ray.

    A fresh record is created for every traced ray and updated in place by
    every geometry node the ray visits.

    Attributes:
        distance: Distance along the ray to the nearest hit, +inf if none.
        normal: Unit surface normal at the nearest hit.
    """

    distance: float = math.inf
    normal: Vec3 = field(default=ZERO)

    @property
    def missed(self) -> bool:
        """Whether nothing has been hit yet."""
        return self.distance == math.inf

    def reset(self) -> None:
        """Forget the current hit."""
        self.distance = math.inf
        self.normal = ZERO


# =============================================================================
# Vector Utility Functions
# =============================================================================


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return v.length()


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v.

    Raises:
        ZeroDivisionError: If v has zero length.
    """
    return v.normalized()


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + ray.direction * t


def as_vec3(values: tuple[float, float, float] | Vec3) -> Vec3:
    """Convert a 3-tuple of numbers to a Vec3 of floats."""
    x, y, z = values
    return Vec3(float(x), float(y), float(z))
