"""Group node of the bounding sphere hierarchy.

A Group pairs a bounding sphere with an ordered tuple of children. The
bounding sphere is the only acceleration structure in the renderer: when the
distance to it is not closer than the current hit, the whole subtree is
skipped.

Example:
    >>> from pyramid_tracer.core.ray import Hit, Ray, Vec3
    >>> from pyramid_tracer.geometry.group import Group
    >>> from pyramid_tracer.geometry.sphere import Sphere
    >>> a = Sphere(Vec3(0.0, 0.0, 0.0), 1.0)
    >>> b = Sphere(Vec3(0.0, 0.0, 2.0), 1.0)
    >>> group = Group(bound=Sphere(Vec3(0.0, 0.0, 1.0), 3.0), children=(a, b))
    >>> hit = Hit()
    >>> group.intersect(hit, Ray(Vec3(2.0, 0.0, 2.0), Vec3(-1.0, 0.0, 0.0)))
    >>> hit.distance
    1.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pyramid_tracer.core.ray import Hit, Ray
from pyramid_tracer.geometry.sphere import Sphere

if TYPE_CHECKING:
    from pyramid_tracer.geometry import Geometry


@dataclass(frozen=True)
class Group:
    """A bounding sphere and the geometry it encloses.

    Attributes:
        bound: Sphere enclosing every descendant. This is not checked at
            construction; see encloses_children().
        children: Child nodes, visited in order.
    """

    bound: Sphere
    children: tuple[Geometry, ...]

    def intersect(self, hit: Hit, ray: Ray) -> None:
        """Intersect the ray with every child unless the bound is pruned.

        Args:
            hit: The running nearest-hit record, updated in place.
            ray: The ray being traced.
        """
        if self.bound.ray_sphere(ray) >= hit.distance:
            return
        for child in self.children:
            child.intersect(hit, ray)

    def encloses_children(self) -> bool:
        """Check that every descendant sphere lies inside the bound."""
        from pyramid_tracer.geometry import iter_spheres

        center = self.bound.center
        for sphere in iter_spheres(self):
            reach = (sphere.center - center).length() + sphere.radius
            if reach > self.bound.radius:
                return False
        return True

    def describe(self, indent: int = 0) -> str:
        """Return an indented multi-line description of the subtree."""
        c = self.bound.center
        lines = [f"{'  ' * indent}Group: center=({c.x}, {c.y}, {c.z}) radius={self.bound.radius}"]
        for child in self.children:
            lines.append(child.describe(indent + 1))
        return "\n".join(lines)
