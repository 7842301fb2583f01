"""Geometry module for intersectable primitives and the bounding hierarchy.

This module provides the two geometry node types and helpers to walk a tree:

Components:
    sphere: Sphere leaf with ray-sphere intersection
    group: Group node pruning its children with a bounding sphere

Every node exposes one capability, ``intersect(hit, ray)``, which updates a
running nearest-hit record in place. Trees are immutable once built and are
shared read-only between render workers.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, Union

from pyramid_tracer.core.ray import Hit, Ray

from .group import Group
from .sphere import INFINITY, Sphere


class Geometry(Protocol):
    """Anything that can be intersected with a ray."""

    def intersect(self, hit: Hit, ray: Ray) -> None: ...

    def describe(self, indent: int = 0) -> str: ...


Node = Union[Sphere, Group]


def iter_spheres(node: Node) -> Iterator[Sphere]:
    """Yield the leaf spheres of a tree in traversal order.

    Bounding spheres of groups are not yielded.
    """
    if isinstance(node, Group):
        for child in node.children:
            yield from iter_spheres(child)
    else:
        yield node


def count_nodes(node: Node) -> int:
    """Count groups and spheres in a tree."""
    if isinstance(node, Group):
        return 1 + sum(count_nodes(child) for child in node.children)
    return 1


def tree_depth(node: Node) -> int:
    """Number of levels in a tree; a lone sphere has depth 1."""
    if isinstance(node, Group):
        return 1 + max((tree_depth(child) for child in node.children), default=0)
    return 1


__all__ = [
    "Geometry",
    "Node",
    "Sphere",
    "Group",
    "INFINITY",
    "iter_spheres",
    "count_nodes",
    "tree_depth",
]
