"""Flatten a geometry tree into arrays for stackless traversal.

Taichi kernels cannot recurse, so the tree is laid out in pre-order with a
skip index per node: the index of the first node after the node's subtree.
Walking the arrays from index 0 and jumping to ``skip[i]`` whenever group
``i`` is pruned visits exactly the nodes, in exactly the order, that the
recursive ``Group.intersect`` visits.

Example:
    >>> from pyramid_tracer.core.ray import Vec3
    >>> from pyramid_tracer.kernel.flatten import flatten_geometry
    >>> from pyramid_tracer.scene.pyramid import build_sphere_pyramid
    >>> flat = flatten_geometry(build_sphere_pyramid(2, Vec3(0.0, 0.0, 0.0), 1.0))
    >>> flat.is_group.tolist()
    [1, 0, 0, 0, 0, 0]
    >>> flat.skip.tolist()
    [6, 2, 3, 4, 5, 6]
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from pyramid_tracer.geometry import Group, Node, Sphere


@dataclass(frozen=True)
class FlatGeometry:
    """Pre-order arrays describing a geometry tree.

    For a group the center and radius are those of its bounding sphere.

    Attributes:
        centers: float64 array of shape (n, 3).
        radii: float64 array of shape (n,).
        is_group: int32 array of shape (n,), 1 for groups and 0 for spheres.
        skip: int32 array of shape (n,), index of the node after the subtree.
    """

    centers: npt.NDArray[np.float64]
    radii: npt.NDArray[np.float64]
    is_group: npt.NDArray[np.int32]
    skip: npt.NDArray[np.int32]

    @property
    def node_count(self) -> int:
        return int(self.radii.shape[0])


def flatten_geometry(root: Node) -> FlatGeometry:
    """Lay out a tree in pre-order with skip indices.

    Args:
        root: Root Sphere or Group.

    Returns:
        The flattened tree.

    Raises:
        TypeError: If the tree contains a node that is neither Sphere nor Group.
    """
    centers: list[tuple[float, float, float]] = []
    radii: list[float] = []
    is_group: list[int] = []
    skip: list[int] = []

    def visit(node: Node) -> None:
        index = len(radii)
        if isinstance(node, Group):
            sphere = node.bound
            flag = 1
        elif isinstance(node, Sphere):
            sphere = node
            flag = 0
        else:
            raise TypeError(f"Cannot flatten geometry node of type {type(node).__name__}")

        centers.append(tuple(sphere.center))
        radii.append(sphere.radius)
        is_group.append(flag)
        skip.append(-1)
        if flag:
            for child in node.children:
                visit(child)
        skip[index] = len(radii)

    visit(root)
    return FlatGeometry(
        centers=np.array(centers, dtype=np.float64).reshape(-1, 3),
        radii=np.array(radii, dtype=np.float64),
        is_group=np.array(is_group, dtype=np.int32),
        skip=np.array(skip, dtype=np.int32),
    )
