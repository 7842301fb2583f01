"""Pinhole camera generating primary rays.

The camera sits at a fixed eye point looking down +z. The direction for
image coordinate (px, py) is ``normalize(px - w/2, py - h/2, w)``: the image
width doubles as the focal length, which gives a 53 degree horizontal field of
view. Coordinates may be fractional for supersampling; (0, 0) is the
bottom-left corner of the image.

Example:
    >>> from pyramid_tracer.camera.pinhole import Camera
    >>> from pyramid_tracer.core.ray import Vec3
    >>> camera = Camera(eye=Vec3(0.0, 0.0, -4.0), width=64, height=64)
    >>> camera.direction_for(32.0, 32.0)
    Vec3(x=0.0, y=0.0, z=1.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from pyramid_tracer.core.ray import Ray, Vec3


@dataclass(frozen=True)
class Camera:
    """A pinhole camera.

    Attributes:
        eye: Camera position in world space.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    eye: Vec3
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Camera image dimensions must be positive, got {self.width}x{self.height}"
            )

    def direction_for(self, px: float, py: float) -> Vec3:
        """Unit ray direction through image coordinate (px, py)."""
        return Vec3(px - self.width * 0.5, py - self.height * 0.5, float(self.width)).normalized()

    def ray_for(self, px: float, py: float) -> Ray:
        """Primary ray through image coordinate (px, py)."""
        return Ray(self.eye, self.direction_for(px, py))
