"""RGBA byte framebuffer shared by render workers.

The framebuffer stores ``height x width`` pixels of four bytes (R, G, B, A)
in a row-major numpy array whose first storage row is the top of the image.
Renderers compute rows bottom-up and flip when writing, see
``Framebuffer.set_color``.

Workers write concurrently without locks. This is safe only because every
worker owns a disjoint tile of the image for the duration of a render.

Example:
    >>> from pyramid_tracer.core.framebuffer import Framebuffer
    >>> from pyramid_tracer.core.ray import Vec3
    >>> fb = Framebuffer(4, 2)
    >>> fb.set_color(0, 0, Vec3(0.1, 0.1, 0.1))
    >>> fb.pixels[1, 0].tolist()
    [26, 26, 26, 255]
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from pyramid_tracer.core.ray import Vec3

CHANNELS = 4
OPAQUE = 255


def color_to_byte(component: float) -> int:
    """Convert a colour component in [0, 1] to a byte.

    Rounds half up and clamps to [0, 255]: ``int(clamp(0.5 + c * 255))``.
    """
    scaled = 0.5 + component * 255.0
    if scaled < 0.0:
        scaled = 0.0
    elif scaled > 255.0:
        scaled = 255.0
    return int(scaled)


class Framebuffer:
    """Fixed-size RGBA8 image buffer.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: uint8 array of shape (height, width, 4), storage row 0 at the top.
    """

    def __init__(self, width: int, height: int) -> None:
        """Allocate a cleared framebuffer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: npt.NDArray[np.uint8] = np.zeros((height, width, CHANNELS), dtype=np.uint8)

    def set_rgba(self, x: int, row: int, r: int, g: int, b: int, a: int = OPAQUE) -> None:
        """Write raw bytes at a storage row and column."""
        self.pixels[row, x] = (r, g, b, a)

    def set_color(self, x: int, y: int, color: Vec3) -> None:
        """Write a colour for image-space pixel (x, y).

        Image-space y grows upwards, so the pixel lands on storage row
        ``height - 1 - y``.
        """
        self.set_rgba(
            x,
            self.height - 1 - y,
            color_to_byte(color.x),
            color_to_byte(color.y),
            color_to_byte(color.z),
        )

    def clear(self) -> None:
        """Reset every byte to zero."""
        self.pixels.fill(0)

    def to_bytes(self) -> bytes:
        """Flat row-major RGBA bytes, top row first."""
        return self.pixels.tobytes()

    def rgb(self) -> npt.NDArray[np.uint8]:
        """Copy of the colour channels with shape (height, width, 3)."""
        return self.pixels[:, :, :3].copy()

    def __repr__(self) -> str:
        return f"Framebuffer(width={self.width}, height={self.height})"
