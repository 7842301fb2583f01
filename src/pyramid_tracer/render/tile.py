"""Per-tile rendering on the Python tracer.

This is the worker hot path: every pixel of a tile is sampled on a regular
``ss x ss`` grid, each sample is traced, and the averaged colour is written to
the worker's own region of the shared framebuffer.
"""

from __future__ import annotations

from typing import Protocol

from pyramid_tracer.camera.pinhole import Camera
from pyramid_tracer.core.framebuffer import Framebuffer
from pyramid_tracer.core.ray import ZERO
from pyramid_tracer.core.tracer import Tracer
from pyramid_tracer.render.tiles import Rect
from pyramid_tracer.scene.scene import Scene


class TileRenderer(Protocol):
    """Renders one tile into a framebuffer."""

    def render_tile(self, rect: Rect, framebuffer: Framebuffer) -> None: ...


def check_tile_target(rect: Rect, framebuffer: Framebuffer, camera: Camera) -> None:
    """Check that a tile can be rendered into a framebuffer with a camera.

    Raises:
        ValueError: If the framebuffer size differs from the camera's or the
            tile does not lie inside the framebuffer.
    """
    if (framebuffer.width, framebuffer.height) != (camera.width, camera.height):
        raise ValueError(
            f"Framebuffer is {framebuffer.width}x{framebuffer.height}, "
            f"camera expects {camera.width}x{camera.height}"
        )
    if not (
        0 <= rect.left <= rect.right <= framebuffer.width
        and 0 <= rect.top <= rect.bottom <= framebuffer.height
    ):
        raise ValueError(
            f"Tile {rect} lies outside the {framebuffer.width}x{framebuffer.height} framebuffer"
        )


class PythonTileRenderer:
    """Tile renderer built on the pure Python Tracer.

    Attributes:
        camera: Camera generating primary rays.
        tracer: Shared tracer for the scene.
        samples_per_pixel: Supersampling factor ss; each pixel gets ss*ss samples.
    """

    def __init__(self, scene: Scene, camera: Camera, samples_per_pixel: int = 1) -> None:
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        self.camera = camera
        self.tracer = Tracer(scene)
        self.samples_per_pixel = samples_per_pixel

    def render_tile(self, rect: Rect, framebuffer: Framebuffer) -> None:
        """Render every pixel of ``rect`` into ``framebuffer``.

        Args:
            rect: The tile, in image-space pixel coordinates.
            framebuffer: Destination buffer. Only the pixels of ``rect``
                (after the vertical flip) are written.

        Raises:
            ValueError: If the framebuffer does not match the camera or the
                tile lies outside it.
        """
        check_tile_target(rect, framebuffer, self.camera)

        ss = self.samples_per_pixel
        scale = 1.0 / (ss * ss)
        ray_for = self.camera.ray_for
        trace = self.tracer.trace

        for x, y in rect.pixels():
            color = ZERO
            for ssx in range(ss):
                for ssy in range(ss):
                    color = color + trace(ray_for(x + ssx / ss, y + ssy / ss))
            framebuffer.set_color(x, y, color * scale)
