"""End-to-end render from a RenderConfig.

Builds the scene and camera, selects the tile renderer for the configured
backend, allocates the framebuffer and runs the worker pool over it.

Example:
    >>> from pyramid_tracer.config import RenderConfig
    >>> from pyramid_tracer.render.pipeline import render
    >>> framebuffer, stats = render(RenderConfig(level=2, width=32, height=32, workers=2))
    >>> framebuffer.pixels.shape
    (32, 32, 4)
"""

from __future__ import annotations

import logging

from pyramid_tracer.camera.pinhole import Camera
from pyramid_tracer.config import RenderConfig
from pyramid_tracer.core.framebuffer import Framebuffer
from pyramid_tracer.core.ray import as_vec3
from pyramid_tracer.render.scheduler import ProgressCallback, RenderStats, TileScheduler
from pyramid_tracer.render.tile import PythonTileRenderer, TileRenderer
from pyramid_tracer.render.tiles import partition_tiles
from pyramid_tracer.scene.scene import Scene, default_scene

logger = logging.getLogger(__name__)


def create_tile_renderer(config: RenderConfig, scene: Scene, camera: Camera) -> TileRenderer:
    """Create the tile renderer for the configured backend.

    The taichi backend requires ``ti.init()`` to have been called.
    """
    if config.backend == "taichi":
        from pyramid_tracer.kernel.renderer import KernelTileRenderer

        return KernelTileRenderer(scene, camera, config.samples_per_pixel)
    return PythonTileRenderer(scene, camera, config.samples_per_pixel)


def render(
    config: RenderConfig,
    callback: ProgressCallback | None = None,
) -> tuple[Framebuffer, RenderStats]:
    """Render the sphere pyramid described by a config.

    Args:
        config: Validated render parameters.
        callback: Optional progress callback (tiles_done, tiles_total).

    Returns:
        The completed framebuffer and the render statistics.

    Raises:
        WorkerError: If any worker fails.
    """
    logger.info(
        "Rendering level %d pyramid at %dx%d, ss=%d, %d workers, %s backend",
        config.level,
        config.width,
        config.height,
        config.samples_per_pixel,
        config.workers,
        config.backend,
    )
    scene = default_scene(level=config.level, light=config.light)
    camera = Camera(as_vec3(config.eye), config.width, config.height)
    renderer = create_tile_renderer(config, scene, camera)

    framebuffer = Framebuffer(config.width, config.height)
    scheduler = TileScheduler(config.workers, config.tile_width, config.tile_height)
    stats = scheduler.render(renderer, framebuffer, callback)
    return framebuffer, stats


def render_sequential(
    renderer: TileRenderer,
    framebuffer: Framebuffer,
    tile_width: int = 16,
    tile_height: int = 16,
) -> None:
    """Render every tile on the calling thread in scan order.

    Produces the same pixels as the worker pool; used as its reference.
    """
    for tile in partition_tiles(framebuffer.width, framebuffer.height, tile_width, tile_height):
        renderer.render_tile(tile, framebuffer)
