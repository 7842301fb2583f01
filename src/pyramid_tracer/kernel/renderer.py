"""Taichi tile renderer.

This module renders tiles with a Taichi kernel instead of the Python tracer.
The geometry tree is flattened once into Taichi fields and traversed without
a stack (see ``flatten.py``); shading, supersampling and byte conversion
follow the Python path step for step, so both backends produce the same image
up to floating-point rounding.

The kernel writes straight into the framebuffer's numpy array, restricted to
the tile it was launched for, so it plugs into the same TileScheduler as the
Python renderer. Kernel launches are serialized with a lock because the Taichi
runtime is not safe to drive from several threads at once; each launch is
itself parallel over the pixels of its tile.

All geometry and colour state is kept in 64-bit floats. Initialize Taichi
before creating a renderer:

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pyramid_tracer.camera.pinhole import Camera
    >>> from pyramid_tracer.core.framebuffer import Framebuffer
    >>> from pyramid_tracer.kernel.renderer import KernelTileRenderer
    >>> from pyramid_tracer.render.tiles import Rect
    >>> from pyramid_tracer.scene.scene import DEFAULT_EYE, default_scene
    >>>
    >>> camera = Camera(DEFAULT_EYE, 64, 64)
    >>> renderer = KernelTileRenderer(default_scene(level=3), camera)
    >>> fb = Framebuffer(64, 64)
    >>> renderer.render_tile(Rect(0, 0, 64, 64), fb)
"""

import logging
import threading

import numpy as np
import taichi as ti
import taichi.math as tm

from pyramid_tracer.camera.pinhole import Camera
from pyramid_tracer.core.framebuffer import Framebuffer
from pyramid_tracer.core.ray import DELTA
from pyramid_tracer.core.tracer import AMBIENT_COLOR, BACKGROUND_COLOR, DIFFUSE_COLOR
from pyramid_tracer.kernel.flatten import flatten_geometry
from pyramid_tracer.render.tile import check_tile_target
from pyramid_tracer.render.tiles import Rect
from pyramid_tracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# 64-bit vector type used for every kernel-side vector
vec3d = ti.types.vector(3, ti.f64)

# Rows of the palette field
EYE = 0
LIGHT = 1
BACKGROUND = 2
DIFFUSE = 3
AMBIENT = 4

# Entries of the scalar parameter field
PARAM_DELTA = 0
PARAM_SS = 1
PARAM_SAMPLE_SCALE = 2


@ti.data_oriented
class KernelTileRenderer:
    """Tile renderer running on a Taichi kernel.

    Attributes:
        camera: Camera whose eye and image size the kernel uses.
        samples_per_pixel: Supersampling factor ss.
        node_count: Number of nodes in the flattened geometry tree.
    """

    def __init__(self, scene: Scene, camera: Camera, samples_per_pixel: int = 1) -> None:
        """Upload the scene to Taichi fields.

        Args:
            scene: Scene to render; flattened once here.
            camera: Camera producing primary rays.
            samples_per_pixel: Supersampling factor ss (>= 1).

        Raises:
            ValueError: If samples_per_pixel is below 1.
        """
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        self.camera = camera
        self.samples_per_pixel = samples_per_pixel
        self._width = camera.width
        self._height = camera.height
        self._launch_lock = threading.Lock()

        flat = flatten_geometry(scene.root)
        self.node_count = flat.node_count

        self._centers = ti.Vector.field(3, dtype=ti.f64, shape=self.node_count)
        self._radii = ti.field(dtype=ti.f64, shape=self.node_count)
        self._is_group = ti.field(dtype=ti.i32, shape=self.node_count)
        self._skip = ti.field(dtype=ti.i32, shape=self.node_count)
        self._centers.from_numpy(flat.centers)
        self._radii.from_numpy(flat.radii)
        self._is_group.from_numpy(flat.is_group)
        self._skip.from_numpy(flat.skip)

        self._palette = ti.Vector.field(3, dtype=ti.f64, shape=5)
        self._palette.from_numpy(
            np.array(
                [camera.eye, scene.light, BACKGROUND_COLOR, DIFFUSE_COLOR, AMBIENT_COLOR],
                dtype=np.float64,
            )
        )
        self._params = ti.field(dtype=ti.f64, shape=3)
        self._params.from_numpy(
            np.array(
                [DELTA, float(samples_per_pixel), 1.0 / (samples_per_pixel * samples_per_pixel)],
                dtype=np.float64,
            )
        )
        logger.debug("Uploaded %d geometry nodes to Taichi fields", self.node_count)

    def render_tile(self, rect: Rect, framebuffer: Framebuffer) -> None:
        """Render every pixel of ``rect`` into ``framebuffer``.

        Raises:
            ValueError: If the framebuffer size differs from the camera's or the
                tile lies outside it.
        """
        check_tile_target(rect, framebuffer, self.camera)
        if rect.is_empty():
            return
        with self._launch_lock:
            self._render_rect(framebuffer.pixels, rect.left, rect.top, rect.right, rect.bottom)

    # =========================================================================
    # Kernel-side Geometry
    # =========================================================================

    @ti.func
    def _ray_sphere(self, center: vec3d, radius: ti.f64, origin: vec3d, direction: vec3d) -> ti.f64:
        v = center - origin
        b = v.dot(direction)
        disc = b * b - v.dot(v) + radius * radius
        result = ti.cast(tm.inf, ti.f64)
        if disc >= 0.0:
            d = ti.sqrt(disc)
            t2 = b + d
            if t2 >= 0.0:
                t1 = b - d
                result = ti.select(t1 > 0.0, t1, t2)
        return result

    @ti.func
    def _intersect(self, origin: vec3d, direction: vec3d):
        """Stackless walk of the flattened tree; returns (distance, normal)."""
        distance = ti.cast(tm.inf, ti.f64)
        normal = vec3d(0.0, 0.0, 0.0)
        i = 0
        while i < self.node_count:
            center = self._centers[i]
            candidate = self._ray_sphere(center, self._radii[i], origin, direction)
            if self._is_group[i] == 1:
                if candidate >= distance:
                    i = self._skip[i]
                else:
                    i += 1
            else:
                if candidate < distance:
                    distance = candidate
                    w = origin + (direction * candidate - center)
                    normal = w * (1.0 / ti.sqrt(w.dot(w)))
                i += 1
        return distance, normal

    @ti.func
    def _trace(self, origin: vec3d, direction: vec3d) -> vec3d:
        color = self._palette[BACKGROUND]
        distance, normal = self._intersect(origin, direction)
        if distance < tm.inf:
            light = self._palette[LIGHT]
            color = self._palette[AMBIENT]
            g = normal.dot(light)
            if g < 0.0:
                point = origin + (direction * distance + normal * self._params[PARAM_DELTA])
                shadow_distance, _ = self._intersect(point, -light)
                if shadow_distance == tm.inf:
                    color = self._palette[AMBIENT] + self._palette[DIFFUSE] * -g
        return color

    # =========================================================================
    # Tile Kernel
    # =========================================================================

    @ti.kernel
    def _render_rect(
        self,
        pixels: ti.types.ndarray(dtype=ti.u8, ndim=3),
        left: ti.i32,
        top: ti.i32,
        right: ti.i32,
        bottom: ti.i32,
    ):
        for y, x in ti.ndrange((top, bottom), (left, right)):
            eye = self._palette[EYE]
            ss = self._params[PARAM_SS]
            width = ti.cast(self._width, ti.f64)
            height = ti.cast(self._height, ti.f64)
            color = vec3d(0.0, 0.0, 0.0)
            for ssx in range(self.samples_per_pixel):
                for ssy in range(self.samples_per_pixel):
                    px = ti.cast(x, ti.f64) + ti.cast(ssx, ti.f64) / ss
                    py = ti.cast(y, ti.f64) + ti.cast(ssy, ti.f64) / ss
                    direction = vec3d(px - width * 0.5, py - height * 0.5, width)
                    direction = direction * (1.0 / ti.sqrt(direction.dot(direction)))
                    color += self._trace(eye, direction)
            color = color * self._params[PARAM_SAMPLE_SCALE]

            row = self._height - 1 - y
            for c in ti.static(range(3)):
                scaled = ti.min(ti.max(0.5 + color[c] * 255.0, 0.0), 255.0)
                pixels[row, x, c] = ti.cast(scaled, ti.u8)
            pixels[row, x, 3] = ti.cast(255, ti.u8)
