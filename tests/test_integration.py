"""Integration tests for the full render pipeline.

These tests run RenderConfig -> scene -> worker pool -> framebuffer -> file
on small images and check properties of the finished picture rather than
individual pixels.
"""

import numpy as np
import pytest
from PIL import Image as PILImage


class TestRenderPipeline:
    """End-to-end renders through render()."""

    def test_render_returns_complete_framebuffer(self):
        """Test that every pixel is written with full alpha."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.render.pipeline import render

        framebuffer, stats = render(RenderConfig(level=3, width=40, height=24, workers=3))
        assert framebuffer.pixels.shape == (24, 40, 4)
        assert (framebuffer.pixels[:, :, 3] == 255).all()
        assert stats.tiles_total == 3 * 2
        assert stats.tiles_rendered == stats.tiles_total

    def test_image_contains_background_ambient_and_lit(self):
        """Test that the pyramid shows background, shadowed and lit pixels."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.render.pipeline import render

        framebuffer, _ = render(RenderConfig(level=4, width=64, height=64, workers=2))
        rgb = framebuffer.rgb().reshape(-1, 3)
        colours = {tuple(int(c) for c in px) for px in rgb}

        assert (26, 26, 26) in colours
        assert (51, 77, 51) in colours
        # Lit pixels carry extra green only
        lit = [c for c in colours if c[1] > 77]
        assert lit
        assert all(c[0] == 51 and c[2] == 51 for c in lit)

    def test_pyramid_is_centered_horizontally_in_the_lower_half(self):
        """Test where the geometry lands in the image."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.render.pipeline import render

        framebuffer, _ = render(RenderConfig(level=2, width=32, height=32, workers=2))
        hit = (framebuffer.rgb() != 26).any(axis=2)
        rows, cols = np.nonzero(hit)
        # Storage row 0 is the top of the image
        assert rows.mean() > 16
        assert abs(cols.mean() - 15.5) < 2.0

    def test_worker_count_does_not_change_image(self):
        """Test that one and many workers give identical images."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.render.pipeline import render

        single, _ = render(RenderConfig(level=3, width=32, height=32, workers=1))
        many, _ = render(RenderConfig(level=3, width=32, height=32, workers=5, tile_width=7))
        assert np.array_equal(single.pixels, many.pixels)

    def test_progress_callback_reaches_total(self):
        """Test that the pipeline forwards the progress callback."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.render.pipeline import render

        seen = []
        render(
            RenderConfig(level=1, width=16, height=16, tile_width=8, tile_height=8),
            callback=lambda done, total: seen.append((done, total)),
        )
        assert seen[-1] == (4, 4)

    def test_taichi_backend_matches_python(self):
        """Test that the backends agree through the whole pipeline."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.preview.export import compare_images
        from pyramid_tracer.render.pipeline import render

        python_fb, _ = render(RenderConfig(level=3, width=32, height=32, workers=2))
        taichi_fb, _ = render(
            RenderConfig(level=3, width=32, height=32, workers=2, backend="taichi")
        )
        diff = compare_images(python_fb, taichi_fb)
        assert diff.within(1), diff
        assert (taichi_fb.pixels[:, :, 3] == 255).all()

    def test_create_tile_renderer_selects_backend(self):
        """Test the backend switch."""
        from pyramid_tracer.camera.pinhole import Camera
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.kernel.renderer import KernelTileRenderer
        from pyramid_tracer.render.pipeline import create_tile_renderer
        from pyramid_tracer.render.tile import PythonTileRenderer
        from pyramid_tracer.scene.scene import DEFAULT_EYE, default_scene

        scene = default_scene(level=1)
        camera = Camera(DEFAULT_EYE, 8, 8)
        python = create_tile_renderer(RenderConfig(width=8, height=8), scene, camera)
        kernel = create_tile_renderer(
            RenderConfig(width=8, height=8, backend="taichi"), scene, camera
        )
        assert isinstance(python, PythonTileRenderer)
        assert isinstance(kernel, KernelTileRenderer)


class TestRenderToFile:
    """Render and save in one go."""

    @pytest.mark.parametrize("suffix", [".tga", ".ppm", ".pgm", ".png"])
    def test_render_and_save(self, tmp_path, suffix):
        """Test that a rendered image can be written in every format."""
        from pyramid_tracer.config import RenderConfig
        from pyramid_tracer.preview.export import save_image
        from pyramid_tracer.render.pipeline import render

        framebuffer, _ = render(RenderConfig(level=2, width=16, height=16, workers=2))
        path = save_image(framebuffer, tmp_path / f"pyramid{suffix}")
        with PILImage.open(path) as image:
            assert image.size == (16, 16)
