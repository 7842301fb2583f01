"""Unit tests for tiles and per-tile rendering.

Tests cover:
- Row-major partitioning with clipped edge tiles
- Tiles covering every pixel exactly once
- Supersampled tile rendering writing only its own pixels
"""

import numpy as np
import pytest


class TestRect:
    """Tests for Rect."""

    def test_dimensions(self):
        """Test width, height and area."""
        from pyramid_tracer.render.tiles import Rect

        rect = Rect(2, 3, 10, 7)
        assert (rect.width, rect.height, rect.area) == (8, 4, 32)
        assert not rect.is_empty()
        assert Rect(4, 0, 4, 8).is_empty()

    def test_pixels_row_by_row(self):
        """Test the pixel iteration order."""
        from pyramid_tracer.render.tiles import Rect

        assert list(Rect(1, 5, 3, 7).pixels()) == [(1, 5), (2, 5), (1, 6), (2, 6)]


class TestPartitionTiles:
    """Tests for partition_tiles."""

    def test_exact_fit(self):
        """Test a frame that divides evenly into tiles."""
        from pyramid_tracer.render.tiles import partition_tiles

        tiles = partition_tiles(32, 32, 16, 16)
        assert [(t.left, t.top) for t in tiles] == [(0, 0), (16, 0), (0, 16), (16, 16)]
        assert all(t.width == 16 and t.height == 16 for t in tiles)

    def test_edge_tiles_are_clipped(self):
        """Test that the last column and row are narrower."""
        from pyramid_tracer.render.tiles import Rect, partition_tiles

        tiles = partition_tiles(20, 10, 16, 8)
        assert tiles == [
            Rect(0, 0, 16, 8),
            Rect(16, 0, 20, 8),
            Rect(0, 8, 16, 10),
            Rect(16, 8, 20, 10),
        ]

    def test_tile_larger_than_frame(self):
        """Test that a single clipped tile covers a small frame."""
        from pyramid_tracer.render.tiles import Rect, partition_tiles

        assert partition_tiles(3, 2, 16, 16) == [Rect(0, 0, 3, 2)]

    @pytest.mark.parametrize("size", [(1, 1, 1, 1), (37, 23, 8, 5), (64, 48, 16, 16)])
    def test_every_pixel_covered_once(self, size):
        """Test that tiles partition the frame without overlap."""
        from pyramid_tracer.render.tiles import partition_tiles

        width, height, tw, th = size
        coverage = np.zeros((height, width), dtype=np.int32)
        for tile in partition_tiles(width, height, tw, th):
            assert not tile.is_empty()
            coverage[tile.top:tile.bottom, tile.left:tile.right] += 1
        assert (coverage == 1).all()

    @pytest.mark.parametrize("args", [(0, 8, 4, 4), (8, 8, 0, 4), (8, 8, 4, -1)])
    def test_invalid_arguments_raise(self, args):
        """Test that non-positive sizes are rejected."""
        from pyramid_tracer.render.tiles import partition_tiles

        with pytest.raises(ValueError):
            partition_tiles(*args)


class TestPythonTileRenderer:
    """Tests for rendering single tiles."""

    def test_writes_only_its_tile(self, small_scene, small_camera):
        """Test that pixels outside the tile stay untouched."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import PythonTileRenderer
        from pyramid_tracer.render.tiles import Rect

        fb = Framebuffer(32, 32)
        PythonTileRenderer(small_scene, small_camera).render_tile(Rect(8, 4, 16, 12), fb)

        written = fb.pixels[:, :, 3] == 255
        # Image rows 4..11 are storage rows 20..27
        expected = np.zeros((32, 32), dtype=bool)
        expected[20:28, 8:16] = True
        assert (written == expected).all()

    def test_supersampling_averages_samples(self, small_scene, small_camera):
        """Test that ss=2 output lies between the extremes of its samples."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import PythonTileRenderer
        from pyramid_tracer.render.tiles import Rect

        one = Framebuffer(32, 32)
        four = Framebuffer(32, 32)
        rect = Rect(0, 0, 32, 32)
        PythonTileRenderer(small_scene, small_camera, 1).render_tile(rect, one)
        PythonTileRenderer(small_scene, small_camera, 2).render_tile(rect, four)

        # Background-only corners agree; edges are smoothed so images differ
        assert four.pixels[0, 0].tolist() == one.pixels[0, 0].tolist() == [26, 26, 26, 255]
        assert not np.array_equal(one.pixels, four.pixels)

    def test_invalid_samples_raise(self, small_scene, small_camera):
        """Test that a supersampling factor below 1 is rejected."""
        from pyramid_tracer.render.tile import PythonTileRenderer

        with pytest.raises(ValueError):
            PythonTileRenderer(small_scene, small_camera, samples_per_pixel=0)

    def test_framebuffer_size_mismatch_raises(self, small_scene, small_camera):
        """Test that the framebuffer must match the camera."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import PythonTileRenderer
        from pyramid_tracer.render.tiles import Rect

        renderer = PythonTileRenderer(small_scene, small_camera)
        fb = Framebuffer(8, 8)
        with pytest.raises(ValueError, match="camera expects"):
            renderer.render_tile(Rect(0, 0, 4, 4), fb)
        assert not fb.pixels.any()

    def test_tile_outside_framebuffer_raises(self, small_scene, small_camera):
        """Test that a tile reaching past the framebuffer edge is rejected."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import PythonTileRenderer
        from pyramid_tracer.render.tiles import Rect

        fb = Framebuffer(32, 32)
        with pytest.raises(ValueError, match="outside"):
            PythonTileRenderer(small_scene, small_camera).render_tile(Rect(24, 24, 40, 40), fb)
        assert not fb.pixels.any()


class TestCheckTileTarget:
    """Tests for check_tile_target."""

    @pytest.mark.parametrize(
        "rect",
        [
            (0, 0, 32, 32),
            (28, 28, 32, 32),
            (8, 8, 8, 8),
        ],
    )
    def test_valid_tiles(self, small_camera, rect):
        """Test that tiles inside the framebuffer pass, empty ones included."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import check_tile_target
        from pyramid_tracer.render.tiles import Rect

        check_tile_target(Rect(*rect), Framebuffer(32, 32), small_camera)

    @pytest.mark.parametrize(
        "rect",
        [
            (-1, 0, 4, 4),
            (0, -4, 4, 0),
            (30, 0, 33, 4),
            (0, 30, 4, 33),
            (8, 0, 4, 4),
        ],
    )
    def test_invalid_tiles_raise(self, small_camera, rect):
        """Test that negative, inverted and overhanging tiles are rejected."""
        from pyramid_tracer.core.framebuffer import Framebuffer
        from pyramid_tracer.render.tile import check_tile_target
        from pyramid_tracer.render.tiles import Rect

        with pytest.raises(ValueError, match="outside"):
            check_tile_target(Rect(*rect), Framebuffer(32, 32), small_camera)
