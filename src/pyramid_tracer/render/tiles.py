"""Rectangular tiles and frame partitioning.

Tiles are half-open pixel rectangles. Partitioning walks the frame in
row-major scan order, all tiles of one tile row before the next, and clips the
last column and row of tiles to the frame edges, so the tiles always cover
every pixel exactly once.

Example:
    >>> from pyramid_tracer.render.tiles import partition_tiles
    >>> tiles = partition_tiles(40, 20, 16, 16)
    >>> [(t.left, t.top, t.right, t.bottom) for t in tiles]
    [(0, 0, 16, 16), (16, 0, 32, 16), (32, 0, 40, 16), (0, 16, 16, 20), (16, 16, 32, 20), (32, 16, 40, 20)]
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """Axis-aligned pixel rectangle, half-open on the right and bottom.

    Attributes:
        left: First column.
        top: First row.
        right: One past the last column.
        bottom: One past the last row.
    """

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        """Whether the rectangle contains no pixels."""
        return self.left == self.right or self.top == self.bottom

    def pixels(self):
        """Yield (x, y) for every pixel, row by row."""
        for y in range(self.top, self.bottom):
            for x in range(self.left, self.right):
                yield x, y


def partition_tiles(width: int, height: int, tile_width: int, tile_height: int) -> list[Rect]:
    """Split a frame into tiles in row-major scan order.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        tile_width: Nominal tile width; edge tiles may be narrower.
        tile_height: Nominal tile height; edge tiles may be shorter.

    Returns:
        Non-overlapping, non-empty tiles covering the whole frame.

    Raises:
        ValueError: If any dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame dimensions must be positive, got {width}x{height}")
    if tile_width <= 0 or tile_height <= 0:
        raise ValueError(f"Tile dimensions must be positive, got {tile_width}x{tile_height}")

    tiles = []
    for top in range(0, height, tile_height):
        bottom = min(top + tile_height, height)
        for left in range(0, width, tile_width):
            right = min(left + tile_width, width)
            tiles.append(Rect(left, top, right, bottom))
    return tiles
