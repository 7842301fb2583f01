"""Image export utilities for finished framebuffers.

The renderer only produces an in-memory RGBA framebuffer; this module hands
it to Pillow for encoding. The output format follows the file extension.

Supported formats:
    - TGA (24-bit true colour)
    - PPM (binary P6, RGB)
    - PGM (binary P5, average of the three channels)
    - PNG (8-bit RGB)

Images from two renders can be compared with compare_images.

Example:
    >>> from pyramid_tracer.config import RenderConfig
    >>> from pyramid_tracer.preview.export import save_image
    >>> from pyramid_tracer.render.pipeline import render
    >>>
    >>> framebuffer, _ = render(RenderConfig(level=3, width=64, height=64))
    >>> save_image(framebuffer, "pyramid.tga")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from pyramid_tracer.core.framebuffer import Framebuffer

# Pillow format names by file extension
FORMATS = {
    ".tga": "TGA",
    ".ppm": "PPM",
    ".pgm": "PPM",
    ".png": "PNG",
}


def framebuffer_to_image(framebuffer: Framebuffer, *, grayscale: bool = False) -> PILImage.Image:
    """Convert a framebuffer to a Pillow image.

    Args:
        framebuffer: The finished framebuffer.
        grayscale: If True, return an "L" image holding the integer average
            of the red, green and blue channels.

    Returns:
        An "RGB" or "L" Pillow image, top row first.
    """
    if grayscale:
        return PILImage.fromarray(to_grayscale(framebuffer))
    return PILImage.fromarray(framebuffer.rgb())


def to_grayscale(framebuffer: Framebuffer) -> npt.NDArray[np.uint8]:
    """Average the colour channels into a (height, width) uint8 array."""
    rgb = framebuffer.pixels[:, :, :3].astype(np.uint16)
    return (rgb.sum(axis=2) // 3).astype(np.uint8)


def save_image(framebuffer: Framebuffer, filepath: str | Path) -> Path:
    """Save a framebuffer, choosing the format from the file extension.

    Args:
        framebuffer: The finished framebuffer.
        filepath: Output path ending in .tga, .ppm, .pgm or .png.

    Returns:
        The path written.

    Raises:
        ValueError: If the extension is not supported.
    """
    path = Path(filepath)
    suffix = path.suffix.lower()
    if suffix not in FORMATS:
        raise ValueError(
            f"Unsupported image format {suffix!r} (expected one of {sorted(FORMATS)})"
        )

    image = framebuffer_to_image(framebuffer, grayscale=suffix == ".pgm")
    image.save(path, format=FORMATS[suffix])
    return path


@dataclass(frozen=True)
class ImageDifference:
    """Per-channel difference between two RGB images.

    Attributes:
        rmse: Root mean squared byte difference over all channels.
        max_error: Largest absolute byte difference of any channel.
        differing_pixels: Number of pixels with at least one differing channel.
    """

    rmse: float
    max_error: int
    differing_pixels: int

    def within(self, tolerance: int) -> bool:
        """Whether no channel differs by more than ``tolerance`` bytes."""
        return self.max_error <= tolerance


def _rgb(image: Framebuffer | npt.NDArray[np.uint8]) -> npt.NDArray[np.int16]:
    if isinstance(image, Framebuffer):
        return image.pixels[:, :, :3].astype(np.int16)
    return np.asarray(image)[..., :3].astype(np.int16)


def compare_images(
    image_a: Framebuffer | npt.NDArray[np.uint8],
    image_b: Framebuffer | npt.NDArray[np.uint8],
) -> ImageDifference:
    """Compare the colour channels of two rendered images.

    Alpha is ignored. Used to check that the Python and Taichi backends
    agree up to floating-point rounding.

    Args:
        image_a: Framebuffer or (height, width, 3 or 4) uint8 array.
        image_b: Framebuffer or array of the same height and width.

    Returns:
        The RMSE, the largest channel error and the count of differing pixels.

    Raises:
        ValueError: If the image sizes don't match.
    """
    a = _rgb(image_a)
    b = _rgb(image_b)
    if a.shape != b.shape:
        raise ValueError(f"Image shapes must match: {a.shape} vs {b.shape}")

    diff = np.abs(a - b)
    return ImageDifference(
        rmse=float(np.sqrt(np.mean(diff.astype(np.float64) ** 2))),
        max_error=int(diff.max(initial=0)),
        differing_pixels=int(diff.any(axis=-1).sum()),
    )
