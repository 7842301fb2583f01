"""Preview module for exporting rendered images.

Components:
    export: Save framebuffers as TGA, PPM, PGM or PNG via Pillow, and compare renders
"""

from .export import (
    FORMATS,
    ImageDifference,
    compare_images,
    framebuffer_to_image,
    save_image,
    to_grayscale,
)

__all__ = [
    "FORMATS",
    "ImageDifference",
    "compare_images",
    "framebuffer_to_image",
    "save_image",
    "to_grayscale",
]
