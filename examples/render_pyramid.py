#!/usr/bin/env python3
"""Render the sphere pyramid scene.

This script renders the recursive sphere pyramid with the tile worker pool
and writes the result as a TGA, PPM, PGM or PNG file.

Usage:
    python examples/render_pyramid.py [options] OUTPUT

Options:
    --width WIDTH                Image width in pixels (default: 1024)
    --height HEIGHT              Image height in pixels (default: 1024)
    --level LEVEL                Pyramid recursion level (default: 8)
    --samples-per-pixel SS       Supersampling factor; 4 means 16 samples (default: 1)
    --num-cores N                Worker threads (default: $RTRACEMAXPROCS or 1)
    --tile-size SIZE             Tile edge length in pixels (default: 16)
    --backend {python,taichi}    Tile renderer (default: python)
    --quiet                      Only log warnings and errors

Example:
    python examples/render_pyramid.py --width 256 --height 256 --level 5 out.tga
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger("render_pyramid")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sphere pyramid scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("output", type=str, help="Output file (.tga, .ppm, .pgm or .png)")
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1024,
        help="Image height in pixels (default: 1024)",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=8,
        help="Pyramid recursion level (default: 8)",
    )
    parser.add_argument(
        "--samples-per-pixel",
        type=int,
        default=1,
        help="Supersampling factor; 4 means 16 samples per pixel (default: 1)",
    )
    parser.add_argument(
        "--num-cores",
        type=int,
        default=None,
        help="Worker threads (default: $RTRACEMAXPROCS or 1)",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=16,
        help="Tile edge length in pixels (default: 16)",
    )
    parser.add_argument(
        "--backend",
        choices=["python", "taichi"],
        default="python",
        help="Tile renderer (default: python)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args(argv)


def render_pyramid(args: argparse.Namespace) -> Path:
    """Render with the parsed options and save the image.

    Returns:
        Path to the saved image file.
    """
    from pyramid_tracer.config import RenderConfig
    from pyramid_tracer.preview.export import save_image
    from pyramid_tracer.render.pipeline import render

    overrides = {
        "level": args.level,
        "width": args.width,
        "height": args.height,
        "samples_per_pixel": args.samples_per_pixel,
        "tile_width": args.tile_size,
        "tile_height": args.tile_size,
        "backend": args.backend,
    }
    if args.num_cores is not None:
        overrides["workers"] = args.num_cores
    config = RenderConfig.from_env(**overrides)

    if config.backend == "taichi":
        import taichi as ti

        ti.init(arch=ti.cpu, default_fp=ti.f64)

    def progress(done: int, total: int) -> None:
        if done == total or done % max(1, total // 10) == 0:
            logger.info("%d/%d tiles (%.0f%%)", done, total, 100.0 * done / total)

    framebuffer, stats = render(config, callback=progress)
    output = save_image(framebuffer, args.output)
    logger.info("Saved %s in %.2fs", output.absolute(), stats.elapsed)
    return output


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        render_pyramid(args)
        return 0
    except Exception:
        logger.exception("Render failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
