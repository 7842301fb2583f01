"""Render configuration with eager validation.

RenderConfig gathers every parameter a render needs. Invalid values are
rejected when the config is created, before any geometry is built or any
worker is started.

The worker count can also come from the ``RTRACEMAXPROCS`` environment
variable; explicit arguments always win over the environment.

Example:
    >>> from pyramid_tracer.config import RenderConfig
    >>> config = RenderConfig(level=3, width=64, height=64, workers=4)
    >>> config.tile_width
    16
    >>> RenderConfig(level=0)
    Traceback (most recent call last):
        ...
    ValueError: level must be at least 1, got 0
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Literal

from pyramid_tracer.scene.scene import DEFAULT_EYE, DEFAULT_LEVEL, DEFAULT_LIGHT

logger = logging.getLogger(__name__)

# Environment variable holding the default worker count
WORKERS_ENV_VAR = "RTRACEMAXPROCS"

Backend = Literal["python", "taichi"]
BACKENDS = ("python", "taichi")


@dataclass(frozen=True)
class RenderConfig:
    """Parameters of one render.

    Attributes:
        level: Sphere pyramid recursion level (>= 1).
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).
        samples_per_pixel: Supersampling factor ss (>= 1); ss*ss samples per pixel.
        workers: Worker thread count (>= 1).
        tile_width: Tile width in pixels (> 0).
        tile_height: Tile height in pixels (> 0).
        eye: Camera position.
        light: Light direction, need not be normalized (non-zero).
        backend: "python" for the reference tracer or "taichi" for the kernel.
    """

    level: int = DEFAULT_LEVEL
    width: int = 1024
    height: int = 1024
    samples_per_pixel: int = 1
    workers: int = 1
    tile_width: int = 16
    tile_height: int = 16
    eye: tuple[float, float, float] = tuple(DEFAULT_EYE)
    light: tuple[float, float, float] = tuple(DEFAULT_LIGHT)
    backend: Backend = "python"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every parameter.

        Raises:
            ValueError: Describing the first invalid parameter.
        """
        minimums = {
            "level": 1,
            "width": 1,
            "height": 1,
            "samples_per_pixel": 1,
            "workers": 1,
            "tile_width": 1,
            "tile_height": 1,
        }
        for name, minimum in minimums.items():
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ValueError(f"{name} must be at least {minimum}, got {value}")

        for name in ("eye", "light"):
            value = getattr(self, name)
            if len(value) != 3:
                raise ValueError(f"{name} must have three components, got {value!r}")
        if all(component == 0 for component in self.light):
            raise ValueError("light must be a non-zero vector")

        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {self.backend!r} (expected one of {BACKENDS})")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> RenderConfig:
        """Build a config, taking the worker count from the environment.

        Args:
            environ: Environment mapping; defaults to os.environ.
            **overrides: Explicit field values. These take precedence.

        Returns:
            A validated RenderConfig.

        Raises:
            ValueError: If an override is invalid or unknown.
        """
        environ = os.environ if environ is None else environ
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}")

        values = dict(overrides)
        if "workers" not in values and WORKERS_ENV_VAR in environ:
            raw = environ[WORKERS_ENV_VAR]
            try:
                workers = int(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not an integer", WORKERS_ENV_VAR, raw)
            else:
                if workers >= 1:
                    values["workers"] = workers
                else:
                    logger.warning("Ignoring %s=%r: must be at least 1", WORKERS_ENV_VAR, raw)
        return cls(**values)
