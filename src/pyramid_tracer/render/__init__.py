"""Render module for tiles, tile rendering and the worker pool.

Components:
    tiles: Rect tiles and row-major frame partitioning
    tile: Per-tile supersampled rendering on the Python tracer
    scheduler: Worker pool dispatching tiles over a bounded job queue
    pipeline: End-to-end render from a RenderConfig
"""

from .pipeline import create_tile_renderer, render, render_sequential
from .scheduler import (
    QUIT,
    ProgressCallback,
    RenderStats,
    SchedulerState,
    TileScheduler,
    WorkerError,
    WorkerState,
)
from .tile import PythonTileRenderer, TileRenderer, check_tile_target
from .tiles import Rect, partition_tiles

__all__ = [
    # Tiles
    "Rect",
    "partition_tiles",
    # Tile rendering
    "TileRenderer",
    "PythonTileRenderer",
    "check_tile_target",
    # Scheduler
    "TileScheduler",
    "SchedulerState",
    "WorkerState",
    "RenderStats",
    "WorkerError",
    "ProgressCallback",
    "QUIT",
    # Pipeline
    "render",
    "render_sequential",
    "create_tile_renderer",
]
