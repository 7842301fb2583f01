"""Worker pool that renders tiles concurrently into a shared framebuffer.

The scheduler owns a bounded job queue and a join queue. A fixed number of
worker threads is started per render; each worker loops:

    receive a job -> render the tile -> receive the next job ...
    receive QUIT  -> post an acknowledgement -> terminate

The scheduler enqueues every tile in scan order, then one QUIT per worker,
then blocks until it has collected one acknowledgement per worker. Only after
that join is the framebuffer complete.

The framebuffer is shared by all workers without locking. Tiles never
overlap, so every pixel is written by exactly one worker exactly once.

Failures are fatal to the render. A worker that raises stops rendering, the
other workers skip the remaining tiles, every worker still drains the queue
and acknowledges its QUIT, and the scheduler raises WorkerError once all
workers have joined. Tiles are never retried. A ``join_timeout`` bounds every
blocking wait of the scheduler, both for a free job slot and for each
acknowledgement.

Example:
    >>> from pyramid_tracer.camera.pinhole import Camera
    >>> from pyramid_tracer.core.framebuffer import Framebuffer
    >>> from pyramid_tracer.render.scheduler import TileScheduler
    >>> from pyramid_tracer.render.tile import PythonTileRenderer
    >>> from pyramid_tracer.scene.scene import DEFAULT_EYE, default_scene
    >>>
    >>> camera = Camera(DEFAULT_EYE, 32, 32)
    >>> renderer = PythonTileRenderer(default_scene(level=2), camera)
    >>> fb = Framebuffer(32, 32)
    >>> stats = TileScheduler(workers=4, tile_width=8, tile_height=8).render(renderer, fb)
    >>> stats.tiles_total
    16
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from pyramid_tracer.core.framebuffer import Framebuffer
from pyramid_tracer.render.tile import TileRenderer
from pyramid_tracer.render.tiles import Rect, partition_tiles

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (tiles_done, tiles_total); called from worker threads
ProgressCallback = Callable[[int, int], None]

# Sentinel telling a worker to acknowledge and exit
QUIT = None

# Seconds between liveness checks while the job queue is full
_POLL_INTERVAL = 0.05


class WorkerError(RuntimeError):
    """A worker failed or never acknowledged the end of a render."""


class SchedulerState(Enum):
    """Lifecycle of one render on the scheduler."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    JOINED = "joined"


class WorkerState(Enum):
    """Lifecycle of one worker thread."""

    IDLE = "idle"
    RENDERING = "rendering"
    TERMINATED = "terminated"


@dataclass
class RenderStats:
    """Summary of a finished render.

    Attributes:
        tiles_total: Number of tiles dispatched.
        tiles_per_worker: Tiles rendered by each worker, indexed by worker id.
        elapsed: Wall-clock seconds from first dispatch to join.
    """

    tiles_total: int = 0
    tiles_per_worker: list[int] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def tiles_rendered(self) -> int:
        return sum(self.tiles_per_worker)


@dataclass
class _Ack:
    worker_id: int
    error: BaseException | None = None


class TileScheduler:
    """Fixed-size pool of tile workers.

    Attributes:
        workers: Number of worker threads started per render.
        tile_width: Nominal tile width in pixels.
        tile_height: Nominal tile height in pixels.
        queue_size: Capacity of the job queue; 0 means unbounded.
        join_timeout: Seconds to wait for a free job slot or for each
            acknowledgement, or None to block until it arrives.
        state: Current scheduler state.
        worker_states: State of every worker of the current or last render.
    """

    def __init__(
        self,
        workers: int = 1,
        tile_width: int = 16,
        tile_height: int = 16,
        *,
        queue_size: int | None = None,
        join_timeout: float | None = None,
    ) -> None:
        """Create a scheduler.

        Args:
            workers: Number of worker threads (at least 1).
            tile_width: Nominal tile width in pixels.
            tile_height: Nominal tile height in pixels.
            queue_size: Job queue capacity; defaults to two jobs per worker.
            join_timeout: Optional timeout in seconds for every blocking wait.

        Raises:
            ValueError: If workers or tile dimensions are not positive.
        """
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}")
        if tile_width < 1 or tile_height < 1:
            raise ValueError(f"Tile dimensions must be positive, got {tile_width}x{tile_height}")
        self.workers = workers
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.queue_size = 2 * workers if queue_size is None else queue_size
        self.join_timeout = join_timeout
        self.state = SchedulerState.IDLE
        self.worker_states: list[WorkerState] = []

        self._jobs: queue.Queue[Rect | None] = queue.Queue()
        self._acks: queue.Queue[_Ack] = queue.Queue()
        self._abort = threading.Event()
        self._progress_lock = threading.Lock()
        self._tiles_done = 0

    def render(
        self,
        renderer: TileRenderer,
        framebuffer: Framebuffer,
        callback: ProgressCallback | None = None,
    ) -> RenderStats:
        """Render the whole framebuffer with the worker pool.

        Args:
            renderer: Tile renderer shared by all workers.
            framebuffer: Destination buffer; complete when this returns.
            callback: Optional progress callback, called from worker threads
                after every tile with (tiles_done, tiles_total).

        Returns:
            RenderStats for the finished render.

        Raises:
            WorkerError: If a worker failed or did not acknowledge in time.
        """
        tiles = partition_tiles(
            framebuffer.width, framebuffer.height, self.tile_width, self.tile_height
        )
        stats = RenderStats(tiles_total=len(tiles), tiles_per_worker=[0] * self.workers)
        self._jobs = queue.Queue(maxsize=self.queue_size)
        self._acks = queue.Queue()
        self._abort.clear()
        self._tiles_done = 0
        self.worker_states = [WorkerState.IDLE] * self.workers

        threads = [
            threading.Thread(
                target=self._run_worker,
                args=(worker_id, renderer, framebuffer, stats, callback),
                name=f"tile-worker-{worker_id}",
                daemon=True,
            )
            for worker_id in range(self.workers)
        ]
        start = time.perf_counter()
        for thread in threads:
            thread.start()

        self.state = SchedulerState.DISPATCHING
        logger.info(
            "Dispatching %d tiles of %dx%d to %d workers",
            len(tiles),
            self.tile_width,
            self.tile_height,
            self.workers,
        )
        for tile in tiles:
            if not self._dispatch(tile, threads):
                break

        self.state = SchedulerState.DRAINING
        for _ in range(self.workers):
            if not self._dispatch(QUIT, threads):
                break

        errors = self._join()
        for thread in threads:
            thread.join()
        stats.elapsed = time.perf_counter() - start
        self.state = SchedulerState.JOINED

        if errors:
            worker_id, error = errors[0]
            raise WorkerError(f"Worker {worker_id} failed while rendering") from error

        logger.info("Rendered %d tiles in %.3fs", stats.tiles_total, stats.elapsed)
        return stats

    def _dispatch(self, job: Rect | None, threads: list[threading.Thread]) -> bool:
        """Put a job on the bounded queue.

        Blocks while the queue is full, for at most ``join_timeout`` seconds
        when one is set.

        Returns:
            True once the job is queued, False if every worker has exited.

        Raises:
            WorkerError: If the queue stayed full for ``join_timeout`` seconds.
        """
        waited = 0.0
        while True:
            try:
                self._jobs.put(job, timeout=_POLL_INTERVAL)
                return True
            except queue.Full as exc:
                if not any(thread.is_alive() for thread in threads):
                    logger.warning("All workers exited; %s not dispatched", job)
                    return False
                waited += _POLL_INTERVAL
                if self.join_timeout is not None and waited >= self.join_timeout:
                    self._abort.set()
                    raise WorkerError(
                        f"Timed out after {self.join_timeout}s waiting for a free job slot"
                    ) from exc

    def _join(self) -> list[tuple[int, BaseException]]:
        """Wait for one acknowledgement per worker."""
        errors = []
        for _ in range(self.workers):
            try:
                ack = self._acks.get(timeout=self.join_timeout)
            except queue.Empty as exc:
                raise WorkerError(
                    f"Timed out after {self.join_timeout}s waiting for workers to finish"
                ) from exc
            if ack.error is not None:
                errors.append((ack.worker_id, ack.error))
        return errors

    def _run_worker(
        self,
        worker_id: int,
        renderer: TileRenderer,
        framebuffer: Framebuffer,
        stats: RenderStats,
        callback: ProgressCallback | None,
    ) -> None:
        error: BaseException | None = None
        try:
            while True:
                job = self._jobs.get()
                if job is QUIT:
                    break
                # After a failure, keep draining so dispatch never blocks
                if self._abort.is_set():
                    continue

                self.worker_states[worker_id] = WorkerState.RENDERING
                try:
                    renderer.render_tile(job, framebuffer)
                    stats.tiles_per_worker[worker_id] += 1
                    logger.debug("Worker %d rendered tile %s", worker_id, job)
                    with self._progress_lock:
                        self._tiles_done += 1
                        done = self._tiles_done
                    if callback is not None:
                        callback(done, stats.tiles_total)
                except Exception as exc:
                    logger.exception("Worker %d failed on tile %s", worker_id, job)
                    error = exc
                    self._abort.set()
                finally:
                    self.worker_states[worker_id] = WorkerState.IDLE
        except BaseException as exc:
            # Reported to the scheduler through the acknowledgement
            logger.exception("Worker %d stopped", worker_id)
            error = exc
            self._abort.set()
        finally:
            self.worker_states[worker_id] = WorkerState.TERMINATED
            self._acks.put(_Ack(worker_id, error))
