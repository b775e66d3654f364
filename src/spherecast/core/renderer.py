"""Parallel renderer producing a full image.

This module drives the per-pixel integrator over the whole raster:

- The rows of the image are partitioned into disjoint, contiguous chunks.
- Each chunk is rendered independently, either in the calling process or by
  a pool of worker processes.
- Every finished chunk is copied into its own slice of the output buffer.
  Slices never overlap, so no locking is needed.

Each row draws from its own numpy Generator, spawned from a single
SeedSequence. A seeded render is therefore reproducible whatever the number
of workers or chunks.

Example:
    >>> from spherecast.config import RenderConfig
    >>> from spherecast.core.renderer import Renderer
    >>> from spherecast.scene.loader import load_scene
    >>>
    >>> config = RenderConfig(width=320, height=180, multisampling=16, seed=7, workers=4)
    >>> renderer = Renderer(config, load_scene("spheres.json"))
    >>> renderer.render(callback=lambda done, total: print(f"{done}/{total} rows"))
    >>> renderer.save_image("spheres.png")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from spherecast.camera.viewport import Viewport, build_viewport
from spherecast.config import RenderConfig
from spherecast.core.background import Background
from spherecast.core.integrator import render_pixel
from spherecast.errors import ConfigurationError, PreconditionError
from spherecast.geometry.sphere import Sphere
from spherecast.output.export import image_to_uint8, save_png

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Bytes per pixel in the flat output buffer (red, green, blue)
CHANNELS = 3


# =============================================================================
# Row Partitioning
# =============================================================================


@dataclass(frozen=True)
class RowChunk:
    """A contiguous range of image rows [start, stop)."""

    start: int
    stop: int

    @property
    def rows(self) -> int:
        """Number of rows in the chunk."""
        return self.stop - self.start

    def byte_range(self, width: int) -> slice:
        """Slice of the flat row-major RGB buffer covered by this chunk."""
        row_bytes = CHANNELS * width
        return slice(self.start * row_bytes, self.stop * row_bytes)


def partition_rows(height: int, num_chunks: int) -> list[RowChunk]:
    """Split the rows of an image into disjoint contiguous chunks.

    Chunk sizes differ by at most one row. The chunks are ordered, do not
    overlap, and together cover [0, height) exactly once. No chunk is empty,
    so fewer than num_chunks chunks are returned for short images.

    Args:
        height: Number of image rows (positive).
        num_chunks: Requested number of chunks (positive).

    Returns:
        The chunks, in row order.

    Raises:
        ConfigurationError: If height or num_chunks is not positive.
    """
    if height <= 0 or num_chunks <= 0:
        raise ConfigurationError(
            f"cannot partition {height} rows into {num_chunks} chunks"
        )

    num_chunks = min(num_chunks, height)
    base, extra = divmod(height, num_chunks)

    chunks = []
    start = 0
    for i in range(num_chunks):
        stop = start + base + (1 if i < extra else 0)
        chunks.append(RowChunk(start, stop))
        start = stop
    return chunks


# =============================================================================
# Worker Jobs
# =============================================================================


@dataclass(frozen=True)
class _RowJob:
    """Everything a worker needs to render one chunk of rows."""

    chunk: RowChunk
    width: int
    viewport: Viewport
    spheres: tuple[Sphere, ...]
    background: Background
    multisampling: int
    seeds: tuple[np.random.SeedSequence, ...]
    full_sphere: bool


def _render_rows(job: _RowJob) -> tuple[RowChunk, npt.NDArray[np.float64]]:
    """Render the rows of one chunk.

    Module-level so that it can be sent to worker processes.
    """
    rows = np.empty((job.chunk.rows, job.width, CHANNELS), dtype=np.float64)
    for offset, seed in enumerate(job.seeds):
        rng = np.random.default_rng(seed)
        y = job.chunk.start + offset
        for x in range(job.width):
            color = render_pixel(
                x,
                y,
                job.viewport,
                job.spheres,
                job.background,
                job.multisampling,
                rng,
                job.full_sphere,
            )
            rows[offset, x] = color.to_tuple()
    return job.chunk, rows


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Renders one image of a scene.

    The renderer validates the configuration and builds the viewport on
    construction, so configuration errors surface before any work starts.
    Output accessors raise PreconditionError until render() has completed.

    Attributes:
        config: The render configuration.
        spheres: The scene, as an immutable tuple.
        viewport: The camera's sampling plane.
    """

    def __init__(self, config: RenderConfig, spheres: Sequence[Sphere]) -> None:
        """Initialize the renderer.

        Args:
            config: The render configuration.
            spheres: The scene.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        config.validate()
        self.config = config
        self.spheres = tuple(spheres)
        self.viewport = build_viewport(config.camera, config.width, config.height)
        self._image: npt.NDArray[np.float64] | None = None

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.config.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.config.height

    @property
    def is_complete(self) -> bool:
        """Whether render() has finished."""
        return self._image is not None

    def render(self, callback: ProgressCallback | None = None) -> None:
        """Render the image.

        Args:
            callback: Optional callback called after each finished chunk of
                rows. Receives (rows_done, total_rows).

        Raises:
            DegenerateVectorError: If a normalization fails while rendering.
                The render is aborted and no image is kept.
        """
        self._image = None
        start_time = time.perf_counter()
        logger.info(
            "Rendering %dx%d, %d samples per pixel, %d spheres (%s backend)",
            self.width,
            self.height,
            self.config.multisampling,
            len(self.spheres),
            self.config.backend,
        )

        if self.config.backend == "taichi":
            image = self._render_taichi()
            if callback is not None:
                callback(self.height, self.height)
        else:
            image = self._render_cpu(callback)

        self._image = image
        logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

    def _render_cpu(self, callback: ProgressCallback | None) -> npt.NDArray[np.float64]:
        config = self.config
        chunks = partition_rows(self.height, config.workers * config.chunks_per_worker)
        row_seeds = np.random.SeedSequence(config.seed).spawn(self.height)
        jobs = [
            _RowJob(
                chunk=chunk,
                width=self.width,
                viewport=self.viewport,
                spheres=self.spheres,
                background=config.background,
                multisampling=config.multisampling,
                seeds=tuple(row_seeds[chunk.start : chunk.stop]),
                full_sphere=config.full_sphere_scatter,
            )
            for chunk in chunks
        ]
        logger.debug("Split %d rows into %d chunks", self.height, len(chunks))

        image = np.zeros((self.height, self.width, CHANNELS), dtype=np.float64)
        if config.workers == 1:
            self._collect(map(_render_rows, jobs), image, callback)
        else:
            with ProcessPoolExecutor(max_workers=config.workers) as executor:
                futures = [executor.submit(_render_rows, job) for job in jobs]
                results = (future.result() for future in as_completed(futures))
                try:
                    self._collect(results, image, callback)
                except BaseException:
                    # Drop chunks that have not started so the error surfaces now
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise
        return image

    def _collect(
        self,
        results: Iterable[tuple[RowChunk, npt.NDArray[np.float64]]],
        image: npt.NDArray[np.float64],
        callback: ProgressCallback | None,
    ) -> None:
        rows_done = 0
        for chunk, rows in results:
            image[chunk.start : chunk.stop] = rows
            rows_done += chunk.rows
            if callback is not None:
                callback(rows_done, self.height)

    def _render_taichi(self) -> npt.NDArray[np.float64]:
        # Imported lazily: Taichi is optional and must be initialized by the caller.
        from spherecast.core.taichi_integrator import render_image_taichi

        return render_image_taichi(
            self.viewport,
            self.spheres,
            self.config.background,
            self.width,
            self.height,
            self.config.multisampling,
            self.config.full_sphere_scatter,
        )

    # =========================================================================
    # Output
    # =========================================================================

    def _check_complete(self) -> npt.NDArray[np.float64]:
        if self._image is None:
            raise PreconditionError("Image not rendered. Call render() first.")
        return self._image

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the rendered image as a float array clamped to [0, 1].

        Returns:
            NumPy array of shape (height, width, 3), row 0 at the top.

        Raises:
            PreconditionError: If render() has not completed.
        """
        return np.clip(self._check_complete(), 0.0, 1.0)

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image quantized to 8 bits per channel.

        Raises:
            PreconditionError: If render() has not completed.
        """
        return image_to_uint8(self._check_complete())

    def pixel_bytes(self) -> bytes:
        """Get the image as a flat row-major RGB byte buffer.

        Raises:
            PreconditionError: If render() has not completed.
        """
        return self.get_image_uint8().tobytes()

    def save_image(self, filepath: str) -> None:
        """Save the rendered image as a PNG.

        Raises:
            PreconditionError: If render() has not completed.
        """
        save_png(self, filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"spheres={len(self.spheres)}, complete={self.is_complete})"
        )
