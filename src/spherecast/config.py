"""Render configuration.

RenderConfig gathers every option of a render with its default. It is a
plain dataclass; validate() checks the values and is called by the renderer
before any work starts. from_args() builds a configuration from parsed
command-line arguments, leaving unset options at their defaults.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from spherecast.camera.viewport import DEFAULT_FOV_DEGREES, Camera
from spherecast.core.background import Background
from spherecast.core.vector import UnitDirection, Vector
from spherecast.errors import ConfigurationError

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
DEFAULT_MULTISAMPLING = 100

# Row chunks handed to each worker process, for load balancing
DEFAULT_CHUNKS_PER_WORKER = 4

BACKENDS = ("cpu", "taichi")


@dataclass
class RenderConfig:
    """Options for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        multisampling: Jittered samples averaged per pixel.
        camera: Camera position, orientation and field of view.
        background: Shading for rays that escape the scene.
        seed: Seed for the random generators. None draws fresh entropy, so
            repeated renders differ.
        workers: Number of worker processes for the cpu backend. 1 renders
            in the calling process.
        chunks_per_worker: Row chunks created per worker.
        full_sphere_scatter: Draw diffuse scatter offsets from the whole
            unit ball instead of its positive octant.
        backend: "cpu" for the process-pool renderer or "taichi" for the
            Taichi kernel.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    multisampling: int = DEFAULT_MULTISAMPLING
    camera: Camera = field(default_factory=Camera)
    background: Background = Background.BLUE_GRADIENT
    seed: int | None = None
    workers: int = 1
    chunks_per_worker: int = DEFAULT_CHUNKS_PER_WORKER
    full_sphere_scatter: bool = False
    backend: str = "cpu"

    def validate(self) -> None:
        """Check every option.

        Raises:
            ConfigurationError: If any option is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.multisampling <= 0:
            raise ConfigurationError(
                f"multisampling must be at least 1, got {self.multisampling}"
            )
        if self.workers <= 0:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        if self.chunks_per_worker <= 0:
            raise ConfigurationError(
                f"chunks_per_worker must be at least 1, got {self.chunks_per_worker}"
            )
        if self.seed is not None and self.seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {self.seed}")
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"unknown backend {self.backend!r}, expected one of {', '.join(BACKENDS)}"
            )
        self.camera.validate()

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RenderConfig:
        """Build a configuration from parsed command-line arguments.

        Arguments that are None keep their default. Vector-valued options are
        given as "(x,y,z)" text.

        Raises:
            ConfigurationError: If an argument cannot be parsed.
        """
        camera = Camera(
            location=(
                Vector.parse(args.camera_location)
                if args.camera_location is not None
                else Vector(0.0, 0.0, 0.0)
            ),
            direction=(
                UnitDirection.parse(args.camera_direction)
                if args.camera_direction is not None
                else UnitDirection(0.0, 0.0, -1.0)
            ),
            fov_degrees=args.fov if args.fov is not None else DEFAULT_FOV_DEGREES,
            focal_length=args.focal_length,
        )
        config = cls(camera=camera)
        if args.width is not None:
            config.width = args.width
        if args.height is not None:
            config.height = args.height
        if args.samples is not None:
            config.multisampling = args.samples
        if args.background is not None:
            config.background = Background.from_name(args.background)
        config.seed = args.seed
        if args.workers is not None:
            config.workers = args.workers
        config.full_sphere_scatter = args.full_sphere_scatter
        config.backend = args.backend
        return config
