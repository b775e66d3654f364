"""Camera configuration and viewport geometry.

The camera is described by a location, a viewing direction and either a
field of view or a focal length. From these and the output resolution,
build_viewport() derives a rectangular sampling plane in world space:

- corner: the top-left corner of the plane
- x_step: offset between horizontally adjacent pixels
- y_step: offset between vertically adjacent pixels (pointing down, since
  pixel row 0 is the top of the image)

The horizontal axis of the plane is derived by rotating the viewing direction
-90 degrees about world up (0, 1, 0) and dropping its vertical component, so
the image stays level whatever the camera pitch. A camera looking straight
up or down therefore has no viewport.

Two conventions size the plane:

- Field of view (the default, used when focal_length is None): the plane
  sits at unit distance and spans tan(fov / 2) to each side.
- Focal length: the plane sits at focal_length and spans aspect_ratio to
  each side and 1 up and down.

Example:
    >>> from spherecast.camera.viewport import Camera, build_viewport
    >>> viewport = build_viewport(Camera(fov_degrees=90.0), 200, 100)
    >>> round(viewport.ray_direction(100.0, 50.0).z, 9)
    -1.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from spherecast.core.vector import UnitDirection, Vector
from spherecast.errors import ConfigurationError, DegenerateVectorError

# World up, used to level the horizontal axis of the viewport
WORLD_UP = UnitDirection(0.0, 1.0, 0.0)

DEFAULT_FOV_DEGREES = 80.0

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Configuration for a pinhole camera.

    Attributes:
        location: Camera position in world space.
        direction: Viewing direction (unit length).
        fov_degrees: Horizontal field of view in degrees, in (0, 180).
            Ignored when focal_length is set.
        focal_length: Distance from the camera to the sampling plane. When
            None the field of view sizes the plane instead.
    """

    location: Vector = field(default_factory=lambda: Vector(0.0, 0.0, 0.0))
    direction: UnitDirection = field(default_factory=lambda: UnitDirection(0.0, 0.0, -1.0))
    fov_degrees: float = DEFAULT_FOV_DEGREES
    focal_length: float | None = None

    def validate(self) -> None:
        """Check the camera parameters.

        Raises:
            ConfigurationError: If the field of view is outside (0, 180), the
                focal length is not positive and finite, or the location is
                not finite.
        """
        if not 0.0 < self.fov_degrees < 180.0:
            raise ConfigurationError(
                f"field of view must be in (0, 180) degrees, got {self.fov_degrees}"
            )
        if self.focal_length is not None and not (
            math.isfinite(self.focal_length) and self.focal_length > 0.0
        ):
            raise ConfigurationError(
                f"focal length must be positive and finite, got {self.focal_length}"
            )
        if not all(math.isfinite(c) for c in self.location):
            raise ConfigurationError(f"camera location must be finite, got {tuple(self.location)}")


@dataclass(frozen=True)
class Viewport:
    """Sampling plane through which camera rays are cast.

    Attributes:
        origin: The camera location, shared by every camera ray.
        corner: Top-left corner of the sampling plane.
        x_step: Offset of one pixel to the right.
        y_step: Offset of one pixel down.
    """

    origin: Vector
    corner: Vector
    x_step: Vector
    y_step: Vector

    def point(self, x: float, y: float) -> Vector:
        """Compute the point on the sampling plane at pixel coordinates (x, y)."""
        return self.corner + x * self.x_step + y * self.y_step

    def ray_direction(self, x: float, y: float) -> UnitDirection:
        """Compute the unit direction from the origin through (x, y)."""
        return (self.point(x, y) - self.origin).as_unit_vector()


# =============================================================================
# Viewport Construction
# =============================================================================


def build_viewport(camera: Camera, width: int, height: int) -> Viewport:
    """Derive the sampling plane for a camera and output resolution.

    Args:
        camera: The camera configuration.
        width: Image width in pixels (positive).
        height: Image height in pixels (positive).

    Returns:
        The viewport for this camera.

    Raises:
        ConfigurationError: If the resolution is not positive, the camera
            parameters are invalid, or the camera looks straight up or down.
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"image dimensions must be positive, got {width}x{height}")
    camera.validate()

    aspect_ratio = width / height
    direction = camera.direction

    if camera.focal_length is None:
        center = camera.location + direction
        half_width = math.tan(math.radians(camera.fov_degrees) / 2.0)
        half_height = half_width / aspect_ratio
    else:
        center = camera.location + camera.focal_length * direction
        half_width = aspect_ratio
        half_height = 1.0

    try:
        hor = direction.rot(WORLD_UP, -math.pi / 2.0).with_y(0.0)
        ver = direction.cross(-hor).as_unit_vector()
    except DegenerateVectorError as e:
        raise ConfigurationError(
            f"camera direction {tuple(direction)} is vertical; cannot level the viewport"
        ) from e

    corner = center - half_width * hor + half_height * ver
    return Viewport(
        origin=camera.location,
        corner=corner,
        x_step=(2.0 * half_width / width) * hor,
        y_step=(-2.0 * half_height / height) * ver,
    )
