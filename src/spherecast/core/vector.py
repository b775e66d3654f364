"""Vector and unit-direction algebra for ray casting.

This module provides the two value types every other part of the renderer is
built on:

- Vector: a free 3D vector, also used as a location (there is no separate
  point type).
- UnitDirection: a Vector constrained to length 1. The constraint is enforced
  on construction and by every operation that produces a new direction.

Both types are immutable; every operation returns a new instance. Arithmetic
between directions (sums, differences, scalar products) is generally not unit
length, so those results are plain Vectors. Call as_unit_vector() to turn a
Vector back into a UnitDirection.

Random sampling helpers take an explicit numpy Generator so that renders can
be reproduced from a seed.

Example:
    >>> import numpy as np
    >>> from spherecast.core.vector import UnitDirection, Vector
    >>> up = UnitDirection(0.0, 2.0, 0.0)  # renormalized to (0, 1, 0)
    >>> offset = Vector(1.0, 0.0, 0.0) + 3.0 * up
    >>> offset.as_unit_vector().length()
    1.0
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from spherecast.errors import ConfigurationError, DegenerateVectorError

_AXES = ("x", "y", "z")


@dataclass(frozen=True)
class Vector:
    """An immutable 3D vector.

    Attributes:
        x: The x component.
        y: The y component (world up).
        z: The z component.
    """

    x: float
    y: float
    z: float

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def dot(self, other: Vector) -> float:
        """Compute the dot product of two vectors."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        """Compute the cross product self x other."""
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        """Compute the squared length.

        Cheaper than length() when only comparing magnitudes.
        """
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Compute the Euclidean length."""
        return math.sqrt(self.length_squared())

    def rot(self, axis: UnitDirection, angle: float) -> Vector:
        """Rotate this vector about an axis using Rodrigues' formula.

        result = cos(a) * v + (1 - cos(a)) * (v . axis) * axis + sin(a) * (axis x v)

        Args:
            axis: The rotation axis (unit length).
            angle: The rotation angle in radians. Positive angles rotate
                counter-clockwise when looking down the axis toward the origin.

        Returns:
            The rotated vector.
        """
        c = math.cos(angle)
        return c * self + ((1.0 - c) * self.dot(axis)) * axis + math.sin(angle) * axis.cross(self)

    def as_unit_vector(self) -> UnitDirection:
        """Normalize this vector.

        Returns:
            A UnitDirection pointing the same way.

        Raises:
            DegenerateVectorError: If the vector has zero length.
        """
        return UnitDirection(self.x, self.y, self.z)

    @classmethod
    def parse(cls, text: str) -> Vector:
        """Parse a vector from text of the form "(x,y,z)" or "x,y,z".

        Args:
            text: The text to parse. Surrounding whitespace and parentheses
                are ignored.

        Returns:
            The parsed vector.

        Raises:
            ConfigurationError: If the text does not hold three finite floats.
        """
        parts = text.strip().strip("()").split(",")
        if len(parts) != 3:
            raise ConfigurationError(f"expected three comma-separated components, got {text!r}")
        components = []
        for axis, part in zip(_AXES, parts):
            try:
                components.append(float(part))
            except ValueError as e:
                raise ConfigurationError(f"{e} for {axis}") from e
            if not math.isfinite(components[-1]):
                raise ConfigurationError(f"non-finite value {part.strip()!r} for {axis}")
        return Vector(*components)


# Aliases for readability at call sites
Location = Vector
Direction = Vector


@dataclass(frozen=True)
class UnitDirection(Vector):
    """A Vector of length 1.

    The components passed to the constructor are renormalized, so
    UnitDirection(0, 0, -5) equals UnitDirection(0, 0, -1). There are no
    setters; with_x(), with_y() and with_z() return a renormalized copy with
    one component replaced.

    Raises:
        DegenerateVectorError: On construction from a zero-length or
            non-finite vector.
    """

    def __post_init__(self) -> None:
        length = math.hypot(self.x, self.y, self.z)
        if not math.isfinite(length) or length == 0.0:
            raise DegenerateVectorError(
                f"cannot normalize zero-length or non-finite vector ({self.x}, {self.y}, {self.z})"
            )
        object.__setattr__(self, "x", self.x / length)
        object.__setattr__(self, "y", self.y / length)
        object.__setattr__(self, "z", self.z / length)

    @classmethod
    def _from_normalized(cls, x: float, y: float, z: float) -> UnitDirection:
        # Only for components already known to be unit length.
        result = object.__new__(cls)
        object.__setattr__(result, "x", x)
        object.__setattr__(result, "y", y)
        object.__setattr__(result, "z", z)
        return result

    def __neg__(self) -> UnitDirection:
        return UnitDirection._from_normalized(-self.x, -self.y, -self.z)

    def with_x(self, x: float) -> UnitDirection:
        """Return a renormalized copy with the x component replaced."""
        return UnitDirection(x, self.y, self.z)

    def with_y(self, y: float) -> UnitDirection:
        """Return a renormalized copy with the y component replaced."""
        return UnitDirection(self.x, y, self.z)

    def with_z(self, z: float) -> UnitDirection:
        """Return a renormalized copy with the z component replaced."""
        return UnitDirection(self.x, self.y, z)

    def as_unit_vector(self) -> UnitDirection:
        return self

    def rot(self, axis: UnitDirection, angle: float) -> UnitDirection:
        """Rotate about an axis, renormalizing the result.

        See Vector.rot for the formula.
        """
        return super().rot(axis, angle).as_unit_vector()

    @classmethod
    def parse(cls, text: str) -> UnitDirection:
        """Parse and normalize a direction from "(x,y,z)" text.

        Raises:
            ConfigurationError: If the text is malformed or describes a
                zero-length vector.
        """
        vector = Vector.parse(text)
        try:
            return vector.as_unit_vector()
        except DegenerateVectorError as e:
            raise ConfigurationError(
                f"direction {text!r} has zero or non-finite length"
            ) from e


# =============================================================================
# Random Sampling
# =============================================================================


def random_in_unit_sphere(rng: np.random.Generator, full_sphere: bool = False) -> Vector:
    """Rejection-sample a random point inside the unit ball.

    By default each component is drawn from [0, 1), which only covers the
    positive octant of the ball, so diffuse bounces lean toward +x, +y and
    +z. Pass full_sphere=True to draw from [-1, 1) and cover the whole ball
    uniformly.

    Args:
        rng: The random generator to draw from.
        full_sphere: Sample the whole ball instead of the positive octant.

    Returns:
        A point with length_squared() < 1.
    """
    low = -1.0 if full_sphere else 0.0
    while True:
        x, y, z = rng.uniform(low, 1.0, size=3)
        if x * x + y * y + z * z < 1.0:
            return Vector(float(x), float(y), float(z))


def random_unit_vector(rng: np.random.Generator, full_sphere: bool = False) -> UnitDirection:
    """Generate a random unit vector by normalizing random_in_unit_sphere()."""
    return random_in_unit_sphere(rng, full_sphere).as_unit_vector()
