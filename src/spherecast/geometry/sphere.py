"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the only renderable primitive,
and the intersection test used by the scene.

The intersection uses the half-b form of the quadratic formula. Only the near
root is considered, so a ray whose origin lies inside a sphere never reports
a hit on that sphere.

Example:
    >>> from spherecast.core.color import RED
    >>> from spherecast.core.ray import Ray
    >>> from spherecast.core.vector import UnitDirection, Vector
    >>> from spherecast.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=Vector(0.0, 0.0, -1.0), radius=0.5, color=RED)
    >>> ray = Ray(Vector(0.0, 0.0, 0.0), UnitDirection(0.0, 0.0, -1.0))
    >>> hit_sphere(ray, sphere)
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from spherecast.core.color import Color
from spherecast.core.ray import Ray
from spherecast.core.vector import UnitDirection, Vector


@dataclass(frozen=True)
class Sphere:
    """A sphere with a flat color.

    Attributes:
        center: The center point of the sphere.
        radius: The radius. Zero and negative radii are accepted; a negative
            radius behaves like its absolute value and a zero radius is
            never hit.
        color: The flat surface color.
    """

    center: Vector
    radius: float
    color: Color

    def normal_at(self, point: Vector) -> UnitDirection:
        """Compute the outward unit normal at a point on the surface.

        Raises:
            DegenerateVectorError: If the point coincides with the center.
        """
        return (point - self.center).as_unit_vector()


def hit_sphere(ray: Ray, sphere: Sphere) -> float | None:
    """Test a ray for intersection with a sphere.

    Solves |origin + t * direction - center|^2 = radius^2 for t. Since the
    direction is unit length the quadratic reduces to:

        t^2 + 2 * half_b * t + c = 0

    where:
        oc = origin - center
        half_b = dot(oc, direction)
        c = dot(oc, oc) - radius^2

    Args:
        ray: The ray to test.
        sphere: The sphere to test against.

    Returns:
        The distance to the near intersection, or None when the ray misses,
        grazes the sphere (zero discriminant), or the near root is not in
        front of the origin.
    """
    oc = ray.origin - sphere.center
    half_b = oc.dot(ray.direction)
    c = oc.length_squared() - sphere.radius * sphere.radius
    discriminant = half_b * half_b - c
    if discriminant <= 0.0:
        return None
    t = -half_b - math.sqrt(discriminant)
    if t <= 0.0:
        return None
    return t
