"""Ray data structure with a travel budget.

A ray carries, besides its origin and direction, the distance it may still
travel and the number of bounces it may still take. Both budgets shrink with
every diffuse bounce; once either is exhausted the ray is dead and resolves
directly to the background.

Example:
    >>> from spherecast.core.ray import Ray
    >>> from spherecast.core.vector import UnitDirection, Vector
    >>> ray = Ray(origin=Vector(0.0, 0.0, 0.0), direction=UnitDirection(0.0, 0.0, -1.0))
    >>> ray.at(2.0)
    Vector(x=0.0, y=0.0, z=-2.0)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from spherecast.core.vector import UnitDirection, Vector, random_unit_vector

# Distance a camera ray may travel before it dies
DEFAULT_RANGE = 100.0

# Number of diffuse bounces a camera ray may take before it dies
DEFAULT_BOUNCES = 10


@dataclass(frozen=True)
class Ray:
    """A ray with an origin, a unit direction and a remaining budget.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of travel.
        remaining_range: Distance the ray may still travel.
        remaining_bounces: Number of bounces the ray may still take.
    """

    origin: Vector
    direction: UnitDirection
    remaining_range: float = DEFAULT_RANGE
    remaining_bounces: int = DEFAULT_BOUNCES

    @property
    def is_dead(self) -> bool:
        """Whether the travel or bounce budget is exhausted."""
        return self.remaining_range <= 0.0 or self.remaining_bounces <= 0

    def at(self, t: float) -> Vector:
        """Compute the point at distance t along the ray."""
        return self.origin + t * self.direction

    def diffuse(
        self,
        t: float,
        normal: UnitDirection,
        rng: np.random.Generator,
        full_sphere: bool = False,
    ) -> Ray:
        """Scatter the ray off a surface hit at distance t.

        The new ray starts at the hit point and leaves in the direction
        normal + random_unit_vector(), renormalized. This is a simple
        approximation of Lambertian scattering, not a true cosine-weighted
        distribution.

        Args:
            t: Distance along this ray to the hit point.
            normal: The outward surface normal at the hit point.
            rng: The random generator for the scatter direction.
            full_sphere: Sample the random offset from the whole unit ball
                instead of its positive octant.

        Returns:
            The scattered ray, with range reduced by t and one bounce fewer.

        Raises:
            DegenerateVectorError: If the random offset exactly cancels the
                normal.
        """
        offset = random_unit_vector(rng, full_sphere)
        return Ray(
            origin=self.at(t),
            direction=(normal + offset).as_unit_vector(),
            remaining_range=self.remaining_range - t,
            remaining_bounces=self.remaining_bounces - 1,
        )
