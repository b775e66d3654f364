"""Scene-level closest-hit search.

The scene is a plain ordered sequence of spheres. intersect_scene() tests a
ray against every sphere and keeps the nearest hit that lies within the ray's
remaining range. On exactly equal distances the first sphere in the sequence
wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from spherecast.core.ray import Ray
from spherecast.geometry.sphere import Sphere, hit_sphere


@dataclass(frozen=True)
class SceneHit:
    """Record of a ray-scene intersection.

    Attributes:
        t: Distance along the ray to the hit point.
        sphere: The sphere that was hit.
    """

    t: float
    sphere: Sphere


def intersect_scene(ray: Ray, spheres: Sequence[Sphere]) -> SceneHit | None:
    """Find the closest sphere hit by a ray.

    Args:
        ray: The ray to trace. Dead rays never hit anything.
        spheres: The scene.

    Returns:
        The closest hit with t strictly less than ray.remaining_range, or
        None if there is none.
    """
    if ray.is_dead:
        return None

    closest_t = ray.remaining_range
    result = None
    for sphere in spheres:
        t = hit_sphere(ray, sphere)
        if t is not None and t < closest_t:
            closest_t = t
            result = SceneHit(t=t, sphere=sphere)
    return result
