"""Color resolution for camera rays.

This module implements the light transport of the renderer: a ray that hits
a sphere returns the mean of the sphere's flat color, the ambient term, and
the color seen by a diffusely scattered ray from the hit point. A ray that
misses everything, or has exhausted its budget, returns the background.

The recursive definition

    color(ray) = mean(sphere.color, AMBIENT_COLOR, color(ray.diffuse(...)))

is evaluated with a loop bounded by the ray's bounce budget: the hit colors
are collected while the ray travels, then folded back from the last bounce
to the first.

Example:
    >>> import numpy as np
    >>> from spherecast.camera.viewport import Camera, build_viewport
    >>> from spherecast.core.background import Background
    >>> from spherecast.core.integrator import render_pixel
    >>> viewport = build_viewport(Camera(), 64, 48)
    >>> rng = np.random.default_rng(0)
    >>> color = render_pixel(32, 24, viewport, [], Background.BLACK, 4, rng)
    >>> color.to_rgb8()
    (0, 0, 0)
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from spherecast.camera.viewport import Viewport
from spherecast.core.background import Background
from spherecast.core.color import BLACK, Color, ColorAccumulator
from spherecast.core.ray import Ray
from spherecast.geometry.sphere import Sphere
from spherecast.scene.intersection import intersect_scene

# Ambient light added at every hit. Black, so it only dilutes the mean.
AMBIENT_COLOR = BLACK


def trace_ray(
    ray: Ray,
    spheres: Sequence[Sphere],
    background: Background,
    rng: np.random.Generator,
    full_sphere: bool = False,
) -> Color:
    """Resolve the color seen along a ray.

    Args:
        ray: The ray to trace.
        spheres: The scene.
        background: Shading for rays that escape or die.
        rng: Random generator for diffuse scattering.
        full_sphere: Scatter with offsets from the whole unit ball instead
            of its positive octant.

    Returns:
        The resolved color.

    Raises:
        DegenerateVectorError: If a scatter direction has zero length.
    """
    surface_colors: list[Color] = []
    while True:
        hit = intersect_scene(ray, spheres)
        if hit is None:
            break
        surface_colors.append(hit.sphere.color)
        normal = hit.sphere.normal_at(ray.at(hit.t))
        ray = ray.diffuse(hit.t, normal, rng, full_sphere)

    color = background.color(ray.direction)
    for surface_color in reversed(surface_colors):
        acc = ColorAccumulator()
        acc.add(surface_color)
        acc.add(AMBIENT_COLOR)
        acc.add(color)
        color = acc.finalize()
    return color


def render_pixel(
    x: int,
    y: int,
    viewport: Viewport,
    spheres: Sequence[Sphere],
    background: Background,
    multisampling: int,
    rng: np.random.Generator,
    full_sphere: bool = False,
) -> Color:
    """Compute the color of one pixel by averaging jittered samples.

    Each sample casts a ray from the viewport origin through a uniformly
    random point of the pixel's footprint on the sampling plane.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        viewport: The camera's sampling plane.
        spheres: The scene.
        background: Shading for rays that escape or die.
        multisampling: Number of samples to average (at least 1).
        rng: Random generator for jitter and scattering.
        full_sphere: See trace_ray().

    Returns:
        The mean color of all samples.
    """
    acc = ColorAccumulator()
    for _ in range(multisampling):
        ux, uy = rng.random(2)
        ray = Ray(viewport.origin, viewport.ray_direction(x + float(ux), y + float(uy)))
        acc.add(trace_ray(ray, spheres, background, rng, full_sphere))
    return acc.finalize()
