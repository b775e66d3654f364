"""Taichi kernel rendering the whole image in one launch.

This module runs the same algorithm as spherecast.core.integrator inside a
single Taichi kernel, parallel over all pixels, on CPU or GPU:

- camera rays are jittered within each pixel and averaged
- rays are tested against every sphere, near root only
- a hit blends the sphere color, the ambient term and the next bounce

The recursive blend mean(surface, ambient, next) is unrolled into a running
sum: the k-th hit contributes (surface + ambient) / 3^k and the final escape
contributes background / 3^k.

Taichi must be initialized by the caller before the first render, e.g.
ti.init(arch=ti.gpu, random_seed=seed). Random numbers come from ti.random(),
so reproducibility is controlled by the random_seed given to ti.init().
Computation is in 32-bit floats.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, random_seed=42)
    >>> from spherecast.core.taichi_integrator import render_image_taichi
    >>> image = render_image_taichi(viewport, spheres, Background.BLUE_GRADIENT, 64, 48, 8)
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from spherecast.camera.viewport import Viewport
from spherecast.core.background import Background
from spherecast.core.integrator import AMBIENT_COLOR
from spherecast.core.ray import DEFAULT_BOUNCES, DEFAULT_RANGE
from spherecast.geometry.sphere import Sphere

# Type alias for 3D vectors
vec3 = tm.vec3

# Background codes passed to the kernel
BACKGROUND_CODES = {
    Background.BLUE_GRADIENT: 0,
    Background.BLACK: 1,
}

# Upper bound on rejection sampling attempts
MAX_REJECTION_TRIES = 100

# Samples blended at each hit: surface color, ambient, next bounce
HIT_SAMPLES = 3.0

_AMBIENT = AMBIENT_COLOR.to_tuple()


@ti.func
def _random_in_unit_sphere(full_sphere: ti.i32) -> vec3:
    """Rejection-sample a point in the unit ball (positive octant by default)."""
    p = vec3(1.0, 1.0, 1.0)
    found = False
    for _ in range(MAX_REJECTION_TRIES):
        if not found:
            p = vec3(ti.random(ti.f32), ti.random(ti.f32), ti.random(ti.f32))
            if full_sphere == 1:
                p = p * 2.0 - 1.0
            if tm.dot(p, p) < 1.0:
                found = True
    return p


@ti.func
def _background_color(direction: vec3, background: ti.i32) -> vec3:
    """Shade a ray that escaped the scene."""
    result = vec3(0.0, 0.0, 0.0)
    if background == 0:
        t = 0.5 * (direction.y + 1.0)
        result = vec3(1.0 - 0.5 * t, 1.0 - 0.3 * t, 1.0)
    return result


@ti.kernel
def _render_kernel(
    image: ti.types.ndarray(dtype=ti.f32, ndim=3),
    centers: ti.types.ndarray(dtype=ti.f32, ndim=2),
    radii: ti.types.ndarray(dtype=ti.f32, ndim=1),
    colors: ti.types.ndarray(dtype=ti.f32, ndim=2),
    num_spheres: ti.i32,
    origin: vec3,
    corner: vec3,
    x_step: vec3,
    y_step: vec3,
    width: ti.i32,
    height: ti.i32,
    multisampling: ti.i32,
    background: ti.i32,
    full_sphere: ti.i32,
):
    ambient = vec3(ti.static(_AMBIENT[0]), ti.static(_AMBIENT[1]), ti.static(_AMBIENT[2]))

    for y, x in ti.ndrange(height, width):
        total = vec3(0.0, 0.0, 0.0)

        for _ in range(multisampling):
            # Jittered camera ray
            target = (
                corner
                + (ti.cast(x, ti.f32) + ti.random(ti.f32)) * x_step
                + (ti.cast(y, ti.f32) + ti.random(ti.f32)) * y_step
            )
            ray_origin = origin
            ray_direction = tm.normalize(target - origin)
            remaining_range = ti.cast(DEFAULT_RANGE, ti.f32)
            remaining_bounces = DEFAULT_BOUNCES

            radiance = vec3(0.0, 0.0, 0.0)
            weight = 1.0
            active = 1

            for _bounce in range(DEFAULT_BOUNCES + 1):
                if active == 1:
                    hit_index = -1
                    closest_t = remaining_range

                    # Dead rays skip the intersection test
                    if remaining_range > 0.0 and remaining_bounces > 0:
                        for i in range(num_spheres):
                            center = vec3(centers[i, 0], centers[i, 1], centers[i, 2])
                            oc = ray_origin - center
                            half_b = tm.dot(oc, ray_direction)
                            c = tm.dot(oc, oc) - radii[i] * radii[i]
                            discriminant = half_b * half_b - c
                            if discriminant > 0.0:
                                t = -half_b - ti.sqrt(discriminant)
                                if t > 0.0 and t < closest_t:
                                    closest_t = t
                                    hit_index = i

                    if hit_index == -1:
                        radiance += weight * _background_color(ray_direction, background)
                        active = 0
                    else:
                        surface = vec3(
                            colors[hit_index, 0], colors[hit_index, 1], colors[hit_index, 2]
                        )
                        radiance += weight * (surface + ambient) / HIT_SAMPLES
                        weight /= HIT_SAMPLES

                        # Diffuse bounce from the hit point
                        center = vec3(
                            centers[hit_index, 0], centers[hit_index, 1], centers[hit_index, 2]
                        )
                        hit_point = ray_origin + closest_t * ray_direction
                        normal = tm.normalize(hit_point - center)
                        offset = tm.normalize(_random_in_unit_sphere(full_sphere))
                        ray_origin = hit_point
                        ray_direction = tm.normalize(normal + offset)
                        remaining_range -= closest_t
                        remaining_bounces -= 1

            total += radiance

        color = total / ti.cast(multisampling, ti.f32)
        for channel in ti.static(range(3)):
            image[y, x, channel] = color[channel]


def _pack_spheres(
    spheres: Sequence[Sphere],
) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    """Pack spheres into structure-of-arrays buffers for the kernel.

    The buffers hold at least one (unused) entry so that they are never empty.
    """
    count = max(len(spheres), 1)
    centers = np.zeros((count, 3), dtype=np.float32)
    radii = np.zeros(count, dtype=np.float32)
    colors = np.zeros((count, 3), dtype=np.float32)
    for i, sphere in enumerate(spheres):
        centers[i] = tuple(sphere.center)
        radii[i] = sphere.radius
        colors[i] = sphere.color.to_tuple()
    return centers, radii, colors


def render_image_taichi(
    viewport: Viewport,
    spheres: Sequence[Sphere],
    background: Background,
    width: int,
    height: int,
    multisampling: int,
    full_sphere: bool = False,
) -> npt.NDArray[np.float64]:
    """Render an image with the Taichi kernel.

    Args:
        viewport: The camera's sampling plane for this resolution.
        spheres: The scene.
        background: Shading for rays that escape or die.
        width: Image width in pixels.
        height: Image height in pixels.
        multisampling: Samples averaged per pixel.
        full_sphere: Scatter with offsets from the whole unit ball.

    Returns:
        Linear float image of shape (height, width, 3), row 0 at the top.
    """
    image = np.zeros((height, width, 3), dtype=np.float32)
    centers, radii, colors = _pack_spheres(spheres)

    _render_kernel(
        image,
        centers,
        radii,
        colors,
        len(spheres),
        vec3(*viewport.origin),
        vec3(*viewport.corner),
        vec3(*viewport.x_step),
        vec3(*viewport.y_step),
        width,
        height,
        multisampling,
        BACKGROUND_CODES[background],
        int(full_sphere),
    )

    return image.astype(np.float64)
