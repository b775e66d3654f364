"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    vector: Vector and unit-direction algebra, random unit-ball sampling
    color: Linear RGB colors, named colors and sample averaging
    ray: Ray data structure with travel and bounce budgets
    background: Shading for rays that escape the scene
    integrator: Color resolution per ray and multisampling per pixel
    renderer: Row partitioning and the parallel rendering loop
    taichi_integrator: Optional Taichi kernel backend
"""

from .background import Background
from .color import (
    BLACK,
    BLUE,
    CYAN,
    GREEN,
    MAGENTA,
    NAMED_COLORS,
    RED,
    WHITE,
    YELLOW,
    Color,
    ColorAccumulator,
    quantize_channel,
)
from .ray import DEFAULT_BOUNCES, DEFAULT_RANGE, Ray
from .vector import (
    Direction,
    Location,
    UnitDirection,
    Vector,
    random_in_unit_sphere,
    random_unit_vector,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from spherecast.core.integrator or spherecast.core.renderer.

__all__ = [
    "Vector",
    "UnitDirection",
    "Location",
    "Direction",
    "random_in_unit_sphere",
    "random_unit_vector",
    "Color",
    "ColorAccumulator",
    "quantize_channel",
    "NAMED_COLORS",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "YELLOW",
    "MAGENTA",
    "CYAN",
    "Ray",
    "DEFAULT_RANGE",
    "DEFAULT_BOUNCES",
    "Background",
]
