"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with ray-sphere intersection
"""

from .sphere import Sphere, hit_sphere

__all__ = [
    "Sphere",
    "hit_sphere",
]
