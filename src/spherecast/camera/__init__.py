"""Camera module for view and ray generation.

Components:
    viewport: Camera configuration and the sampling plane derived from it

Pixel coordinates map onto the sampling plane as:
    x in [0, width): left to right across the image
    y in [0, height): top to bottom across the image
"""

from .viewport import Camera, Viewport, build_viewport

__all__ = [
    "Camera",
    "Viewport",
    "build_viewport",
]
