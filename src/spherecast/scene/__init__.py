"""Scene module for scene loading and ray-scene queries.

Components:
    intersection: Closest-hit search over the scene's spheres
    loader: JSON scene loading and saving
"""

from .intersection import SceneHit, intersect_scene
from .loader import load_scene, parse_scene, save_scene

__all__ = [
    "SceneHit",
    "intersect_scene",
    "load_scene",
    "parse_scene",
    "save_scene",
]
