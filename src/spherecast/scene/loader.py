"""JSON scene loading and saving.

A scene file holds a list of sphere records:

    [
        {"center": [0.0, 0.0, -1.0], "radius": 0.5,
         "color": {"red": 1.0, "green": 0.0, "blue": 0.0}},
        {"center": [0.0, -100.5, -1.0], "radius": 100.0, "color": "white"}
    ]

A color may be given by channels or by one of the names in NAMED_COLORS. The
list may also be wrapped in an object under a "spheres" key.

Example:
    >>> from spherecast.scene.loader import load_scene, save_scene
    >>> spheres = load_scene("scenes/three_spheres.json")
    >>> save_scene(spheres, "copy.json")
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from spherecast.core.color import NAMED_COLORS, Color
from spherecast.core.vector import Vector
from spherecast.errors import ConfigurationError
from spherecast.geometry.sphere import Sphere

logger = logging.getLogger(__name__)

_CHANNELS = ("red", "green", "blue")


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def parse_color(value: Any) -> Color:
    """Parse a color given as {"red", "green", "blue"} or as a name.

    Raises:
        ConfigurationError: If the value is not a valid color.
    """
    if isinstance(value, str):
        color = NAMED_COLORS.get(value.strip().lower())
        if color is None:
            raise ConfigurationError(
                f"unknown color name {value!r}, expected one of {', '.join(NAMED_COLORS)}"
            )
        return color

    if not isinstance(value, dict):
        raise ConfigurationError(f"color must be an object or a name, got {value!r}")
    channels = []
    for channel in _CHANNELS:
        if channel not in value:
            raise ConfigurationError(f"color is missing {channel!r}")
        if not _is_number(value[channel]):
            raise ConfigurationError(f"color channel {channel!r} must be a finite number")
        channels.append(float(value[channel]))
    return Color(*channels)


def parse_sphere(record: Any) -> Sphere:
    """Parse one sphere record.

    Raises:
        ConfigurationError: If the record is malformed.
    """
    if not isinstance(record, dict):
        raise ConfigurationError(f"sphere record must be an object, got {record!r}")
    for key in ("center", "radius", "color"):
        if key not in record:
            raise ConfigurationError(f"sphere record is missing {key!r}")

    center = record["center"]
    if not isinstance(center, list) or len(center) != 3 or not all(map(_is_number, center)):
        raise ConfigurationError(f"center must be a list of three finite numbers, got {center!r}")
    if not _is_number(record["radius"]):
        raise ConfigurationError(f"radius must be a finite number, got {record['radius']!r}")

    return Sphere(
        center=Vector(float(center[0]), float(center[1]), float(center[2])),
        radius=float(record["radius"]),
        color=parse_color(record["color"]),
    )


def parse_scene(data: Any) -> list[Sphere]:
    """Parse deserialized scene data into spheres.

    Args:
        data: A list of sphere records, or an object with a "spheres" list.

    Returns:
        The spheres, in file order.

    Raises:
        ConfigurationError: If the data is not a valid scene. The message
            names the offending record.
    """
    if isinstance(data, dict) and "spheres" in data:
        data = data["spheres"]
    if not isinstance(data, list):
        raise ConfigurationError("scene must be a list of sphere records")

    spheres = []
    for index, record in enumerate(data):
        try:
            spheres.append(parse_sphere(record))
        except ConfigurationError as e:
            raise ConfigurationError(f"sphere {index}: {e}") from e
    return spheres


def load_scene(path: str | Path) -> list[Sphere]:
    """Load spheres from a JSON scene file.

    Raises:
        ConfigurationError: If the file is not valid JSON or not a valid
            scene.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path}: invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"{path}: not UTF-8 text: {e}") from e

    spheres = parse_scene(data)
    logger.info("Loaded %d spheres from %s", len(spheres), path)
    return spheres


def sphere_to_record(sphere: Sphere) -> dict[str, Any]:
    """Convert a sphere to its JSON record."""
    return {
        "center": list(sphere.center),
        "radius": sphere.radius,
        "color": {
            "red": sphere.color.red,
            "green": sphere.color.green,
            "blue": sphere.color.blue,
        },
    }


def save_scene(spheres: Sequence[Sphere], path: str | Path) -> None:
    """Write spheres to a JSON scene file in list form."""
    records = [sphere_to_record(sphere) for sphere in spheres]
    Path(path).write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
