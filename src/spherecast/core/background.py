"""Background shading for rays that escape the scene."""

from __future__ import annotations

from enum import Enum

from spherecast.core.color import BLACK, Color
from spherecast.core.vector import UnitDirection
from spherecast.errors import ConfigurationError

_ALIASES = {
    "bluegradient": "BLUE_GRADIENT",
    "blue_gradient": "BLUE_GRADIENT",
    "blue gradient": "BLUE_GRADIENT",
    "black": "BLACK",
}


class Background(Enum):
    """Shading function applied to rays that hit nothing.

    BLUE_GRADIENT blends from near white at the horizon to pale blue at the
    zenith depending on the ray's vertical direction. BLACK ignores the
    direction.
    """

    BLUE_GRADIENT = "blue_gradient"
    BLACK = "black"

    def color(self, direction: UnitDirection) -> Color:
        """Compute the background color seen along a direction."""
        if self is Background.BLACK:
            return BLACK
        t = 0.5 * (direction.y + 1.0)
        return Color(1.0 - 0.5 * t, 1.0 - 0.3 * t, 1.0)

    @classmethod
    def from_name(cls, name: str) -> Background:
        """Look up a background by name.

        Accepts "bluegradient", "blue_gradient", "blue gradient" and "black",
        ignoring case and surrounding whitespace.

        Raises:
            ConfigurationError: If the name is not recognized.
        """
        key = _ALIASES.get(name.strip().lower())
        if key is None:
            raise ConfigurationError(f"invalid value for background function: {name!r}")
        return cls[key]
