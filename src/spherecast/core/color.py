"""Linear RGB colors and sample averaging.

Colors are stored as unclamped floats. Values outside [0, 1] may flow through
arithmetic; they are only clamped when quantized to 8 bits by to_rgb8().

The ColorAccumulator keeps a running sum of samples and returns their mean.
It is used both to average the jittered samples of a pixel and to blend a
surface color with the light arriving from the next bounce.

Example:
    >>> from spherecast.core.color import RED, WHITE, ColorAccumulator
    >>> acc = ColorAccumulator()
    >>> acc.add(RED)
    >>> acc.add(WHITE)
    >>> acc.finalize()
    Color(red=1.0, green=0.5, blue=0.5)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from spherecast.errors import PreconditionError

# Scale applied before truncation when quantizing to 8 bits
QUANTIZE_SCALE = 255.999


def quantize_channel(value: float) -> int:
    """Quantize one linear channel to an 8-bit value.

    The value is clamped to [0, 1] and then truncated after scaling by
    QUANTIZE_SCALE, so 1.0 maps to 255 and 0.5 maps to 127.
    """
    clamped = min(max(value, 0.0), 1.0)
    return int(math.floor(QUANTIZE_SCALE * clamped))


@dataclass(frozen=True)
class Color:
    """A linear RGB color.

    Attributes:
        red: Red channel, nominally in [0, 1].
        green: Green channel, nominally in [0, 1].
        blue: Blue channel, nominally in [0, 1].
    """

    red: float
    green: float
    blue: float

    def __add__(self, other: Color) -> Color:
        if not isinstance(other, Color):
            return NotImplemented
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __mul__(self, scalar: float) -> Color:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Color(self.red * scalar, self.green * scalar, self.blue * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Color:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Color(self.red / scalar, self.green / scalar, self.blue / scalar)

    def to_tuple(self) -> tuple[float, float, float]:
        """Return the channels as a (red, green, blue) tuple."""
        return (self.red, self.green, self.blue)

    def to_rgb8(self) -> tuple[int, int, int]:
        """Quantize to 8-bit channels, see quantize_channel()."""
        return (
            quantize_channel(self.red),
            quantize_channel(self.green),
            quantize_channel(self.blue),
        )


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)
GREEN = Color(0.0, 1.0, 0.0)
BLUE = Color(0.0, 0.0, 1.0)
YELLOW = Color(1.0, 1.0, 0.0)
MAGENTA = Color(1.0, 0.0, 1.0)
CYAN = Color(0.0, 1.0, 1.0)

# Lookup used by the scene loader for colors given by name
NAMED_COLORS: dict[str, Color] = {
    "black": BLACK,
    "white": WHITE,
    "red": RED,
    "green": GREEN,
    "blue": BLUE,
    "yellow": YELLOW,
    "magenta": MAGENTA,
    "cyan": CYAN,
}


class ColorAccumulator:
    """Running count and sum of color samples.

    Attributes:
        count: Number of samples added so far.
    """

    def __init__(self) -> None:
        self.count = 0
        self._red = 0.0
        self._green = 0.0
        self._blue = 0.0

    def add(self, color: Color) -> None:
        """Add one sample."""
        self.count += 1
        self._red += color.red
        self._green += color.green
        self._blue += color.blue

    def finalize(self) -> Color:
        """Return the per-channel mean of all samples added.

        Raises:
            PreconditionError: If no sample was added.
        """
        if self.count == 0:
            raise PreconditionError("cannot average an accumulator with no samples")
        return Color(self._red / self.count, self._green / self.count, self._blue / self.count)

    def __repr__(self) -> str:
        return (
            f"ColorAccumulator(count={self.count}, "
            f"sum=({self._red}, {self._green}, {self._blue}))"
        )
