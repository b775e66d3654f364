"""Image export utilities for rendered images.

This module converts the renderer's linear float buffer to 8-bit channels and
writes PNG files.

Quantization clamps each channel to [0, 1] and truncates
255.999 * channel, the same mapping as Color.to_rgb8(). There is no gamma
correction or tone mapping.

Example:
    >>> from spherecast.output.export import save_png
    >>> renderer.render()
    >>> save_png(renderer, "spheres.png")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from spherecast.core.color import QUANTIZE_SCALE

if TYPE_CHECKING:
    from spherecast.core.renderer import Renderer


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Quantize a linear float image to 8 bits per channel.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    clamped = np.clip(image, 0.0, 1.0)
    return np.floor(QUANTIZE_SCALE * clamped).astype(np.uint8)


def save_png(renderer: Renderer, filepath: str) -> None:
    """Save a completed render as an 8-bit RGB PNG.

    Args:
        renderer: The renderer whose image to save.
        filepath: Output file path (should end in .png).

    Raises:
        PreconditionError: If the renderer has not finished rendering.
    """
    save_png_from_array(renderer.get_image_uint8(), filepath)


def save_png_from_array(image: npt.NDArray, filepath: str) -> None:
    """Save an image array as an 8-bit RGB PNG.

    Args:
        image: Array of shape (H, W, 3). uint8 arrays are written as is;
            float arrays are quantized with image_to_uint8() first.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    if image.dtype != np.uint8:
        image = image_to_uint8(image)

    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    pil_image.save(filepath, format="PNG")


def compute_rmse(image_a: npt.NDArray, image_b: npt.NDArray) -> float:
    """Measure how far apart two renders of the same scene are.

    Two renders that differ only in their seed disagree by the Monte Carlo
    noise of the sampler, so the result shrinks as multisampling grows. It is
    also used to compare the cpu and taichi backends, which never match bit
    for bit.

    Args:
        image_a: Float or uint8 image of shape (H, W, 3).
        image_b: Image of the same shape and scale as image_a.

    Returns:
        Root mean squared difference over all pixels and channels, in the
        units of the inputs.

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = np.subtract(image_a, image_b, dtype=np.float64)
    return float(np.sqrt(np.mean(np.square(diff))))
