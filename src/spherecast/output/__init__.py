"""Output module for quantization and image export.

Components:
    export: 8-bit quantization, PNG writing and image comparison
"""

from spherecast.output.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
