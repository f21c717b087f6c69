"""
Operations combining two images.

Both functions modify the destination in place and leave the source
untouched. Source and destination must not be overlapping views of the
same image.
"""

import math

import numpy as np

from .buffer import PixelBuffer
from .errors import require


def _require_fits(dst: PixelBuffer, x: int, y: int, src: PixelBuffer) -> None:
    require(
        dst.valid_rect(x, y, src.width, src.height),
        f"{src.width}x{src.height} image does not fit inside "
        f"{dst.width}x{dst.height} image at ({x}, {y})",
    )


def paste(dst: PixelBuffer, x: int, y: int, src: PixelBuffer) -> None:
    """Copy ``src`` into ``dst`` with its top-left corner at (x, y).

    Levels are copied verbatim; no rescaling happens when the two maxvals
    differ.

    Raises:
        ContractViolation: If src does not fit inside dst at (x, y).
    """
    _require_fits(dst, x, y, src)
    w, h = src.width, src.height
    dst.pixels[y:y + h, x:x + w] = src.pixels
    src.notify(w * h)
    dst.notify(w * h)


def blend(dst: PixelBuffer, x: int, y: int, src: PixelBuffer, alpha: float) -> None:
    """Blend ``src`` into ``dst`` at (x, y).

    Each covered pixel becomes ``round((1 - alpha) * d + alpha * s)``,
    saturated to [0, dst.maxval]. alpha is normally within [0, 1]; values
    outside extrapolate and saturate.

    Raises:
        ContractViolation: If src does not fit inside dst at (x, y), or
            alpha is not a finite number.
    """
    _require_fits(dst, x, y, src)
    require(math.isfinite(alpha), f"alpha must be finite, got {alpha}")
    w, h = src.width, src.height
    region = dst.pixels[y:y + h, x:x + w]
    mixed = (1.0 - alpha) * region.astype(np.float64) + alpha * src.pixels.astype(np.float64)
    region[...] = np.clip(np.floor(mixed + 0.5), 0, dst.maxval)
    src.notify(w * h)
    dst.notify(2 * w * h)
