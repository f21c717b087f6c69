"""
Pixel transformations.

These functions change pixel levels but never pixel positions or image
geometry. All of them modify the image in place and never fail on valid
input.
"""

import math

import numpy as np

from config import PIXMAX

from .buffer import PixelBuffer
from .errors import require


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def negative(img: PixelBuffer) -> None:
    """Turn the image into its photographic negative: p -> maxval - p."""
    pixels = img.pixels
    result = img.maxval - pixels.astype(np.int16)
    pixels[...] = np.clip(result, 0, img.maxval)
    img.notify(2 * pixels.size)


def threshold(img: PixelBuffer, thr: float) -> None:
    """Set pixels below ``thr`` to black (0) and the rest to white (maxval)."""
    require(not math.isnan(thr), "thr must be a number, got nan")
    pixels = img.pixels
    # Any threshold above 255 behaves like 256.
    thr = math.ceil(min(max(thr, 0), PIXMAX + 1))
    pixels[...] = np.where(pixels < thr, 0, img.maxval)
    img.notify(2 * pixels.size)


def brighten(img: PixelBuffer, factor: float) -> None:
    """Multiply every level by ``factor``, rounding to nearest and saturating at maxval.

    ``factor > 1`` brightens, ``factor < 1`` darkens.

    Raises:
        ContractViolation: If factor is negative or not finite.
    """
    require(
        math.isfinite(factor) and factor >= 0.0,
        f"factor must be finite and non-negative, got {factor}",
    )
    pixels = img.pixels
    scaled = _round_half_up(pixels.astype(np.float64) * factor)
    pixels[...] = np.clip(scaled, 0, img.maxval)
    img.notify(2 * pixels.size)
