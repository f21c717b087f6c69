"""
Mean (box) filtering.

Each pixel becomes the rounded mean of the (2*dx + 1) x (2*dy + 1) window
around it. Near the borders the window is clipped to the image: there is no
wraparound and no mirroring, only fewer pixels in the average.

Window sums come from a summed-area table built once from the original
pixels, so every output is computed from unmodified input.
"""

import cv2
import numpy as np

from .buffer import PixelBuffer
from .errors import require


def _window_bounds(length: int, radius: int) -> tuple[np.ndarray, np.ndarray]:
    """Per-coordinate [start, stop) of the clipped window along one axis."""
    radius = min(radius, length)
    centers = np.arange(length)
    starts = np.clip(centers - radius, 0, length)
    stops = np.clip(centers + radius + 1, 0, length)
    return starts, stops


def blurred(img: PixelBuffer, dx: int, dy: int) -> PixelBuffer:
    """Return a mean-filtered copy of ``img``.

    Args:
        img: Source image (not modified).
        dx: Horizontal window half-width (>= 0).
        dy: Vertical window half-height (>= 0).

    Returns:
        New image with the same size and maxval. Means are rounded half up.

    Raises:
        ContractViolation: If dx or dy is negative.
    """
    require(dx >= 0 and dy >= 0, f"Blur radii must be non-negative, got dx={dx}, dy={dy}")
    result = PixelBuffer.create(img.width, img.height, img.maxval, img.counters)
    if img.size == 0:
        return result

    # (height + 1, width + 1) table; float64 keeps sums of large images exact.
    table = cv2.integral(img.pixels, sdepth=cv2.CV_64F).astype(np.int64)
    x0, x1 = _window_bounds(img.width, dx)
    y0, y1 = _window_bounds(img.height, dy)

    sums = (
        table[np.ix_(y1, x1)]
        - table[np.ix_(y0, x1)]
        - table[np.ix_(y1, x0)]
        + table[np.ix_(y0, x0)]
    )
    counts = np.outer(y1 - y0, x1 - x0)
    result.pixels[...] = (2 * sums + counts) // (2 * counts)

    img.notify(img.size)
    result.notify(result.size)
    return result


def blur(img: PixelBuffer, dx: int, dy: int) -> None:
    """Mean-filter ``img`` in place. See blurred() for the arguments.

    The filtered image is built in a scratch buffer and copied back, so no
    pixel is averaged with already-filtered neighbours.
    """
    scratch = blurred(img, dx, dy)
    try:
        img.pixels[...] = scratch.pixels
        img.notify(img.size)
    finally:
        scratch.release()
