"""
Geometric transformations.

Each function returns a new image and leaves the original untouched. The
result always keeps the source's maxval and counter sink.
"""

from __future__ import annotations

import cv2

from .buffer import PixelBuffer
from .errors import require
from .types import Rect


def _derived(img: PixelBuffer, width: int, height: int) -> PixelBuffer:
    return PixelBuffer.create(width, height, img.maxval, img.counters)


def rotate_ccw90(img: PixelBuffer) -> PixelBuffer:
    """Rotate 90 degrees anti-clockwise.

    The result is ``img.height`` wide and ``img.width`` high; source pixel
    (x, y) lands at (y, img.width - 1 - x).
    """
    rotated = _derived(img, img.height, img.width)
    if img.size:
        rotated.pixels[...] = cv2.rotate(img.pixels, cv2.ROTATE_90_COUNTERCLOCKWISE)
        img.notify(img.size)
        rotated.notify(rotated.size)
    return rotated


def mirror_horizontal(img: PixelBuffer) -> PixelBuffer:
    """Flip left-right: source pixel (x, y) lands at (img.width - 1 - x, y)."""
    mirrored = _derived(img, img.width, img.height)
    if img.size:
        mirrored.pixels[...] = cv2.flip(img.pixels, 1)
        img.notify(img.size)
        mirrored.notify(mirrored.size)
    return mirrored


def crop(img: PixelBuffer, x: int, y: int, w: int, h: int) -> PixelBuffer:
    """Copy the w x h rectangle whose top-left corner is (x, y).

    Pixel (i, j) of the result is pixel (x + i, y + j) of the source.

    Raises:
        ContractViolation: If the rectangle is not inside the image.
    """
    require(
        img.valid_rect(x, y, w, h),
        f"Rectangle ({x}, {y}, {w}, {h}) not inside {img.width}x{img.height} image",
    )
    cropped = _derived(img, w, h)
    cropped.pixels[...] = img.pixels[y:y + h, x:x + w]
    img.notify(w * h)
    cropped.notify(w * h)
    return cropped


def crop_rect(img: PixelBuffer, rect: Rect) -> PixelBuffer:
    """Same as crop(), taking a Rect."""
    return crop(img, *rect)
