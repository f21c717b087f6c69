"""
Exact subimage matching and search.
"""

from __future__ import annotations

import logging

import numpy as np

from config import COUNTER_PIXCMP

from .buffer import PixelBuffer
from .errors import require
from .types import Position

logger = logging.getLogger(__name__)


def _window_matches(dst: PixelBuffer, x: int, y: int, src: PixelBuffer) -> bool:
    """Compare src with the same-sized window of dst at (x, y). Window must fit."""
    window = dst.pixels[y:y + src.height, x:x + src.width]
    mismatches = np.flatnonzero(window != src.pixels)
    # Pixels compared before stopping at the first difference, in raster order.
    compared = src.size if mismatches.size == 0 else int(mismatches[0]) + 1
    dst.notify(compared, COUNTER_PIXCMP)
    return mismatches.size == 0


def match_subimage(dst: PixelBuffer, x: int, y: int, src: PixelBuffer) -> bool:
    """Check whether ``src`` equals the subimage of ``dst`` anchored at (x, y).

    Returns False when src does not fit inside dst at that position.

    Raises:
        ContractViolation: If (x, y) is not a valid position in dst.
    """
    require(
        dst.valid_position(x, y),
        f"Position ({x}, {y}) outside {dst.width}x{dst.height} image",
    )
    if not dst.valid_rect(x, y, src.width, src.height):
        return False
    return _window_matches(dst, x, y, src)


def locate_subimage(dst: PixelBuffer, src: PixelBuffer) -> Position | None:
    """Find the first position where ``src`` occurs inside ``dst``.

    Anchors are tried row by row (y outer, x inner), so the returned match
    is the first in raster order.

    Returns:
        Position of the top-left corner of the first match, or None if src
        is larger than dst, dst has no pixels, or there is no match.
    """
    last_x = dst.width - src.width
    last_y = dst.height - src.height
    if last_x < 0 or last_y < 0 or dst.size == 0:
        logger.debug("Pattern %dx%d cannot occur in %dx%d image",
                     src.width, src.height, dst.width, dst.height)
        return None

    anchors = dst.pixels[:last_y + 1, :last_x + 1]
    if src.size:
        # Only anchors whose pixel equals the pattern's first pixel can match.
        candidates = np.argwhere(anchors == src.pixels[0, 0])
        dst.notify(anchors.size, COUNTER_PIXCMP)
    else:
        candidates = np.argwhere(np.ones_like(anchors, dtype=bool))

    for y, x in candidates:
        if _window_matches(dst, int(x), int(y), src):
            logger.debug("Pattern %dx%d found at (%d, %d)", src.width, src.height, x, y)
            return Position(int(x), int(y))
    logger.debug("Pattern %dx%d not found", src.width, src.height)
    return None
