"""
Small value types shared by the graymap operations.
"""

from __future__ import annotations

from typing import NamedTuple


class Rect(NamedTuple):
    """Rectangle anchored at its top-left corner (x, y), w wide and h high."""

    x: int
    y: int
    w: int
    h: int


class Position(NamedTuple):
    """Pixel position, as returned by a successful subimage search."""

    x: int
    y: int
