"""
In-memory 8-bit grayscale image.

A PixelBuffer owns a ``(height, width)`` numpy array of ``uint8`` gray levels
plus the declared maximum gray value (maxval, pure white). Pixel (x, y) is
stored at ``pixels[y, x]``: a row-major raster scan, top row first, with
0-based coordinates.

Buffers are exclusively owned. Operations that produce an image always
return a new buffer; nothing here shares pixel storage between buffers or
copies implicitly.
"""

from __future__ import annotations

import logging

import numpy as np

from config import COUNTER_PIXMEM, DEFAULT_MAXVAL, PIXMAX

from .errors import ContractViolation, ImageMemoryError, require
from .instrumentation import CounterSink

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class PixelBuffer:
    """A width x height grayscale raster with a declared maxval.

    Create instances with :meth:`create` or :meth:`from_array`; the
    constructor does no validation and is meant for internal use.

    Attributes:
        counters: Optional CounterSink notified of pixel accesses. Buffers
                  derived from this one inherit it.
    """

    __slots__ = ("_pixels", "_maxval", "_width", "_height", "counters")

    def __init__(
        self,
        pixels: np.ndarray,
        maxval: int,
        counters: CounterSink | None = None,
    ):
        self._pixels: np.ndarray | None = pixels
        self._height, self._width = pixels.shape
        self._maxval = int(maxval)
        self.counters = counters

    # ------------------------------------------------------------------
    # Factories and lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        maxval: int = DEFAULT_MAXVAL,
        counters: CounterSink | None = None,
    ) -> PixelBuffer:
        """Create a new black image.

        Args:
            width: Number of columns (>= 0).
            height: Number of rows (>= 0).
            maxval: Gray level of pure white, in [1, 255].
            counters: Optional counter sink for instrumentation.

        Returns:
            New buffer with every pixel set to 0.

        Raises:
            ContractViolation: If a dimension is negative or maxval is out of range.
            ImageMemoryError: If the pixel array cannot be allocated.
        """
        require(_is_int(width) and width >= 0, f"width must be a non-negative int, got {width!r}")
        require(_is_int(height) and height >= 0, f"height must be a non-negative int, got {height!r}")
        require(
            _is_int(maxval) and 0 < maxval <= PIXMAX,
            f"maxval must be an int in [1, {PIXMAX}], got {maxval!r}",
        )
        try:
            pixels = np.zeros((height, width), dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise ImageMemoryError(
                f"Cannot allocate {width}x{height} image"
            ) from e
        return cls(pixels, maxval, counters)

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        maxval: int = DEFAULT_MAXVAL,
        counters: CounterSink | None = None,
    ) -> PixelBuffer:
        """Create a buffer holding a copy of a 2D integer array.

        Args:
            array: 2D array indexed ``[y, x]`` with values in [0, maxval].
            maxval: Gray level of pure white, in [1, 255].
            counters: Optional counter sink for instrumentation.

        Raises:
            ContractViolation: If the array is not 2D, not integer typed, or
                holds values outside [0, maxval].
        """
        require(isinstance(array, np.ndarray), f"Expected numpy.ndarray, got {type(array).__name__}")
        require(array.ndim == 2, f"Image must be a 2D array, got {array.ndim}D with shape {array.shape}")
        require(
            np.issubdtype(array.dtype, np.integer),
            f"Image array must have an integer dtype, got {array.dtype}",
        )
        height, width = array.shape
        buf = cls.create(width, height, maxval, counters)
        if array.size:
            require(
                int(array.min()) >= 0 and int(array.max()) <= maxval,
                f"Pixel values must lie in [0, {maxval}]",
            )
            buf._pixels[...] = array
        return buf

    def release(self) -> None:
        """Drop the pixel storage. Safe to call more than once."""
        self._pixels = None

    @property
    def released(self) -> bool:
        return self._pixels is None

    def copy(self) -> PixelBuffer:
        """Return an independent buffer with the same size, maxval and pixels."""
        pixels = self.pixels
        try:
            duplicate = pixels.copy()
        except MemoryError as e:
            raise ImageMemoryError(
                f"Cannot allocate {self._width}x{self._height} image"
            ) from e
        self.notify(pixels.size)
        return PixelBuffer(duplicate, self._maxval, self.counters)

    # ------------------------------------------------------------------
    # Information queries
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def maxval(self) -> int:
        return self._maxval

    @property
    def size(self) -> int:
        """Number of pixels (width * height)."""
        return self._width * self._height

    @property
    def shape(self) -> tuple[int, int]:
        """(width, height) of the image."""
        return self._width, self._height

    @property
    def pixels(self) -> np.ndarray:
        """The underlying ``(height, width)`` uint8 array (not a copy).

        Operations in this package read and write it directly; results are
        identical to going through get_pixel/set_pixel.
        """
        if self._pixels is None:
            raise ContractViolation("Image has been released")
        return self._pixels

    def stats(self) -> tuple[int, int]:
        """Return the (min, max) gray levels in the image.

        An image without pixels has no levels; the sentinel (maxval, 0) is
        returned so that ``min > max`` flags the empty case.
        """
        pixels = self.pixels
        if pixels.size == 0:
            return self._maxval, 0
        self.notify(pixels.size)
        return int(pixels.min()), int(pixels.max())

    def valid_position(self, x: int, y: int) -> bool:
        """Check if pixel position (x, y) is inside the image."""
        return 0 <= x < self._width and 0 <= y < self._height

    def valid_rect(self, x: int, y: int, w: int, h: int) -> bool:
        """Check if rectangle (x, y, w, h) is completely inside the image."""
        return (
            x >= 0 and y >= 0 and w >= 0 and h >= 0
            and x + w <= self._width
            and y + h <= self._height
        )

    # ------------------------------------------------------------------
    # Pixel get & set
    # ------------------------------------------------------------------

    def get_pixel(self, x: int, y: int) -> int:
        """Get the gray level at (x, y)."""
        require(self.valid_position(x, y), f"Position ({x}, {y}) outside {self._width}x{self._height} image")
        pixels = self.pixels
        self.notify(1)
        return int(pixels[y, x])

    def set_pixel(self, x: int, y: int, level: int) -> None:
        """Set the gray level at (x, y)."""
        require(self.valid_position(x, y), f"Position ({x}, {y}) outside {self._width}x{self._height} image")
        require(0 <= level <= PIXMAX, f"Gray level must be in [0, {PIXMAX}], got {level}")
        pixels = self.pixels
        self.notify(1)
        pixels[y, x] = level

    def notify(self, accesses: int, counter: str = COUNTER_PIXMEM) -> None:
        """Report pixel accesses to the counter sink, if any."""
        if self.counters is not None and accesses:
            self.counters.count(counter, accesses)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def same_pixels(self, other: PixelBuffer) -> bool:
        """True if both images have equal dimensions and pixel levels."""
        return self.shape == other.shape and bool(np.array_equal(self.pixels, other.pixels))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self._maxval == other._maxval and self.same_pixels(other)

    __hash__ = None

    def __repr__(self) -> str:
        state = "released" if self.released else f"maxval={self._maxval}"
        return f"PixelBuffer({self._width}x{self._height}, {state})"
