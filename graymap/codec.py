"""
Reading and writing binary 8-bit PGM (P5) files.

Format (see http://netpbm.sourceforge.net/doc/pgm.html):

    P5<ws>
    [#comment line]*  <width><ws>
    [#comment line]*  <height><ws>
    [#comment line]*  <maxval><one ws byte>
    <width*height raw bytes, row-major>

Only 8-bit single-channel files are supported (maxval <= 255). This module
is the only part of the library that does I/O; every failure is reported as
an ImageIOError or a FormatError and no partially built image escapes.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import numpy as np

from config import PGM_COMMENT, PGM_MAGIC, PGM_WHITESPACE

from .buffer import PixelBuffer
from .config import CodecConfig
from .errors import FormatError, FormatErrorKind, ImageIOError, require
from .instrumentation import CounterSink

_MAX_PIXELS = np.iinfo(np.intp).max

logger = logging.getLogger(__name__)

_DIGITS = b"0123456789"


class _HeaderReader:
    """Cursor over the header bytes of a P5 file."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def at_whitespace(self) -> bool:
        return self.pos < len(self.data) and self.data[self.pos] in PGM_WHITESPACE

    def skip_whitespace(self) -> None:
        while self.at_whitespace():
            self.pos += 1

    def skip_comments(self) -> int:
        """Skip comment lines (``#`` up to and including the newline).

        Whitespace following each comment is skipped too. Returns the
        number of comments skipped.
        """
        skipped = 0
        while self.data.startswith(PGM_COMMENT, self.pos):
            newline = self.data.find(b"\n", self.pos)
            self.pos = len(self.data) if newline < 0 else newline + 1
            skipped += 1
            self.skip_whitespace()
        return skipped

    def read_int(self, kind: FormatErrorKind, field: str) -> int:
        """Read a base-10 unsigned integer token."""
        start = self.pos
        while self.pos < len(self.data) and self.data[self.pos] in _DIGITS:
            self.pos += 1
        if self.pos == start:
            found = self.data[start:start + 1]
            raise FormatError(
                kind,
                f"expected {field} digits, found {found!r}" if found else f"missing {field}",
                offset=start,
            )
        return int(self.data[start:self.pos])


def parse(
    data: bytes,
    config: CodecConfig | None = None,
    counters: CounterSink | None = None,
) -> PixelBuffer:
    """Decode a P5 graymap held in memory.

    Args:
        data: Complete file contents.
        config: Codec configuration (defaults to CodecConfig()).
        counters: Optional counter sink attached to the new image.

    Returns:
        New PixelBuffer with the file's dimensions, maxval and pixels.

    Raises:
        FormatError: If the header or payload is malformed. ``kind`` tells
            which part failed.
        ImageMemoryError: If the pixel array cannot be allocated.
    """
    config = config or CodecConfig()
    config.validate()
    data = bytes(data)
    reader = _HeaderReader(data)

    if not data.startswith(PGM_MAGIC):
        raise FormatError(
            FormatErrorKind.BAD_MAGIC,
            f"expected {PGM_MAGIC.decode()}, found {data[:2]!r}",
            offset=0,
        )
    reader.pos = len(PGM_MAGIC)
    if not reader.at_whitespace():
        raise FormatError(
            FormatErrorKind.BAD_MAGIC,
            "magic number must be followed by whitespace",
            offset=reader.pos,
        )
    reader.skip_whitespace()

    reader.skip_comments()
    width = reader.read_int(FormatErrorKind.BAD_DIMENSION, "width")
    if not reader.at_whitespace():
        raise FormatError(FormatErrorKind.BAD_DIMENSION, "invalid width", offset=reader.pos)
    reader.skip_whitespace()

    reader.skip_comments()
    height = reader.read_int(FormatErrorKind.BAD_DIMENSION, "height")
    if not reader.at_whitespace():
        raise FormatError(FormatErrorKind.BAD_DIMENSION, "invalid height", offset=reader.pos)
    reader.skip_whitespace()

    if max(width, height, width * height) > _MAX_PIXELS:
        raise FormatError(
            FormatErrorKind.BAD_DIMENSION,
            f"{width}x{height} is too large to address",
            offset=reader.pos,
        )
    if config.max_pixels is not None and width * height > config.max_pixels:
        raise FormatError(
            FormatErrorKind.BAD_DIMENSION,
            f"{width}x{height} exceeds the limit of {config.max_pixels} pixels",
            offset=reader.pos,
        )

    reader.skip_comments()
    maxval_offset = reader.pos
    maxval = reader.read_int(FormatErrorKind.BAD_MAXVAL, "maxval")
    if not (0 < maxval <= config.max_maxval):
        raise FormatError(
            FormatErrorKind.BAD_MAXVAL,
            f"{maxval} not in [1, {config.max_maxval}]",
            offset=maxval_offset,
        )

    if not reader.at_whitespace():
        raise FormatError(
            FormatErrorKind.MISSING_SEPARATOR,
            "maxval must be followed by a single whitespace byte",
            offset=reader.pos,
        )
    reader.pos += 1

    expected = width * height
    payload = data[reader.pos:reader.pos + expected]
    if len(payload) < expected:
        raise FormatError(
            FormatErrorKind.TRUNCATED_DATA,
            f"expected {expected} bytes, got {len(payload)}",
            offset=reader.pos + len(payload),
        )
    trailing = len(data) - reader.pos - expected
    if trailing and not config.allow_trailing_data:
        raise FormatError(
            FormatErrorKind.TRAILING_DATA,
            f"{trailing} extra bytes",
            offset=reader.pos + expected,
        )

    img = PixelBuffer.create(width, height, maxval, counters)
    img.pixels[...] = np.frombuffer(payload, dtype=np.uint8).reshape(height, width)
    img.notify(expected)
    return img


def serialize(img: PixelBuffer) -> bytes:
    """Encode an image as P5 bytes with the canonical header.

    The header is ``P5\\n<width> <height>\\n<maxval>\\n`` followed by the raw
    pixel bytes in row-major order.
    """
    require(img is not None, "Image required")
    pixels = img.pixels
    header = b"%s\n%d %d\n%d\n" % (PGM_MAGIC, img.width, img.height, img.maxval)
    img.notify(pixels.size)
    return header + np.ascontiguousarray(pixels).tobytes()


def load(
    path: str | os.PathLike,
    config: CodecConfig | None = None,
    counters: CounterSink | None = None,
) -> PixelBuffer:
    """Load a P5 graymap file.

    Args:
        path: File to read.
        config: Codec configuration (defaults to CodecConfig()).
        counters: Optional counter sink attached to the new image.

    Returns:
        New PixelBuffer. The caller owns it.

    Raises:
        ImageIOError: If the file cannot be opened or read. ``errno`` holds
            the OS error code.
        FormatError: If the contents are not a valid 8-bit P5 graymap.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ImageIOError("Open failed", filename=path, errno=e.errno) from e

    img = parse(data, config=config, counters=counters)
    logger.debug("Loaded %s: %dx%d maxval=%d", path, img.width, img.height, img.maxval)
    return img


def save(img: PixelBuffer, path: str | os.PathLike) -> None:
    """Save an image as a P5 graymap file.

    On failure a partial, invalid file may be left behind.

    Raises:
        ImageIOError: If the file cannot be opened or written.
    """
    path = Path(path)
    data = serialize(img)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ImageIOError("Writing image failed", filename=path, errno=e.errno) from e
    logger.debug("Saved %s: %dx%d maxval=%d", path, img.width, img.height, img.maxval)
