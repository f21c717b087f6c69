"""
Exception taxonomy for the graymap library.

Two families are kept apart:

- ContractViolation: the caller broke a documented precondition (bad
  coordinates, malformed rectangle, negative factor...). This is a bug in
  the calling code. It is raised immediately and never caught inside the
  library.
- ImageError and its subclasses: runtime conditions the caller may recover
  from (allocation failure, I/O failure, malformed file contents). Each
  instance carries a human-readable ``cause``.
"""

from __future__ import annotations

import enum


class ContractViolation(AssertionError):
    """A precondition of a library call was not met."""


def require(condition: bool, message: str) -> None:
    """Raise ContractViolation with ``message`` unless ``condition`` holds.

    Unlike a bare ``assert`` this is not stripped under ``python -O``.
    """
    if not condition:
        raise ContractViolation(message)


class ImageError(Exception):
    """Base class for recoverable graymap failures."""

    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause


class ImageMemoryError(ImageError, MemoryError):
    """Pixel storage could not be allocated."""


class ImageIOError(ImageError, OSError):
    """Opening, reading or writing an image file failed.

    Attributes:
        cause: What the library was doing ("Open failed", "Writing pixels failed").
        errno: OS error code of the underlying failure, if any.
        filename: Path involved in the failure.
    """

    def __init__(self, cause: str, filename=None, errno: int | None = None):
        ImageError.__init__(self, cause)
        self.errno = errno
        self.filename = str(filename) if filename is not None else None
        self.strerror = cause

    def __str__(self) -> str:
        parts = [self.cause]
        if self.filename is not None:
            parts.append(f"'{self.filename}'")
        if self.errno is not None:
            parts.append(f"[errno {self.errno}]")
        return " ".join(parts)


class FormatErrorKind(enum.Enum):
    """Which part of a P5 file was malformed."""

    BAD_MAGIC = "Invalid file format"
    BAD_DIMENSION = "Invalid dimension"
    BAD_MAXVAL = "Invalid maxval"
    MISSING_SEPARATOR = "Whitespace expected"
    TRUNCATED_DATA = "Reading pixels"
    TRAILING_DATA = "Unexpected data after pixels"


class FormatError(ImageError, ValueError):
    """The bytes being parsed are not a valid 8-bit P5 graymap.

    Attributes:
        kind: FormatErrorKind identifying the failed header field or payload.
        cause: Human-readable description including the detail.
        offset: Byte offset in the input where parsing failed.
    """

    def __init__(self, kind: FormatErrorKind, detail: str = "", offset: int | None = None):
        cause = f"{kind.value}: {detail}" if detail else kind.value
        super().__init__(cause)
        self.kind = kind
        self.offset = offset
