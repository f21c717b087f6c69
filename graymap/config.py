"""
Configuration for the P5 codec.

Codec behaviour that may differ between callers is parameterized through
CodecConfig so that loading is reproducible and easy to tighten.
"""

from dataclasses import dataclass

from config import ALLOW_TRAILING_DATA, PIXMAX


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for parsing and writing P5 graymaps.

    Attributes:
        allow_trailing_data: Accept (and ignore) bytes after the
                             width*height payload. When False, such bytes
                             are reported as TRAILING_DATA.
        max_pixels: Refuse files declaring more than this many pixels
                    (reported as BAD_DIMENSION). None means no limit.
        max_maxval: Largest maxval accepted. Never above 255.
    """

    allow_trailing_data: bool = ALLOW_TRAILING_DATA
    max_pixels: int | None = None
    max_maxval: int = PIXMAX

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ValueError: If any parameter is invalid.
        """
        if self.max_pixels is not None and self.max_pixels < 0:
            raise ValueError(f"max_pixels must be non-negative, got {self.max_pixels}")

        if not (1 <= self.max_maxval <= PIXMAX):
            raise ValueError(
                f"max_maxval must be within [1, {PIXMAX}], got {self.max_maxval}"
            )
