"""
8-bit grayscale image library.

This package provides an in-memory pixel buffer, a reader/writer for binary
PGM (P5) files, and pixel, geometric, compositing, search and filtering
operations on those buffers.

Key components:
- buffer: PixelBuffer, the width x height raster with its maxval
- codec: load/save P5 files, parse/serialize P5 bytes
- point_ops: in-place negative, threshold, brighten
- geometry: rotate, mirror and crop into new images
- compositing: in-place paste and alpha blend
- matching: exact subimage test and search
- filters: mean filter (blur)
- steps: composable operation steps and Pipeline
- instrumentation: optional access/comparison counters

Preconditions are checked eagerly and violations raise ContractViolation.
Recoverable failures raise ImageError subclasses.
"""

from .buffer import PixelBuffer
from .codec import load, save, parse, serialize
from .compositing import paste, blend
from .config import CodecConfig
from .errors import (
    ContractViolation,
    ImageError,
    ImageMemoryError,
    ImageIOError,
    FormatError,
    FormatErrorKind,
)
from .filters import blur, blurred
from .geometry import rotate_ccw90, mirror_horizontal, crop, crop_rect
from .instrumentation import CounterSink, InstrumentationCounters, Measurement
from .matching import match_subimage, locate_subimage
from .point_ops import negative, threshold, brighten
from .steps import (
    ImageStep,
    NegativeStep,
    ThresholdStep,
    BrightenStep,
    RotateStep,
    MirrorStep,
    CropStep,
    BlurStep,
    Pipeline,
    PipelineResult,
    StepResult,
    parse_step,
)
from .types import Rect, Position

__all__ = [
    # Buffer and value types
    "PixelBuffer",
    "Rect",
    "Position",
    # Codec
    "CodecConfig",
    "load",
    "save",
    "parse",
    "serialize",
    # Operations
    "negative",
    "threshold",
    "brighten",
    "rotate_ccw90",
    "mirror_horizontal",
    "crop",
    "crop_rect",
    "paste",
    "blend",
    "match_subimage",
    "locate_subimage",
    "blur",
    "blurred",
    # Errors
    "ContractViolation",
    "ImageError",
    "ImageMemoryError",
    "ImageIOError",
    "FormatError",
    "FormatErrorKind",
    # Instrumentation
    "CounterSink",
    "InstrumentationCounters",
    "Measurement",
    # Steps
    "ImageStep",
    "NegativeStep",
    "ThresholdStep",
    "BrightenStep",
    "RotateStep",
    "MirrorStep",
    "CropStep",
    "BlurStep",
    "Pipeline",
    "PipelineResult",
    "StepResult",
    "parse_step",
]
