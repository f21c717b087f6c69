"""
Image operation steps with a common interface.

Each step wraps one single-image operation. Steps are pure: ``apply`` returns
a new PixelBuffer and never mutates its input, even for operations that
work in place (those run on an explicit copy).

Usage:
    from graymap.steps import NegativeStep, BlurStep, Pipeline

    pipeline = Pipeline(steps=[
        NegativeStep(),
        BlurStep(dx=2, dy=2),
    ])
    result = pipeline.run(image)

Steps can also be built from short text specs such as ``"thr:128"`` or
``"crop:0,0,64,64"`` with parse_step(); the imgtool CLI uses this.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from config import DEFAULT_BLUR_RADIUS, DEFAULT_THRESHOLD

from . import codec, filters, geometry, point_ops
from .buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ImageStep(ABC):
    """Base class for image operation steps."""

    @abstractmethod
    def apply(self, img: PixelBuffer) -> PixelBuffer:
        """Apply this step to an image.

        Must be pure: never mutates the input image.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging and debugging."""


@dataclass(frozen=True)
class NegativeStep(ImageStep):
    """Photographic negative."""

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        out = img.copy()
        point_ops.negative(out)
        return out

    @property
    def name(self) -> str:
        return "neg"


@dataclass(frozen=True)
class ThresholdStep(ImageStep):
    """Binarize: levels below ``thr`` become 0, the rest maxval."""

    thr: int = DEFAULT_THRESHOLD

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        out = img.copy()
        point_ops.threshold(out, self.thr)
        return out

    @property
    def name(self) -> str:
        return f"thr({self.thr})"


@dataclass(frozen=True)
class BrightenStep(ImageStep):
    """Scale every level by ``factor``, saturating at maxval."""

    factor: float

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        out = img.copy()
        point_ops.brighten(out, self.factor)
        return out

    @property
    def name(self) -> str:
        return f"bri({self.factor:g})"


@dataclass(frozen=True)
class RotateStep(ImageStep):
    """Rotate 90 degrees anti-clockwise."""

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        return geometry.rotate_ccw90(img)

    @property
    def name(self) -> str:
        return "rotate"


@dataclass(frozen=True)
class MirrorStep(ImageStep):
    """Flip left-right."""

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        return geometry.mirror_horizontal(img)

    @property
    def name(self) -> str:
        return "mirror"


@dataclass(frozen=True)
class CropStep(ImageStep):
    """Cut out the w x h rectangle at (x, y)."""

    x: int
    y: int
    w: int
    h: int

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        return geometry.crop(img, self.x, self.y, self.w, self.h)

    @property
    def name(self) -> str:
        return f"crop({self.x},{self.y},{self.w},{self.h})"


@dataclass(frozen=True)
class BlurStep(ImageStep):
    """Mean filter with a (2*dx + 1) x (2*dy + 1) window."""

    dx: int = DEFAULT_BLUR_RADIUS
    dy: int = DEFAULT_BLUR_RADIUS

    def apply(self, img: PixelBuffer) -> PixelBuffer:
        return filters.blurred(img, self.dx, self.dy)

    @property
    def name(self) -> str:
        return f"blur({self.dx},{self.dy})"


def _int_args(spec: str, raw: str | None, count: tuple[int, ...]) -> list[int]:
    if raw is None:
        values: list[int] = []
    else:
        try:
            values = [int(v) for v in raw.split(",")]
        except ValueError:
            raise ValueError(f"Step '{spec}' expects integer arguments, got '{raw}'")
    if len(values) not in count:
        expected = " or ".join(str(n) for n in count)
        raise ValueError(f"Step '{spec}' expects {expected} arguments, got {len(values)}")
    return values


def parse_step(spec: str) -> ImageStep:
    """Build a step from a text spec ``name[:args]``.

    Recognized specs: ``neg``, ``thr[:T]``, ``bri:F``, ``rotate``,
    ``mirror``, ``crop:X,Y,W,H``, ``blur[:D]`` and ``blur:DX,DY``.

    Raises:
        ValueError: If the name is unknown or the arguments are malformed.
    """
    name, _, raw = spec.strip().partition(":")
    name = name.lower()
    raw = raw or None

    if name == "neg":
        _int_args(spec, raw, (0,))
        return NegativeStep()
    if name == "thr":
        args = _int_args(spec, raw, (0, 1))
        return ThresholdStep(*args)
    if name == "bri":
        if raw is None:
            raise ValueError(f"Step '{spec}' expects a factor, e.g. bri:1.5")
        try:
            factor = float(raw)
        except ValueError:
            raise ValueError(f"Step '{spec}' expects a numeric factor, got '{raw}'")
        if factor < 0:
            raise ValueError(f"Brighten factor must be non-negative, got {factor}")
        return BrightenStep(factor)
    if name == "rotate":
        _int_args(spec, raw, (0,))
        return RotateStep()
    if name == "mirror":
        _int_args(spec, raw, (0,))
        return MirrorStep()
    if name == "crop":
        return CropStep(*_int_args(spec, raw, (4,)))
    if name == "blur":
        args = _int_args(spec, raw, (0, 1, 2))
        if len(args) == 1:
            args = args * 2
        if any(a < 0 for a in args):
            raise ValueError(f"Blur radii must be non-negative, got {args}")
        return BlurStep(*args)
    raise ValueError(f"Unknown step '{spec}'")


@dataclass
class StepResult:
    """Result of applying a single step.

    Attributes:
        name: Name of the step that produced this result.
        image: Output image from the step.
        artifact_path: Path where the image was saved (if artifact saving enabled).
    """

    name: str
    image: PixelBuffer
    artifact_path: str | None = None


@dataclass
class PipelineResult:
    """Results from running a pipeline.

    Attributes:
        original: Copy of the input image.
        steps: StepResult for each step, in order.
    """

    original: PixelBuffer
    steps: list[StepResult] = field(default_factory=list)

    @property
    def final(self) -> PixelBuffer:
        """The image produced by the last step (the original if there are none)."""
        if not self.steps:
            return self.original
        return self.steps[-1].image

    def get_intermediate(self, step_name: str) -> PixelBuffer | None:
        """Get the image produced by the step with this name, or None."""
        for step in self.steps:
            if step.name == step_name:
                return step.image
        return None

    def release_intermediates(self) -> None:
        """Release every image except the final one."""
        final = self.final
        for img in [self.original] + [s.image for s in self.steps]:
            if img is not final:
                img.release()


@dataclass
class Pipeline:
    """A sequence of steps applied one after the other.

    Attributes:
        steps: ImageStep instances to apply in order.
    """

    steps: list[ImageStep]

    def run(self, img: PixelBuffer, artifact_dir: str | None = None) -> PipelineResult:
        """Run every step, keeping all intermediate images.

        Args:
            img: Input image (not modified).
            artifact_dir: Optional directory where each intermediate image is
                          saved as ``NN_<step>.pgm``.
        """
        result = PipelineResult(original=img.copy())
        current = result.original

        for index, step in enumerate(self.steps, start=1):
            output = step.apply(current)
            logger.debug("Step %s: %dx%d -> %dx%d", step.name,
                         current.width, current.height, output.width, output.height)

            artifact_path = None
            if artifact_dir:
                stem = step.name.split("(")[0]
                path = Path(artifact_dir) / f"{index:02d}_{stem}.pgm"
                path.parent.mkdir(parents=True, exist_ok=True)
                codec.save(output, path)
                artifact_path = str(path)

            result.steps.append(StepResult(name=step.name, image=output, artifact_path=artifact_path))
            current = output

        return result

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)
