"""Apply command: run a pipeline of single-image operations on a PGM file."""

from __future__ import annotations

import argparse
import logging

from graymap import (
    ContractViolation,
    ImageError,
    InstrumentationCounters,
    Pipeline,
    load,
    parse_step,
    save,
)
from logging_utils import log_image_error

logger = logging.getLogger(__name__)

STEP_HELP = (
    "Operation to apply, repeatable and applied in order: "
    "neg, thr[:T], bri:F, rotate, mirror, crop:X,Y,W,H, blur[:D], blur:DX,DY"
)


def add_apply_subparser(subparsers: argparse._SubParsersAction) -> None:
    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply a sequence of operations to an image",
    )
    apply_parser.add_argument("input", help="Input PGM file")
    apply_parser.add_argument("output", help="Output PGM file")
    apply_parser.add_argument(
        "-s", "--step",
        dest="steps",
        action="append",
        default=[],
        metavar="STEP",
        help=STEP_HELP,
    )
    apply_parser.add_argument(
        "--artifacts",
        metavar="DIR",
        help="Also save every intermediate image into DIR",
    )
    apply_parser.add_argument(
        "--stats",
        action="store_true",
        help="Report pixel access counters and elapsed time",
    )
    apply_parser.set_defaults(_cmd=cmd_apply)


def cmd_apply(args: argparse.Namespace) -> int:
    try:
        steps = [parse_step(spec) for spec in args.steps]
    except ValueError as e:
        logger.error("%s", e)
        return 1

    counters = InstrumentationCounters() if args.stats else None
    try:
        img = load(args.input, counters=counters)
    except ImageError as e:
        log_image_error(logger, f"Cannot load {args.input}", e)
        return 1

    pipeline = Pipeline(steps=steps)
    try:
        if counters is not None:
            with counters.measure() as measurement:
                result = pipeline.run(img, artifact_dir=args.artifacts)
        else:
            result = pipeline.run(img, artifact_dir=args.artifacts)
    except ContractViolation as e:
        # Bad step arguments for this image (e.g. crop outside bounds).
        logger.error("Cannot apply steps to %dx%d image: %s", img.width, img.height, e)
        return 1
    except ImageError as e:
        log_image_error(logger, f"Cannot process {args.input}", e)
        return 1

    final = result.final
    for step in result.steps:
        logger.debug("%s -> %dx%d", step.name, step.image.width, step.image.height)

    try:
        save(final, args.output)
    except ImageError as e:
        log_image_error(logger, f"Cannot save {args.output}", e)
        return 1
    logger.info("Wrote %s (%dx%d) after %d step(s)", args.output, final.width, final.height, len(pipeline))

    if counters is not None:
        logger.info("Elapsed: %.6fs", measurement.elapsed)
        counters.report()
    result.release_intermediates()
    return 0
