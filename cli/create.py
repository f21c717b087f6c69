"""New command: write a blank (or uniformly gray) PGM image."""

from __future__ import annotations

import argparse
import logging

from config import DEFAULT_MAXVAL, PIXMAX
from graymap import ImageError, PixelBuffer, save
from logging_utils import log_image_error

logger = logging.getLogger(__name__)


def add_create_subparser(subparsers: argparse._SubParsersAction) -> None:
    new_parser = subparsers.add_parser(
        "new",
        help="Create a new image filled with one gray level",
    )
    new_parser.add_argument("output", help="Output PGM file")
    new_parser.add_argument("--width", type=int, required=True, help="Image width in pixels")
    new_parser.add_argument("--height", type=int, required=True, help="Image height in pixels")
    new_parser.add_argument(
        "--maxval",
        type=int,
        default=DEFAULT_MAXVAL,
        help=f"Gray level of white, 1-{PIXMAX} (default: {DEFAULT_MAXVAL})",
    )
    new_parser.add_argument(
        "--level",
        type=int,
        default=0,
        help="Gray level to fill with (default: 0, black)",
    )
    new_parser.set_defaults(_cmd=cmd_new)


def cmd_new(args: argparse.Namespace) -> int:
    if args.width < 0 or args.height < 0:
        logger.error("Width and height must be non-negative")
        return 1
    if not (1 <= args.maxval <= PIXMAX):
        logger.error("maxval must be between 1 and %d", PIXMAX)
        return 1
    if not (0 <= args.level <= args.maxval):
        logger.error("level must be between 0 and maxval (%d)", args.maxval)
        return 1

    try:
        img = PixelBuffer.create(args.width, args.height, args.maxval)
        img.pixels[...] = args.level
        save(img, args.output)
    except ImageError as e:
        log_image_error(logger, f"Cannot create {args.output}", e)
        return 1
    logger.info("Created %s (%dx%d, maxval=%d)", args.output, args.width, args.height, args.maxval)
    return 0
