"""Two-image commands: paste/blend one image into another, locate a pattern."""

from __future__ import annotations

import argparse
import logging

from graymap import ImageError, PixelBuffer, blend, load, locate_subimage, paste, save
from logging_utils import log_image_error

logger = logging.getLogger(__name__)


def add_compose_subparsers(subparsers: argparse._SubParsersAction) -> None:
    paste_parser = subparsers.add_parser(
        "paste",
        help="Paste (or blend, with --alpha) an image into another",
    )
    paste_parser.add_argument("dst", help="Destination PGM file")
    paste_parser.add_argument("src", help="PGM file to paste")
    paste_parser.add_argument("output", help="Output PGM file")
    paste_parser.add_argument(
        "--at",
        nargs=2,
        type=int,
        default=(0, 0),
        metavar=("X", "Y"),
        help="Top-left position in dst (default: 0 0)",
    )
    paste_parser.add_argument(
        "--alpha",
        type=float,
        help="Blend with this source weight instead of pasting (usually 0.0-1.0)",
    )
    paste_parser.set_defaults(_cmd=cmd_paste)

    locate_parser = subparsers.add_parser(
        "locate",
        help="Find the first position where a pattern occurs in an image",
    )
    locate_parser.add_argument("image", help="PGM file to search in")
    locate_parser.add_argument("pattern", help="PGM file to search for")
    locate_parser.set_defaults(_cmd=cmd_locate)


def _load(path: str) -> PixelBuffer | None:
    try:
        return load(path)
    except ImageError as e:
        log_image_error(logger, f"Cannot load {path}", e)
        return None


def cmd_paste(args: argparse.Namespace) -> int:
    dst = _load(args.dst)
    src = _load(args.src)
    if dst is None or src is None:
        return 1

    x, y = args.at
    if not dst.valid_rect(x, y, src.width, src.height):
        logger.error(
            "%s (%dx%d) does not fit inside %s (%dx%d) at (%d, %d)",
            args.src, src.width, src.height, args.dst, dst.width, dst.height, x, y,
        )
        return 1
    if src.maxval != dst.maxval:
        logger.warning("maxval differs (%d vs %d); levels are not rescaled", src.maxval, dst.maxval)

    if args.alpha is None:
        paste(dst, x, y, src)
    else:
        blend(dst, x, y, src, args.alpha)

    try:
        save(dst, args.output)
    except ImageError as e:
        log_image_error(logger, f"Cannot save {args.output}", e)
        return 1
    logger.info("Wrote %s", args.output)
    return 0


def cmd_locate(args: argparse.Namespace) -> int:
    img = _load(args.image)
    pattern = _load(args.pattern)
    if img is None or pattern is None:
        return 1

    position = locate_subimage(img, pattern)
    if position is None:
        logger.info("%s not found in %s", args.pattern, args.image)
        return 1
    print(f"{position.x} {position.y}")
    return 0
