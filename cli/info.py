"""Info command: print size, maxval and level range of PGM files."""

from __future__ import annotations

import argparse
import logging

from graymap import ImageError, load
from logging_utils import log_image_error

logger = logging.getLogger(__name__)


def add_info_subparser(subparsers: argparse._SubParsersAction) -> None:
    info_parser = subparsers.add_parser(
        "info",
        help="Show dimensions, maxval and min/max levels of PGM files",
    )
    info_parser.add_argument(
        "files",
        nargs="+",
        help="PGM (P5) files to inspect",
    )
    info_parser.set_defaults(_cmd=cmd_info)


def cmd_info(args: argparse.Namespace) -> int:
    failures = 0
    for path in args.files:
        try:
            img = load(path)
        except ImageError as e:
            log_image_error(logger, str(path), e)
            failures += 1
            continue
        low, high = img.stats()
        if img.size:
            print(f"{path}: {img.width}x{img.height} maxval={img.maxval} min={low} max={high}")
        else:
            print(f"{path}: {img.width}x{img.height} maxval={img.maxval} (no pixels)")
        img.release()
    return 1 if failures else 0
