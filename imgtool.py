#!/usr/bin/env python3
"""
Command-line front-end for the graymap image library.

Usage:
    imgtool info <file>...                          # Size, maxval and level range
    imgtool new out.pgm --width W --height H        # Create a black image
    imgtool apply in.pgm out.pgm -s neg -s blur:2   # Run operations in order
    imgtool paste dst.pgm src.pgm out.pgm --at X Y  # Paste src into dst
    imgtool paste ... --alpha 0.5                   # Blend instead of paste
    imgtool locate img.pgm pattern.pgm              # Print "x y" of first match
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.apply import add_apply_subparser
from cli.compose import add_compose_subparsers
from cli.create import add_create_subparser
from cli.info import add_info_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgtool",
        description="Inspect and transform 8-bit grayscale PGM (P5) images",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_info_subparser(subparsers)
    add_create_subparser(subparsers)
    add_apply_subparser(subparsers)
    add_compose_subparsers(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
