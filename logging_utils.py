"""Shared logging configuration helpers for imgtool."""

from __future__ import annotations

import logging
import sys
from typing import Iterable

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def add_logging_args(parser) -> None:
    """Add --log-level, -v and -q options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Set log verbosity (debug, info, warning, error, critical)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v shows per-operation detail)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Reduce log verbosity (-qq for errors only)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level.

    An explicit ``log_level`` name wins; otherwise each ``-v`` moves one step
    towards DEBUG and each ``-q`` one step towards ERROR, starting at INFO.
    """
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    offset = verbose - quiet
    if offset >= 1:
        return logging.DEBUG
    if offset == 0:
        return logging.INFO
    if offset == -1:
        return logging.WARNING
    return logging.ERROR


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging and return the active level.

    If the root logger already has handlers (e.g. under pytest's caplog),
    only their levels are adjusted.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        stream=sys.stdout,
    )
    return level


def log_image_error(logger: logging.Logger, context: str, error: Exception) -> None:
    """Log a failed image operation with its cause.

    The cause goes out at ERROR; diagnostic detail (OS error code, byte
    offset of a format error) only at DEBUG.
    """
    logger.error("%s: %s", context, getattr(error, "cause", error))
    errno = getattr(error, "errno", None)
    if errno is not None:
        logger.debug("%s: errno=%s", context, errno)
    kind = getattr(error, "kind", None)
    if kind is not None:
        logger.debug("%s: %s at byte %s", context, kind.name, getattr(error, "offset", None))
