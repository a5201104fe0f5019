"""
Logging configuration for did-i-forget.

Status lines go to stderr through a rich handler so that stdout carries
only the report. Quiet mode is a handler level, not a global flag.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "did_i_forget"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route package logging to stderr, and optionally to a file.

    Args:
        verbose: DEBUG level, with timestamps and source locations
        quiet: only errors
        log_file: also append records to this file, at the same level

    Returns:
        The did_i_forget package logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # One log file per setup; drop the one from an earlier call
    for stale in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(stale)
        stale.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the did_i_forget hierarchy; *name* is prefixed if needed."""
    if name is None:
        return logging.getLogger(PACKAGE_LOGGER)

    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)
