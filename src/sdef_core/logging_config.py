"""Logging configuration for sdef-core command-line tools."""

import sys
from typing import TextIO

from loguru import logger

from sdef_core.config import LOG_FORMAT, LOG_LEVEL, VERBOSE_LOG_LEVEL


def configure_logging(*, verbose: bool = False, sink: TextIO | None = None) -> int:
    """Replace loguru's handlers with a single sink (stderr by default).

    Returns the handler id so callers can remove it again.
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=VERBOSE_LOG_LEVEL if verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )
