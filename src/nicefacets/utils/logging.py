"""Logger setup for nicefacets.

Modules only call ``get_logger(__name__)``. The facet app is the one place
that calls ``configure_logging()``. Records go to stderr because stdin and
stdout carry data.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "nicefacets"
LOG_LEVEL_ENV = "NICEFACETS_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _stderr_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
            return handler
    return None


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Attach one stderr handler to the ``nicefacets`` logger.

    The level falls back to $NICEFACETS_LOG_LEVEL, then INFO. Without
    ``force`` an existing stderr handler is left alone; with it, every
    handler is replaced.
    """
    resolved = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved)

    if force:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    elif _stderr_handler(logger) is not None:
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """``logging.getLogger(name)``, defaulting to the package logger."""
    return logging.getLogger(name or PACKAGE_LOGGER)
