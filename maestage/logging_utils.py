"""Logging setup for scripts and notebooks that load staged datasets."""

from __future__ import annotations

import logging
from typing import Union

PACKAGE_LOGGER = "maestage"
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    fmt: str = DEFAULT_LOG_FORMAT,
    capture_warnings: bool = True,
    force: bool = False,
) -> logging.Logger:
    """
    Send maestage's log records to stderr and return the package logger.

    level:            logging level or its name ("DEBUG" shows every object read)
    capture_warnings: route ``warnings.warn`` output (anndata, pandas) through logging
    force:            replace handlers already installed on the root logger
    """
    if isinstance(level, str):
        name = level.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {level}")
        level = logging.getLevelName(name)

    logging.basicConfig(level=level, format=fmt, force=force)
    logging.captureWarnings(capture_warnings)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger
