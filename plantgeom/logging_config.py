"""
Console/file logging for plantgeom.

The modules only create `logging.getLogger(__name__)` loggers under the
"plantgeom" namespace and never configure them on import. Scripts that want
to follow merges and appends turn them on with:

    from plantgeom import setup_logging
    setup_logging(logging.DEBUG, log_file="scene.log")
"""
from __future__ import annotations

import logging
import sys
from typing import List, Optional, Union

LOGGER_NAME = "plantgeom"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    return handlers


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route plantgeom records to stdout (and `log_file` if given); safe to call again.
    level: a logging level or its name ("DEBUG", "info", ...).
    """
    if isinstance(level, str):
        name, level = level, logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level {name!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _handlers(log_file):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", log_file or "stdout")
    return logger
