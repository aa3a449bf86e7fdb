"""
Engine tracing handle.

Analysis stages log through a logger handed to them by the caller. When none
is given they fall back to a silent logger, so the engine stays free of
hidden output unless tracing is requested.
"""

import logging
from typing import Optional

NULL_LOGGER_NAME = "core.engine.null"


def null_logger() -> logging.Logger:
    """A logger that never emits and never propagates."""
    logger = logging.getLogger(NULL_LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.disabled = True
    return logger


def resolve_logger(logger: Optional[logging.Logger]) -> logging.Logger:
    return logger if logger is not None else null_logger()
