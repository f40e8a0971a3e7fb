"""Logging helpers for the zorsh code generator."""

import logging
import os
from typing import Optional

LOGGER_NAME = "zorsh_codegen"
LOG_LEVEL_ENV = "ZORSH_CODEGEN_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR). Falls back to
            the ZORSH_CODEGEN_LOG_LEVEL environment variable, then WARNING.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)

    log_level = getattr(logging, level.upper(), logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)

    # Output text goes to stdout; keep log records off the root logger.
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger (typically called with __name__)."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
