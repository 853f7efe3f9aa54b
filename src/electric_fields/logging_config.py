# MIT License (see LICENSE)
"""Logging configuration for the field engine."""
from __future__ import annotations
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(name: str = "electric_fields", level: str | None = None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Args:
        name: Logger name. Module loggers below it inherit the handler.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to
               ELECTRIC_FIELDS_LOG_LEVEL, then INFO.

    Returns:
        The configured logger.
    """
    if level is None:
        level = os.environ.get("ELECTRIC_FIELDS_LOG_LEVEL", "INFO")
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Repeated calls must not stack handlers
    if not any(getattr(h, "_electric_fields", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._electric_fields = True
        logger.addHandler(handler)
    return logger
