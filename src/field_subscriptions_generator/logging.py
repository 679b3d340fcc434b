"""Logging utilities for the generator."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER_NAME = "field_subscriptions_generator"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger under the generator hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Configure the generator logger with console output."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI runs in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    formatter = logging.Formatter("[field-subscriptions] %(levelname)s %(message)s")
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
