"""Logging setup for globcat."""

from __future__ import annotations

import logging

_LOGGER_NAME = "globcat"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the `globcat` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """
    Configure the `globcat` logger with a single stderr handler. Debug output
    (per-pattern match counts, exclusion counts) is shown only when `verbose`.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process don't duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[globcat] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
