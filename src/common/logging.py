"""Logging configuration for the tariff tracker."""

from __future__ import annotations

import logging
import sys


def setup_logging(
    level: int | str = logging.INFO,
    module_name: str = "src.tariff_tracker",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Module loggers below ``module_name`` (``logging.getLogger(__name__)``)
    propagate to the handler installed here, so one run produces a single
    consolidated log stream.

    Args:
        level: Logging level (default INFO). Level names are accepted;
            unknown names fall back to INFO.
        module_name: Name for the logger instance.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)

    if logger.handlers:
        return logger

    resolved = resolve_level(level)
    logger.setLevel(resolved)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def resolve_level(level: int | str) -> int:
    """Numeric logging level for ``level``; unknown names map to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if isinstance(resolved, int):
        return resolved
    logging.getLogger(__name__).warning(
        "Unknown log level %r, using INFO", level
    )
    return logging.INFO
