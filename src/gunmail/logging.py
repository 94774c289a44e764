"""Logging helpers for gunmail.

Modules log through ``logging.getLogger(__name__)``. This module adds the
``TRACE`` level used for HTTP request details and an optional Rich console
handler for scripts and the CLI.

Examples:
    >>> from gunmail.logging import init_logging
    >>> logger = init_logging("DEBUG")  # doctest: +SKIP
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

#: Ultra-verbose level, below DEBUG, for request/response details.
TRACE_LEVEL = 5

ROOT_LOGGER_NAME = "gunmail"

logging.addLevelName(TRACE_LEVEL, "TRACE")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger namespaced under ``gunmail``.

    Args:
        name: Logger name. Names already starting with ``gunmail`` are
            kept as-is, others are prefixed.

    Returns:
        Standard library logger.

    Examples:
        >>> get_logger("transport").name
        'gunmail.transport'
        >>> get_logger().name
        'gunmail'
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def init_logging(level: int | str = "INFO", *, show_path: bool = False) -> logging.Logger:
    """Configure the ``gunmail`` logger with a Rich console handler.

    Calling it again replaces the handler installed by a previous call
    instead of stacking a second one.

    Args:
        level: Level name (``TRACE``, ``DEBUG``, ``INFO``...) or number.
        show_path: Show the emitting file and line in console output.

    Returns:
        The configured ``gunmail`` logger.

    Raises:
        ValueError: If *level* is an unknown level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_gunmail_managed", False):
            logger.removeHandler(handler)

    handler = RichHandler(show_path=show_path, rich_tracebacks=True, markup=False)
    handler._gunmail_managed = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = ["ROOT_LOGGER_NAME", "TRACE_LEVEL", "get_logger", "init_logging"]
