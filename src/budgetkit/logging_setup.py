"""Centralized logging configuration for the ``budgetkit`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  package root logger. The CLI calls it once at startup.
- ``get_logger(name)`` returns a logger and makes sure the package root has
  at least a ``NullHandler`` when nothing has been configured yet.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "budgetkit"
_ENV_LEVEL = "BUDGETKIT_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_configured = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
        raise ValueError(f"Unknown log level '{level}'")
    env_val = os.getenv(_ENV_LEVEL)
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the package root logger once.

    A later call with an explicit ``level`` only adjusts the level of the
    existing handler.

    Parameters
    ----------
    level:
        Level as ``int`` or name (``"INFO"``). ``None`` falls back to the
        ``BUDGETKIT_LOG_LEVEL`` environment variable, then ``WARNING``.
    fmt:
        Optional format string.
    stream:
        Output stream, ``sys.stderr`` by default.
    """
    global _configured
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _configured:
        if level is not None:
            numeric_level = _parse_level(level)
            logger.setLevel(numeric_level)
            for handler in logger.handlers:
                handler.setLevel(numeric_level)
        return

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    numeric_level = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(numeric_level)
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until the application configures logging."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
