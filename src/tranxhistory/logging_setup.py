"""Centralized logging configuration for the ``tranxhistory`` package.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the
  package root logger. Called once by entrypoints such as the CLI.
- ``get_logger(name)``: acquire a logger, making sure the package root
  logger has a ``NullHandler`` when nothing has been configured.

The ledger core does not log; only entrypoints do.
"""

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "tranxhistory"
LOG_LEVEL_ENV = "TRANXHISTORY_LOG_LEVEL"
_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    for candidate in (level, os.getenv(LOG_LEVEL_ENV)):
        if candidate:
            resolved = _level_from_name(candidate)
            if resolved is not None:
                return resolved
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as int or name (e.g. "INFO"). Falls back to the
            TRANXHISTORY_LOG_LEVEL environment variable, then WARNING.
        fmt: Optional format string.
        stream: Output stream of the handler (stderr by default).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until configure_logging has run."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not any(
        isinstance(h, logging.NullHandler) for h in pkg_logger.handlers
    ):
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
