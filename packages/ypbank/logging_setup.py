"""Logging for the ``ypbank`` package.

Library modules obtain children of the ``ypbank`` logger through
:func:`get_logger` and never attach output handlers. The codecs emit exactly
one DEBUG line per decode and per encode, for example::

    DEBUG ypbank.codecs.csv_format: decoded 3 csv records (412 chars)

Nothing is logged at INFO or above during normal operation, so the default
``WARNING`` level keeps the CLI quiet.

Entry points call :func:`configure_logging`. Unlike a one-shot setup it can be
called again: each call replaces the handler installed by the previous one,
which lets the CLI apply ``--log-level`` after ``.env`` has been loaded.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from .errors import SettingsError

LOGGER_NAME = "ypbank"
LEVEL_ENV_VAR = "YPBANK_LOG_LEVEL"
DEFAULT_LEVEL = logging.WARNING
DEFAULT_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Library default: silent until an entry point configures output.
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or ``YPBANK_LOG_LEVEL`` when ``None``) into a numeric level.

    Accepts level names in any case and numeric strings. An unknown name raises
    :class:`~ypbank.errors.SettingsError`.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR, "").strip() or DEFAULT_LEVEL
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    levels = logging.getLevelNamesMapping()
    if name not in levels:
        raise SettingsError(f"unknown log level {level!r}")
    return levels[name]


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Send ``ypbank`` log records to ``stream`` (``sys.stderr`` by default).

    Replaces any handler from an earlier call and returns the package logger.
    """

    global _handler
    resolved = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    _handler = handler
    return logger


def reset_logging() -> None:
    """Detach the handler installed by :func:`configure_logging`."""

    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return the ``ypbank`` logger or one of its children."""

    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        raise ValueError(f"logger {name!r} is outside the {LOGGER_NAME!r} hierarchy")
    return logging.getLogger(name)


__all__ = [
    "DEFAULT_LEVEL",
    "LEVEL_ENV_VAR",
    "LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
