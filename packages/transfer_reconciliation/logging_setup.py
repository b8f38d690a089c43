"""Logging for the ``transfer_reconciliation`` package.

Library modules call ``get_logger(__name__)`` and stay silent (a
``NullHandler`` on the package logger) until the CLI, or a host application,
calls ``configure_logging``. The level comes from the ``--log-level`` option,
else ``TRANSFER_RECON_LOG_LEVEL``, else INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "transfer_reconciliation"
LEVEL_ENV = "TRANSFER_RECON_LOG_LEVEL"
_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level (int, name or numeric string) into a ``logging`` level.

    ``None`` defers to ``TRANSFER_RECON_LOG_LEVEL``; unknown names fall back
    to INFO.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    return numeric if numeric is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Attach one stream handler to the package logger and return it.

    Calling again only adjusts the level of the existing handler, so a CLI
    option can override what the environment set.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    resolved = resolve_level(level)

    if _handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))
        logger.addHandler(_handler)
        # Avoid double emission via the root logger.
        logger.propagate = False

    _handler.setLevel(resolved)
    logger.setLevel(resolved)
    return _handler


def reset_logging() -> None:
    """Detach the handler installed by ``configure_logging``."""

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, qualified under the package logger.

    Bare names (``"cache"``) become ``"transfer_reconciliation.cache"``.
    """

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "resolve_level"]
