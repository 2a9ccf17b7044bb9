"""Logging configuration for the ``cashflow_forecast`` package.

Entry points (the CLI, or a host application) call :func:`configure_logging`
once; library modules only ever call ``get_logger(__name__)``. Nothing in the
package attaches handlers on import, so embedding the normalizer or the
aggregator in another program stays silent until that program opts in.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "cashflow_forecast"
_LEVEL_ENV = "CASHFLOW_FORECAST_LOG_LEVEL"
_DEFAULT_FMT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level is None:
        level = os.getenv(_LEVEL_ENV)
        if not level:
            return logging.INFO
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelNamesMapping().get(name)
    return resolved if resolved is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
    rich_output: bool = False,
) -> None:
    """Attach a single handler to the package logger (idempotent).

    Parameters
    ----------
    level:
        ``int`` or level name. ``None`` reads ``CASHFLOW_FORECAST_LOG_LEVEL``
        and falls back to ``INFO``.
    fmt:
        Format string for the plain ``StreamHandler``. Ignored when
        ``rich_output`` is set.
    stream:
        Target stream for the plain handler; defaults to ``sys.stderr``.
    rich_output:
        Use ``rich.logging.RichHandler`` (stderr console) instead of a plain
        ``StreamHandler``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler: logging.Handler
    if rich_output:
        from rich.console import Console
        from rich.logging import RichHandler

        handler = RichHandler(console=Console(stderr=True), show_path=False)
    else:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FMT))
    handler.setLevel(resolved)

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Detach package handlers so :func:`configure_logging` can run again."""

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, keeping the package silent until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging"]
