"""Environment-driven settings.

The CLI loads a local ``.env`` (via ``python-dotenv``) before calling
:func:`load_settings`; library callers can pass explicit values instead.
Bad values never abort a run: they fall back to the defaults with a warning.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import DEFAULT_WEEK_START, WeekStart

logger = get_logger(__name__)

DEFAULT_HORIZON_WEEKS = 13
# Ten years of weeks; far past any forecast and well inside the date range.
MAX_HORIZON_WEEKS = 520

HORIZON_ENV = "CASHFLOW_HORIZON_WEEKS"
WEEK_START_ENV = "CASHFLOW_WEEK_START"


@dataclass(frozen=True, slots=True)
class ForecastSettings:
    horizon_weeks: int = DEFAULT_HORIZON_WEEKS
    week_start: WeekStart = DEFAULT_WEEK_START


def parse_week_start(value: str | WeekStart | None) -> WeekStart:
    if isinstance(value, WeekStart):
        return value
    if value is None or not value.strip():
        return DEFAULT_WEEK_START
    try:
        return WeekStart(value.strip().lower())
    except ValueError:
        logger.warning(
            "unknown week start %r; using %s", value, DEFAULT_WEEK_START.value
        )
        return DEFAULT_WEEK_START


def parse_horizon(value: str | int | None) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_HORIZON_WEEKS
    try:
        n = int(value)
    except (TypeError, ValueError):
        n = 0
    if n <= 0 or n > MAX_HORIZON_WEEKS:
        logger.warning(
            "invalid forecast horizon %r (allowed 1..%d); using %d weeks",
            value,
            MAX_HORIZON_WEEKS,
            DEFAULT_HORIZON_WEEKS,
        )
        return DEFAULT_HORIZON_WEEKS
    return n


def load_settings(
    *,
    horizon_weeks: int | None = None,
    week_start: str | WeekStart | None = None,
) -> ForecastSettings:
    """Resolve settings; explicit arguments win over the environment."""

    return ForecastSettings(
        horizon_weeks=parse_horizon(
            horizon_weeks if horizon_weeks is not None else os.getenv(HORIZON_ENV)
        ),
        week_start=parse_week_start(
            week_start if week_start is not None else os.getenv(WEEK_START_ENV)
        ),
    )


__all__ = [
    "DEFAULT_HORIZON_WEEKS",
    "DEFAULT_WEEK_START",
    "MAX_HORIZON_WEEKS",
    "ForecastSettings",
    "load_settings",
    "parse_horizon",
    "parse_week_start",
]
