"""Public API: CSV text (or a CSV file) in, :class:`ForecastReport` out.

Each call parses and summarizes from scratch; nothing is cached or carried
between calls, so a new upload fully replaces the previous result.
"""

from __future__ import annotations

from datetime import date
from os import PathLike

from .config import ForecastSettings, load_settings
from .forecast import summarize_by_week
from .ingest.utils import read_csv_text
from .logging_setup import get_logger
from .models import ForecastReport
from .normalizers import normalize_csv_text

logger = get_logger(__name__)


def build_forecast(
    csv_text: str | None,
    *,
    reference_date: date | None = None,
    settings: ForecastSettings | None = None,
) -> ForecastReport:
    """Normalize ``csv_text`` and bucket it into the weekly forecast.

    ``csv_text=None`` means no file was selected: the result is an empty
    report (no transactions, no weeks).
    """

    cfg = settings or load_settings()
    if csv_text is None:
        logger.debug("no CSV provided; returning empty report")
        return ForecastReport(week_start_day=cfg.week_start)

    ref = reference_date or date.today()
    transactions = normalize_csv_text(csv_text)
    weeks = summarize_by_week(
        transactions,
        ref,
        horizon=cfg.horizon_weeks,
        week_start=cfg.week_start,
    )
    return ForecastReport.build(
        transactions,
        weeks,
        reference_date=ref.isoformat(),
        week_start=cfg.week_start,
    )


def forecast_from_csv(
    csv_path: str | PathLike[str],
    *,
    reference_date: date | None = None,
    settings: ForecastSettings | None = None,
) -> ForecastReport:
    """Read ``csv_path`` and return its forecast (file errors propagate)."""

    return build_forecast(
        read_csv_text(csv_path),
        reference_date=reference_date,
        settings=settings,
    )


__all__ = ["build_forecast", "forecast_from_csv"]
