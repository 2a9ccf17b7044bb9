"""Public interface for the ``cashflow_forecast`` package.

Symbol re-exports only; see :mod:`cashflow_forecast.api` for orchestration,
:mod:`cashflow_forecast.normalizers` for CSV→CTV mapping and
:mod:`cashflow_forecast.forecast` for weekly aggregation.
"""

from .api import build_forecast, forecast_from_csv
from .config import ForecastSettings, load_settings
from .ctv import CanonicalTransaction
from .forecast import summarize_by_week
from .ingest.utils import load_transactions_from_csv
from .models import (
    ForecastReport,
    RawRecord,
    TransactionOut,
    WeeklyBucket,
    WeeklySummaryRecord,
    WeekOut,
    WeekStart,
)
from .normalizers import normalize, normalize_csv_text

__all__ = [
    # API
    "build_forecast",
    "forecast_from_csv",
    "load_transactions_from_csv",
    "normalize",
    "normalize_csv_text",
    "summarize_by_week",
    # Config
    "ForecastSettings",
    "load_settings",
    # Models / types
    "CanonicalTransaction",
    "RawRecord",
    "WeekStart",
    "WeeklyBucket",
    "WeeklySummaryRecord",
    "ForecastReport",
    "TransactionOut",
    "WeekOut",
]
