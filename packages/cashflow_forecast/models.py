"""Data models and type aliases for ``cashflow_forecast``.

Raw CSV rows are kept opaque (any string-keyed mapping). Aggregation state and
its output are small frozen dataclasses; the JSON export consumed by
rendering layers is a set of pydantic models so field names and shapes are
validated at the boundary.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .ctv import CanonicalTransaction, TransactionType

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

type RawRecord = Mapping[str, Any]
"""A single CSV row keyed by header name.

Header spelling varies between exports (``amount``, ``Amount``, `` Amount``);
values are usually strings but callers of the Python API may pass anything.
"""


# ---------------------------------------------------------------------------
# Week bucketing
# ---------------------------------------------------------------------------


class WeekStart(str, Enum):
    """Day of week on which a forecast week begins."""

    SUNDAY = "sunday"
    MONDAY = "monday"

    @property
    def weekday(self) -> int:
        # ``date.weekday()`` numbering: Monday == 0 ... Sunday == 6
        return 6 if self is WeekStart.SUNDAY else 0


DEFAULT_WEEK_START = WeekStart.SUNDAY


@dataclass(frozen=True, slots=True)
class WeeklyBucket:
    """Running inflow/outflow totals for one week.

    ``outflow`` accumulates negative amounts and therefore stays ``<= 0``.
    """

    inflow: float = 0.0
    outflow: float = 0.0

    def add(self, amount: float) -> WeeklyBucket:
        if amount >= 0:
            return WeeklyBucket(inflow=self.inflow + amount, outflow=self.outflow)
        return WeeklyBucket(inflow=self.inflow, outflow=self.outflow + amount)


@dataclass(frozen=True, slots=True)
class WeeklySummaryRecord:
    """One row of the weekly forecast.

    Attributes
    ----------
    week_number:
        1-based position of the week in bucket insertion order. Pre-seeded
        weeks are numbered first, so out-of-horizon weeks carry trailing
        numbers even when they sort before a seeded week.
    week_start:
        ISO date (``YYYY-MM-DD``) of the first day of the week.
    inflow, outflow, net:
        Totals for the week; ``net == inflow + outflow``.
    """

    week_number: int
    week_start: str
    inflow: float
    outflow: float
    net: float


# ---------------------------------------------------------------------------
# DTOs for JSON export
# ---------------------------------------------------------------------------


class TransactionOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    description: str
    amount: float
    type: TransactionType

    @classmethod
    def from_ctv(cls, tx: CanonicalTransaction) -> TransactionOut:
        return cls(date=tx.date, description=tx.description, amount=tx.amount, type=tx.type)


class WeekOut(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    week_number: int = Field(alias="weekNumber")
    week_start: str = Field(alias="weekStart")
    inflow: float
    outflow: float
    net: float

    @classmethod
    def from_record(cls, rec: WeeklySummaryRecord) -> WeekOut:
        return cls(
            week_number=rec.week_number,
            week_start=rec.week_start,
            inflow=rec.inflow,
            outflow=rec.outflow,
            net=rec.net,
        )


class ForecastReport(BaseModel):
    """Top-level export: the parsed transactions plus the weekly forecast.

    Serialize with ``model_dump_json(by_alias=True)`` to get the camelCase
    field names (``weekNumber``, ``weekStart``) that charting and table
    front-ends key on.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reference_date: str | None = Field(default=None, alias="referenceDate")
    week_start_day: WeekStart = Field(default=DEFAULT_WEEK_START, alias="weekStartDay")
    transactions: list[TransactionOut] = Field(default_factory=list)
    weeks: list[WeekOut] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        transactions: Sequence[CanonicalTransaction],
        weeks: Sequence[WeeklySummaryRecord],
        *,
        reference_date: str | None,
        week_start: WeekStart,
    ) -> ForecastReport:
        return cls(
            reference_date=reference_date,
            week_start_day=week_start,
            transactions=[TransactionOut.from_ctv(t) for t in transactions],
            weeks=[WeekOut.from_record(w) for w in weeks],
        )

    def chart_series(self) -> dict[str, list[Any]]:
        """Return the weekly series keyed for a line chart.

        ``weekStart`` is the x axis; ``inflow``, ``outflow`` and ``net`` are
        the three plotted series, aligned index-for-index with it.
        """

        return {
            "weekStart": [w.week_start for w in self.weeks],
            "inflow": [w.inflow for w in self.weeks],
            "outflow": [w.outflow for w in self.weeks],
            "net": [w.net for w in self.weeks],
        }


__all__ = [
    "RawRecord",
    "DEFAULT_WEEK_START",
    "WeekStart",
    "WeeklyBucket",
    "WeeklySummaryRecord",
    "TransactionOut",
    "WeekOut",
    "ForecastReport",
]
