"""Terminal rendering of transactions and the weekly forecast with ``rich``.

Rendering owns presentation only (column order, money formatting, sort
state); all numbers come straight from the core models.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Literal

from rich.table import Table
from rich.text import Text

from .ctv import CanonicalTransaction
from .models import WeeklySummaryRecord, WeekOut

type SortColumn = Literal["date", "description", "amount", "type"]

_SORT_KEYS: dict[str, Callable[[CanonicalTransaction], Any]] = {
    "date": lambda t: t.date,
    "description": lambda t: t.description.lower(),
    "amount": lambda t: t.amount,
    "type": lambda t: t.type,
}


def fmt_money(value: float) -> str:
    # Sign goes after the symbol ("$-40.00"), matching the web view.
    return f"${value:.2f}"


def sort_transactions(
    transactions: Sequence[CanonicalTransaction],
    by: SortColumn | None = None,
    *,
    descending: bool = False,
) -> list[CanonicalTransaction]:
    """Return a sorted copy; ``by=None`` keeps input order."""

    if by is None:
        return list(transactions)
    if by not in _SORT_KEYS:
        raise ValueError(f"unknown sort column: {by!r}")
    return sorted(transactions, key=_SORT_KEYS[by], reverse=descending)


def transactions_table(transactions: Sequence[CanonicalTransaction]) -> Table:
    table = Table(title="Parsed Transactions")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    for tx in transactions:
        # Cell text comes from the upload; keep rich from reading it as markup.
        table.add_row(
            Text(tx.date), Text(tx.description), fmt_money(tx.amount), tx.type.upper()
        )
    return table


def forecast_table(
    weeks: Sequence[WeeklySummaryRecord | WeekOut], *, horizon: int = 13
) -> Table:
    table = Table(title=f"{horizon}-Week Cash Flow Forecast")
    table.add_column("Week #", justify="right")
    table.add_column("Week Start")
    table.add_column("Inflow", justify="right")
    table.add_column("Outflow", justify="right", style="red")
    table.add_column("Net", justify="right", style="bold")
    for w in weeks:
        table.add_row(
            str(w.week_number),
            w.week_start,
            fmt_money(w.inflow),
            fmt_money(w.outflow),
            fmt_money(w.net),
        )
    return table


__all__ = [
    "SortColumn",
    "fmt_money",
    "forecast_table",
    "sort_transactions",
    "transactions_table",
]
