"""Weekly cash-flow aggregation.

Transactions are folded into week buckets keyed by the ISO date of the week's
first day. The bucket map always starts with ``horizon`` consecutive weeks
beginning at the reference date's week, so an empty input still yields a full
forecast; transactions outside that window add buckets rather than being
dropped.

The week-start convention (Sunday or Monday) is passed explicitly and used for
both the seeded weeks and every transaction, so the keys always line up.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta

from .config import DEFAULT_HORIZON_WEEKS, DEFAULT_WEEK_START
from .ctv import CanonicalTransaction
from .logging_setup import get_logger
from .models import WeeklyBucket, WeeklySummaryRecord, WeekStart

logger = get_logger(__name__)

type BucketMap = dict[str, WeeklyBucket]


def parse_txn_date(raw: str) -> date | None:
    """Parse ``YYYY-MM-DD`` (optionally followed by a time part) to a date.

    Returns ``None`` for empty or unrecognized values.
    """

    s = (raw or "").strip()
    if not s:
        return None
    # Accept 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM:SS', and 'YYYY-MM-DD HH:MM:SS'.
    first = s.split()[0].split("T", 1)[0]
    try:
        return datetime.strptime(first, "%Y-%m-%d").date()
    except ValueError:
        return None


def start_of_week(d: date, week_start: WeekStart = DEFAULT_WEEK_START) -> date:
    """First day of ``d``'s week; the first calendar week is cut short at ``date.min``."""

    try:
        return d - timedelta(days=(d.weekday() - week_start.weekday) % 7)
    except OverflowError:
        return date.min


def week_key(d: date, week_start: WeekStart = DEFAULT_WEEK_START) -> str:
    return start_of_week(d, week_start).isoformat()


def seed_buckets(
    reference_date: date,
    *,
    horizon: int = DEFAULT_HORIZON_WEEKS,
    week_start: WeekStart = DEFAULT_WEEK_START,
) -> BucketMap:
    """Return ``horizon`` zeroed buckets for consecutive weeks from ``reference_date``.

    Seeding stops early, with a warning, when a week would run past
    ``date.max``.
    """

    buckets: BucketMap = {}
    for i in range(horizon):
        try:
            day = reference_date + timedelta(weeks=i)
        except OverflowError:
            logger.warning(
                "forecast horizon clipped to %d weeks at the end of the calendar", i
            )
            break
        buckets[week_key(day, week_start)] = WeeklyBucket()
    return buckets


def fold_transactions(
    seed: Mapping[str, WeeklyBucket],
    transactions: Iterable[CanonicalTransaction],
    *,
    week_start: WeekStart = DEFAULT_WEEK_START,
) -> BucketMap:
    """Accumulate ``transactions`` into a copy of ``seed``.

    ``seed`` is not modified. Transactions with an empty or unparseable date
    are skipped. Keys keep insertion order: seeded weeks first, then any new
    week in the order its first transaction appears.
    """

    buckets: BucketMap = dict(seed)
    skipped = 0
    added = 0
    for tx in transactions:
        d = parse_txn_date(tx.date)
        if d is None:
            skipped += 1
            logger.debug("skipping transaction with unusable date %r", tx.date)
            continue
        key = week_key(d, week_start)
        if key not in buckets:
            added += 1
        buckets[key] = buckets.get(key, WeeklyBucket()).add(tx.amount)
    if skipped or added:
        logger.info(
            "weekly fold: %d skipped (bad date), %d out-of-horizon weeks added",
            skipped,
            added,
        )
    return buckets


def to_summary(buckets: Mapping[str, WeeklyBucket]) -> list[WeeklySummaryRecord]:
    """Number buckets by insertion order, then sort them by week start.

    Week numbers are assigned before sorting, so an out-of-horizon week that
    falls before the seeded range keeps its trailing number.
    """

    records = [
        WeeklySummaryRecord(
            week_number=i + 1,
            week_start=key,
            inflow=b.inflow,
            outflow=b.outflow,
            net=b.inflow + b.outflow,
        )
        for i, (key, b) in enumerate(buckets.items())
    ]
    records.sort(key=lambda r: date.fromisoformat(r.week_start))
    return records


def summarize_by_week(
    transactions: Iterable[CanonicalTransaction],
    reference_date: date | None = None,
    *,
    horizon: int = DEFAULT_HORIZON_WEEKS,
    week_start: WeekStart = DEFAULT_WEEK_START,
) -> list[WeeklySummaryRecord]:
    """Build the weekly forecast for ``transactions``.

    Parameters
    ----------
    transactions:
        Canonical transactions; their order only affects the numbering of
        out-of-horizon weeks.
    reference_date:
        Anchor for the seeded weeks. Defaults to today's local date.
    horizon:
        Number of seeded weeks (13 for the standard forecast).
    week_start:
        First day of the week, applied to seeding and bucketing alike.

    Returns
    -------
    list[WeeklySummaryRecord]
        At least ``horizon`` records sorted ascending by ``week_start``, fewer
        only when the seeded range would run past ``date.max``.
    """

    ref = reference_date or date.today()
    seed = seed_buckets(ref, horizon=horizon, week_start=week_start)
    buckets = fold_transactions(seed, transactions, week_start=week_start)
    summary = to_summary(buckets)
    logger.info("weekly summary: %d weeks from %s", len(summary), next(iter(seed), None))
    return summary


__all__ = [
    "BucketMap",
    "fold_transactions",
    "parse_txn_date",
    "seed_buckets",
    "start_of_week",
    "summarize_by_week",
    "to_summary",
    "week_key",
]
