import logging
from datetime import date, timedelta

import pytest

from cashflow_forecast import CanonicalTransaction, WeekStart, normalize, summarize_by_week
from cashflow_forecast.forecast import (
    fold_transactions,
    parse_txn_date,
    seed_buckets,
    start_of_week,
    week_key,
)
from cashflow_forecast.models import WeeklyBucket

# Wednesday; the Sunday-based week runs 2023-12-31 .. 2024-01-06.
REF = date(2024, 1, 3)


def _tx(d: str, amount: float) -> CanonicalTransaction:
    return CanonicalTransaction(date=d, description="", amount=amount)


def test_start_of_week_conventions():
    tue = date(2024, 1, 2)
    assert start_of_week(tue, WeekStart.SUNDAY) == date(2023, 12, 31)
    assert start_of_week(tue, WeekStart.MONDAY) == date(2024, 1, 1)
    # A week-start day maps to itself.
    assert start_of_week(date(2023, 12, 31), WeekStart.SUNDAY) == date(2023, 12, 31)
    assert start_of_week(date(2024, 1, 1), WeekStart.MONDAY) == date(2024, 1, 1)


def test_empty_input_yields_thirteen_zero_weeks_from_current_week():
    summary = summarize_by_week([])
    start = start_of_week(date.today())

    assert len(summary) == 13
    assert [w.week_start for w in summary] == [
        (start + timedelta(weeks=i)).isoformat() for i in range(13)
    ]
    assert [w.week_number for w in summary] == list(range(1, 14))
    for w in summary:
        assert (w.inflow, w.outflow, w.net) == (0, 0, 0)


def test_same_week_inflow_and_outflow():
    txns = normalize(
        [
            {"date": "2024-01-02", "amount": "100"},
            {"date": "2024-01-02", "amount": "-40"},
        ]
    )
    summary = summarize_by_week(txns, REF)

    first = summary[0]
    assert first.week_start == "2023-12-31"
    assert first.week_number == 1
    assert (first.inflow, first.outflow, first.net) == (100, -40, 60)
    assert all(w.net == 0 for w in summary[1:])


def test_independent_calls_produce_identical_totals():
    txns = [_tx("2024-01-02", 10.5), _tx("2024-01-20", -3.25), _tx("2024-05-30", 7.0)]
    assert summarize_by_week(txns, REF) == summarize_by_week(txns, REF)


def test_future_out_of_horizon_week_is_appended():
    txns = [_tx("2024-06-05", -600.0), _tx("2024-01-02", 5.0)]
    summary = summarize_by_week(txns, REF)

    assert len(summary) == 14
    starts = [date.fromisoformat(w.week_start) for w in summary]
    assert starts == sorted(starts)
    last = summary[-1]
    assert last.week_start == "2024-06-02"
    assert last.week_number == 14
    assert last.outflow == -600.0


def test_past_out_of_horizon_week_keeps_trailing_number_after_sort():
    summary = summarize_by_week([_tx("2023-12-20", 25.0)], REF)

    assert len(summary) == 14
    assert summary[0].week_start == "2023-12-17"
    assert summary[0].week_number == 14
    assert summary[0].inflow == 25.0
    assert [w.week_number for w in summary[1:]] == list(range(1, 14))


def test_extra_weeks_numbered_in_first_seen_order():
    txns = [_tx("2024-09-04", 1.0), _tx("2024-07-03", 1.0), _tx("2024-09-05", 1.0)]
    summary = summarize_by_week(txns, REF)

    by_start = {w.week_start: w for w in summary}
    assert by_start["2024-09-01"].week_number == 14
    assert by_start["2024-06-30"].week_number == 15
    assert by_start["2024-09-01"].inflow == 2.0
    assert summary[-2].week_start == "2024-06-30"


@pytest.mark.parametrize(
    "bad", ["", "   ", "not a date", "01/02/2024", "2024-02-30", "2024-13-01"]
)
def test_unusable_dates_are_skipped(bad):
    summary = summarize_by_week([_tx(bad, 99.0)], REF)
    assert len(summary) == 13
    assert all(w.inflow == 0 and w.outflow == 0 for w in summary)


def test_parse_txn_date_accepts_time_suffix():
    assert parse_txn_date("2024-01-02T10:15:00") == date(2024, 1, 2)
    assert parse_txn_date(" 2024-01-02 10:15 ") == date(2024, 1, 2)
    assert parse_txn_date("20240102") is None


def test_monday_convention_applies_to_seed_and_transactions():
    summary = summarize_by_week(
        [_tx("2024-01-07", 3.0)], REF, week_start=WeekStart.MONDAY
    )
    assert summary[0].week_start == "2024-01-01"
    # Sunday 2024-01-07 still belongs to the Monday 2024-01-01 week.
    assert summary[0].inflow == 3.0
    assert len(summary) == 13


def test_custom_horizon():
    assert len(summarize_by_week([], REF, horizon=4)) == 4


def test_fold_does_not_mutate_seed():
    seed = seed_buckets(REF)
    before = dict(seed)
    folded = fold_transactions(seed, [_tx("2024-01-02", 1.0), _tx("2025-01-01", -1.0)])

    assert seed == before
    assert len(seed) == 13
    assert len(folded) == 14
    assert folded[week_key(date(2024, 1, 2))] == WeeklyBucket(inflow=1.0, outflow=0.0)


def test_weekly_bucket_add_is_sign_routed():
    b = WeeklyBucket().add(10.0).add(-4.0).add(0.0)
    assert b == WeeklyBucket(inflow=10.0, outflow=-4.0)


def test_first_calendar_week_is_cut_short_at_date_min():
    # 0001-01-01 is a Monday; its Sunday lies before date.min.
    txns = [_tx("0001-01-01", 3.0), _tx("0001-01-09", 4.0)]
    summary = summarize_by_week(txns, date(1, 1, 1))

    assert len(summary) == 13
    assert [w.week_start for w in summary[:3]] == ["0001-01-01", "0001-01-07", "0001-01-14"]
    assert (summary[0].inflow, summary[1].inflow) == (3.0, 4.0)


def test_horizon_is_clipped_at_end_of_calendar(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="cashflow_forecast"):
        summary = summarize_by_week([], date(9999, 12, 20))

    assert [w.week_start for w in summary] == ["9999-12-19", "9999-12-26"]
    assert "clipped to 2 weeks" in caplog.text
