"""Aggregation, bucketing and summary tests."""
from datetime import date, timedelta

import pytest

from app.schemas.analytics import DataPoint, Summary
from app.services.analytics_errors import InvalidRequestError
from app.services.series import (
    DailyMetricRow,
    aggregate_rows,
    bucket_series,
    combine_summaries,
    percent_change,
    points_to_series,
    series_total,
    sum_rows,
    summarize,
    week_start,
)
from app.utils.helpers import round2


def d(value: str) -> date:
    return date.fromisoformat(value)


# --- aggregate_rows ---

def test_aggregate_sums_across_posts_per_date():
    rows = [
        DailyMetricRow(d("2024-03-01"), 10),
        DailyMetricRow(d("2024-03-01"), 5),
        DailyMetricRow(d("2024-03-02"), 7),
    ]
    assert aggregate_rows(rows) == {d("2024-03-01"): 15.0, d("2024-03-02"): 7.0}


def test_aggregate_null_counts_as_zero():
    rows = [DailyMetricRow(d("2024-03-01"), None), DailyMetricRow(d("2024-03-01"), 3)]
    assert aggregate_rows(rows) == {d("2024-03-01"): 3.0}


def test_aggregate_all_null_date_is_present_with_zero():
    assert aggregate_rows([DailyMetricRow(d("2024-03-01"), None)]) == {d("2024-03-01"): 0.0}


def test_aggregate_leaves_missing_dates_absent():
    series = aggregate_rows([DailyMetricRow(d("2024-03-01"), 1), DailyMetricRow(d("2024-03-03"), 1)])
    assert d("2024-03-02") not in series


def test_sum_rows_skips_nulls():
    assert sum_rows([DailyMetricRow(d("2024-03-01"), None), DailyMetricRow(d("2024-03-02"), 4)]) == 4


# --- bucket_series ---

def test_daily_sorted_and_rounded():
    series = {d("2024-03-02"): 1.005, d("2024-03-01"): 2.344}
    points = bucket_series(series, "daily")
    assert [p.date for p in points] == [d("2024-03-01"), d("2024-03-02")]
    assert [p.value for p in points] == [2.34, 1.01]


@pytest.mark.parametrize("day", ["2024-03-04", "2024-03-06", "2024-03-10"])
def test_week_start_is_monday(day):
    assert week_start(d(day)) == d("2024-03-04")


def test_week_start_crosses_month_boundary():
    # 2024-03-01 is a Friday
    assert week_start(d("2024-03-01")) == d("2024-02-26")


def test_weekly_bucket_example():
    series = {d("2024-03-05"): 10, d("2024-03-08"): 5}
    assert bucket_series(series, "weekly") == [DataPoint(date=d("2024-03-04"), value=15)]


def test_weekly_keeps_separate_weeks():
    series = {d("2024-03-10"): 1, d("2024-03-11"): 2}
    points = bucket_series(series, "weekly")
    assert [(p.date, p.value) for p in points] == [(d("2024-03-04"), 1), (d("2024-03-11"), 2)]


def test_monthly_bucket_example():
    series = {d("2024-03-15"): 4, d("2024-03-31"): 6, d("2024-04-01"): 1}
    points = bucket_series(series, "monthly")
    assert [(p.date, p.value) for p in points] == [(d("2024-03-01"), 10), (d("2024-04-01"), 1)]


def test_zero_bucket_kept_when_dates_contributed():
    points = bucket_series({d("2024-03-05"): 0.0}, "weekly")
    assert points == [DataPoint(date=d("2024-03-04"), value=0.0)]


def test_no_synthesized_buckets_for_gaps():
    series = {d("2024-01-15"): 1, d("2024-03-15"): 1}
    assert len(bucket_series(series, "monthly")) == 2


def test_empty_series():
    for granularity in ("daily", "weekly", "monthly"):
        assert bucket_series({}, granularity) == []


def test_unknown_granularity_rejected():
    with pytest.raises(InvalidRequestError):
        bucket_series({}, "quarterly")


def _sample_series() -> dict[date, float]:
    start = d("2024-01-29")
    return {start + timedelta(days=i): float((i * 7) % 11) + 0.25 for i in range(70)}


def test_bucketing_preserves_total_mass():
    series = _sample_series()
    daily = series_total(bucket_series(series, "daily"))
    weekly = series_total(bucket_series(series, "weekly"))
    monthly = series_total(bucket_series(series, "monthly"))
    assert daily == pytest.approx(sum(series.values()))
    assert weekly == pytest.approx(daily)
    assert monthly == pytest.approx(daily)


@pytest.mark.parametrize("granularity", ["daily", "weekly", "monthly"])
def test_bucketing_is_idempotent(granularity):
    once = bucket_series(_sample_series(), granularity)
    twice = bucket_series(points_to_series(once), granularity)
    assert twice == once


# --- rounding ---

@pytest.mark.parametrize(
    "value,expected",
    [(2.345, 2.35), (-2.345, -2.35), (0.125, 0.13), (1.0, 1.0), (10.004, 10.0)],
)
def test_round2_half_away_from_zero(value, expected):
    assert round2(value) == expected


# --- summaries ---

@pytest.mark.parametrize(
    "total,comp_total,expected",
    [(0, 0, 0), (50, 0, 100), (150, 100, 50.0), (50, 100, -50.0), (1, 3, -66.67)],
)
def test_percent_change_policy(total, comp_total, expected):
    assert percent_change(total, comp_total) == expected


def test_summarize_basic():
    points = [DataPoint(date=d("2024-03-01"), value=10), DataPoint(date=d("2024-03-02"), value=5)]
    summary = summarize(points, comparison_total=10)
    assert summary == Summary(total=15, average=7.5, change=50.0)


def test_summarize_empty_series():
    assert summarize([], comparison_total=0) == Summary(total=0, average=0, change=0)


def test_summarize_growth_from_zero():
    points = [DataPoint(date=d("2024-03-01"), value=50)]
    assert summarize(points, comparison_total=0).change == 100


def test_summarize_rate_metric_reports_average_as_total():
    points = [DataPoint(date=d("2024-03-01"), value=0.5), DataPoint(date=d("2024-03-02"), value=0.25)]
    summary = summarize(points, comparison_total=0.5, rate_metric=True)
    assert summary.total == 0.38
    assert summary.average == 0.38
    # change still compares the summed series
    assert summary.change == 50.0


def test_combine_summaries():
    combined = combine_summaries([
        Summary(total=100, average=10, change=25),
        Summary(total=50, average=5, change=-10),
        Summary(total=0, average=0, change=0),
    ])
    assert combined == Summary(total=150, average=5.0, change=0)


def test_combine_summaries_empty():
    assert combine_summaries([]) == Summary()
