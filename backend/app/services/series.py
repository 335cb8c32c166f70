"""Pure series transforms: aggregation, granularity bucketing, summaries.

Nothing here performs I/O. Absent or NULL values always count as zero;
dates without rows are left out of a series rather than filled with zero.
"""
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import NamedTuple

from app.schemas.analytics import GRANULARITIES, DataPoint, Granularity, Summary
from app.services.analytics_errors import InvalidRequestError
from app.utils.helpers import round2

DateSeries = dict[date, float]


class DailyMetricRow(NamedTuple):
    analysis_date: date
    value: float | None


# ── Aggregation ─────────────────────────────────────────────────────────

def aggregate_rows(rows: Iterable[DailyMetricRow]) -> DateSeries:
    """Sum per-post rows into one value per date."""
    series: DateSeries = defaultdict(float)
    for row in rows:
        series[row.analysis_date] += row.value if row.value is not None else 0.0
    return dict(series)


def sum_rows(rows: Iterable[DailyMetricRow]) -> float:
    return sum(row.value for row in rows if row.value is not None)


# ── Bucketing ───────────────────────────────────────────────────────────

def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    sunday_based = day.isoweekday() % 7  # 0=Sunday .. 6=Saturday
    offset = (sunday_based + 6) % 7
    return day - timedelta(days=offset)


def month_start(day: date) -> date:
    return day.replace(day=1)


def validate_granularity(granularity: str) -> Granularity:
    if granularity not in GRANULARITIES:
        raise InvalidRequestError(f"Invalid granularity: {granularity}")
    return granularity  # type: ignore[return-value]


def bucket_series(series: DateSeries, granularity: str) -> list[DataPoint]:
    """Re-key a daily series by granularity and sum colliding buckets.

    Output is sorted by date and rounded to 2 decimals. Only buckets with
    at least one contributing date are emitted.
    """
    granularity = validate_granularity(granularity)
    if granularity == "daily":
        buckets: DateSeries = dict(series)
    else:
        key = week_start if granularity == "weekly" else month_start
        buckets = defaultdict(float)
        for day, value in series.items():
            buckets[key(day)] += value

    return [DataPoint(date=day, value=round2(value)) for day, value in sorted(buckets.items())]


def points_to_series(points: Iterable[DataPoint]) -> DateSeries:
    return {p.date: p.value for p in points}


def series_total(points: Iterable[DataPoint]) -> float:
    return sum(p.value for p in points)


# ── Summaries ───────────────────────────────────────────────────────────

def percent_change(total: float, comparison_total: float) -> float:
    """Change versus a baseline; growth from a zero baseline is reported as 100."""
    if comparison_total > 0:
        change = (total - comparison_total) / comparison_total * 100
    elif total > 0:
        change = 100.0
    else:
        change = 0.0
    return round2(change)


def summarize(
    points: Sequence[DataPoint],
    comparison_total: float,
    rate_metric: bool = False,
) -> Summary:
    """Total, average and change for an already-bucketed series.

    For a rate metric the reported total is the average; change is still
    computed from the summed series.
    """
    total = series_total(points)
    average = total / len(points) if points else 0.0
    change = percent_change(total, comparison_total)
    return Summary(
        total=round2(average if rate_metric else total),
        average=round2(average),
        change=change,
    )


def combine_summaries(summaries: Sequence[Summary]) -> Summary:
    """Merge per-metric summaries: totals summed, averages averaged, change 0."""
    if not summaries:
        return Summary()
    return Summary(
        total=round2(sum(s.total for s in summaries)),
        average=round2(sum(s.average for s in summaries) / len(summaries)),
        change=0.0,
    )
