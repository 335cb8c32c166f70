"""Date range resolution tests."""
from datetime import date, timedelta

import pytest

from app.services.analytics_errors import ErrorKind, InvalidRequestError
from app.services.date_range import DateInterval, comparison_interval, resolve_date_range

TODAY = date(2024, 3, 31)


@pytest.mark.parametrize("period,days", [("7d", 7), ("30d", 30), ("90d", 90)])
def test_relative_periods(period, days):
    rng = resolve_date_range(period, None, None, TODAY)
    assert rng.current.end == TODAY
    assert rng.current.start == TODAY - timedelta(days=days)


def test_one_year_is_calendar_year():
    rng = resolve_date_range("1y", None, None, TODAY)
    assert rng.current.start == date(2023, 3, 31)


def test_one_year_from_leap_day():
    rng = resolve_date_range("1y", None, None, date(2024, 2, 29))
    assert rng.current.start == date(2023, 2, 28)


def test_unknown_period_defaults_to_30_days():
    rng = resolve_date_range("fortnight", None, None, TODAY)
    assert rng.current.start == TODAY - timedelta(days=30)


@pytest.mark.parametrize("period", ["7d", "30d", "90d", "1y"])
def test_comparison_is_adjacent_and_equal_length(period):
    rng = resolve_date_range(period, None, None, TODAY)
    assert rng.comparison.end == rng.current.start - timedelta(days=1)
    assert rng.comparison.length == rng.current.length
    assert rng.comparison.end < rng.current.start


def test_custom_period():
    rng = resolve_date_range("custom", "2024-03-01", "2024-03-10", TODAY)
    assert rng.current == DateInterval(date(2024, 3, 1), date(2024, 3, 10))
    assert rng.comparison == DateInterval(date(2024, 2, 20), date(2024, 2, 29))


def test_custom_single_day():
    rng = resolve_date_range("custom", "2024-03-05", "2024-03-05", TODAY)
    assert rng.comparison == DateInterval(date(2024, 3, 4), date(2024, 3, 4))


@pytest.mark.parametrize("start,end", [(None, "2024-03-10"), ("2024-03-01", None), (None, None), ("", "")])
def test_custom_requires_both_dates(start, end):
    with pytest.raises(InvalidRequestError) as exc_info:
        resolve_date_range("custom", start, end, TODAY)
    assert exc_info.value.kind == ErrorKind.INVALID_REQUEST
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("start", ["03/01/2024", "20240301", "2024-W10-1"])
def test_custom_rejects_non_calendar_dates(start):
    with pytest.raises(InvalidRequestError, match="startDate"):
        resolve_date_range("custom", start, "2024-03-10", TODAY)


def test_custom_rejects_inverted_range():
    with pytest.raises(InvalidRequestError):
        resolve_date_range("custom", "2024-03-10", "2024-03-01", TODAY)


def test_comparison_never_overlaps():
    current = DateInterval(date(2024, 1, 1), date(2024, 12, 31))
    comp = comparison_interval(current)
    assert comp.end < current.start
