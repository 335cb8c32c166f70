"""Analytics request/response schemas."""
from datetime import date
from typing import Literal

from pydantic import BaseModel

Granularity = Literal["daily", "weekly", "monthly"]
GRANULARITIES: tuple[str, ...] = ("daily", "weekly", "monthly")

ALL_CONTENT_TYPES = "all"


class MetricQuery(BaseModel):
    """One logical analytics request, already authenticated."""

    metric: str = "impressions"
    period: str = "30d"
    start_date: str | None = None
    end_date: str | None = None
    content_type: str = ALL_CONTENT_TYPES
    compare: bool = False
    granularity: str = "daily"

    model_config = {"frozen": True}


class DataPoint(BaseModel):
    date: date
    value: float


class Summary(BaseModel):
    total: float = 0.0
    average: float = 0.0
    change: float = 0.0


class ProfileSummary(Summary):
    accumulative_total: float = 0.0
    comp_count: int = 0


class MetricSeriesResult(BaseModel):
    current: list[DataPoint] = []
    comparison: list[DataPoint] | None = None
    summary: Summary = Summary()

    @classmethod
    def empty(cls) -> "MetricSeriesResult":
        return cls(current=[], comparison=None, summary=Summary())


class ProfileSeriesResult(MetricSeriesResult):
    summary: ProfileSummary = ProfileSummary()


class MultiMetricResult(BaseModel):
    series: dict[str, list[DataPoint]]
    current: list[DataPoint] = []
    comparison: list[DataPoint] | None = None
    summary: Summary = Summary()


class MetricCatalog(BaseModel):
    post_metrics: list[str]
    profile_metrics: list[str]
    all_mode_metrics: list[str]
    content_types: list[str]
    periods: list[str]
    granularities: list[str]
