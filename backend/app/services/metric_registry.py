"""Typed metric registry.

Maps every metric name the API accepts to the ORM column it is read from,
so column selection happens once at the request boundary.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any

from app.models.analytics import (
    PostAnalyticsDaily,
    ProfileAnalyticsAccumulative,
    ProfileAnalyticsDaily,
)
from app.services.analytics_errors import InvalidRequestError

ALL_METRICS_SENTINEL = "all"


class MetricName(str, Enum):
    IMPRESSIONS = "impressions"
    UNIQUE_REACH = "unique_reach"
    REACTIONS = "reactions"
    COMMENTS = "comments"
    REPOSTS = "reposts"
    SAVES = "saves"
    SENDS = "sends"
    ENGAGEMENTS = "engagements"
    ENGAGEMENTS_RATE = "engagements_rate"
    # Profile-level
    FOLLOWERS = "followers"
    PROFILE_VIEWS = "profile_views"
    SEARCH_APPEARANCES = "search_appearances"
    CONNECTIONS = "connections"


class MetricScope(str, Enum):
    POST = "post"
    PROFILE = "profile"


@dataclass(frozen=True)
class MetricSpec:
    name: MetricName
    scope: MetricScope
    column: Any
    accumulative_column: Any = None
    # Ratio metrics are summed per day like the others but report
    # total = average. Do not extend this to new ratio metrics.
    is_rate: bool = False


def _post(name: MetricName, column: Any, is_rate: bool = False) -> MetricSpec:
    return MetricSpec(name=name, scope=MetricScope.POST, column=column, is_rate=is_rate)


def _profile(name: MetricName, column: Any, accumulative_column: Any) -> MetricSpec:
    return MetricSpec(
        name=name,
        scope=MetricScope.PROFILE,
        column=column,
        accumulative_column=accumulative_column,
    )


METRIC_REGISTRY: dict[MetricName, MetricSpec] = {
    spec.name: spec
    for spec in (
        _post(MetricName.IMPRESSIONS, PostAnalyticsDaily.impressions_gained),
        _post(MetricName.UNIQUE_REACH, PostAnalyticsDaily.unique_reach_gained),
        _post(MetricName.REACTIONS, PostAnalyticsDaily.reactions_gained),
        _post(MetricName.COMMENTS, PostAnalyticsDaily.comments_gained),
        _post(MetricName.REPOSTS, PostAnalyticsDaily.reposts_gained),
        _post(MetricName.SAVES, PostAnalyticsDaily.saves_gained),
        _post(MetricName.SENDS, PostAnalyticsDaily.sends_gained),
        _post(MetricName.ENGAGEMENTS, PostAnalyticsDaily.engagements_gained),
        _post(MetricName.ENGAGEMENTS_RATE, PostAnalyticsDaily.engagements_rate, is_rate=True),
        _profile(
            MetricName.FOLLOWERS,
            ProfileAnalyticsDaily.followers_gained,
            ProfileAnalyticsAccumulative.followers_total,
        ),
        _profile(
            MetricName.PROFILE_VIEWS,
            ProfileAnalyticsDaily.profile_views_gained,
            ProfileAnalyticsAccumulative.profile_views_total,
        ),
        _profile(
            MetricName.SEARCH_APPEARANCES,
            ProfileAnalyticsDaily.search_appearances_gained,
            ProfileAnalyticsAccumulative.search_appearances_total,
        ),
        _profile(
            MetricName.CONNECTIONS,
            ProfileAnalyticsDaily.connections_gained,
            ProfileAnalyticsAccumulative.connections_total,
        ),
    )
}

POST_METRICS: tuple[MetricName, ...] = tuple(
    name for name, spec in METRIC_REGISTRY.items() if spec.scope == MetricScope.POST
)
PROFILE_METRICS: tuple[MetricName, ...] = tuple(
    name for name, spec in METRIC_REGISTRY.items() if spec.scope == MetricScope.PROFILE
)

DEFAULT_ALL_MODE_METRICS: tuple[MetricName, ...] = (
    MetricName.IMPRESSIONS,
    MetricName.REACTIONS,
    MetricName.COMMENTS,
    MetricName.REPOSTS,
    MetricName.ENGAGEMENTS,
)
PRIMARY_METRIC = MetricName.IMPRESSIONS


def get_metric_spec(name: str | MetricName) -> MetricSpec:
    """Resolve a metric name to its spec or raise InvalidRequestError."""
    try:
        return METRIC_REGISTRY[MetricName(name)]
    except ValueError:
        raise InvalidRequestError(f"Invalid metric: {name}")


def parse_metric_set(raw: str) -> tuple[MetricName, ...]:
    """Parse a comma-separated all-mode metric list.

    Only post metrics can be fanned out; duplicates are dropped keeping
    first occurrence.
    """
    names: list[MetricName] = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        spec = get_metric_spec(token)
        if spec.scope != MetricScope.POST:
            raise InvalidRequestError(f"All-mode metric must be a post metric: {token}")
        if spec.name not in names:
            names.append(spec.name)
    if not names:
        raise InvalidRequestError("All-mode metric set is empty")
    return tuple(names)


def primary_metric_of(metric_set: tuple[MetricName, ...]) -> MetricName:
    return PRIMARY_METRIC if PRIMARY_METRIC in metric_set else metric_set[0]
