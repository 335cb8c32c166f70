"""Analytics data access layer.

Read-only queries over the daily analytics tables. Every query is scoped to
one owner and an inclusive date range.
"""
import uuid as _uuid
from collections.abc import Collection

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.analytics import (
    PostAnalyticsDaily,
    ProfileAnalyticsAccumulative,
    ProfileAnalyticsDaily,
)
from app.services.date_range import DateInterval
from app.services.metric_registry import MetricSpec
from app.services.series import DailyMetricRow


def _post_rows_query(
    user_id: _uuid.UUID,
    interval: DateInterval,
    post_ids: Collection[_uuid.UUID] | None,
    *columns,
) -> Select:
    q = select(*columns).where(
        PostAnalyticsDaily.user_id == user_id,
        PostAnalyticsDaily.analysis_date >= interval.start,
        PostAnalyticsDaily.analysis_date <= interval.end,
    )
    if post_ids is not None:
        q = q.where(PostAnalyticsDaily.post_id.in_(list(post_ids)))
    return q


async def fetch_post_metric_rows(
    db: AsyncSession,
    *,
    user_id: _uuid.UUID,
    spec: MetricSpec,
    interval: DateInterval,
    post_ids: Collection[_uuid.UUID] | None = None,
) -> list[DailyMetricRow]:
    """One row per (post, date) with the metric's value; None ids means unrestricted."""
    q = _post_rows_query(
        user_id, interval, post_ids, PostAnalyticsDaily.analysis_date, spec.column
    ).order_by(PostAnalyticsDaily.analysis_date.asc())
    result = await db.execute(q)
    return [DailyMetricRow(analysis_date=day, value=value) for day, value in result.all()]


async def sum_post_metric(
    db: AsyncSession,
    *,
    user_id: _uuid.UUID,
    spec: MetricSpec,
    interval: DateInterval,
    post_ids: Collection[_uuid.UUID] | None = None,
) -> float:
    """Sum of the metric over the interval; NULL values count as zero."""
    q = _post_rows_query(
        user_id, interval, post_ids, func.coalesce(func.sum(spec.column), 0)
    )
    return float((await db.execute(q)).scalar() or 0)


async def fetch_profile_metric_rows(
    db: AsyncSession,
    *,
    user_id: _uuid.UUID,
    spec: MetricSpec,
    interval: DateInterval,
) -> list[DailyMetricRow]:
    q = (
        select(ProfileAnalyticsDaily.analysis_date, spec.column)
        .where(
            ProfileAnalyticsDaily.user_id == user_id,
            ProfileAnalyticsDaily.analysis_date >= interval.start,
            ProfileAnalyticsDaily.analysis_date <= interval.end,
        )
        .order_by(ProfileAnalyticsDaily.analysis_date.asc())
    )
    result = await db.execute(q)
    return [DailyMetricRow(analysis_date=day, value=value) for day, value in result.all()]


async def get_latest_profile_total(
    db: AsyncSession,
    *,
    user_id: _uuid.UUID,
    spec: MetricSpec,
) -> float:
    """Most recent accumulative total for a profile metric, 0 when none recorded."""
    value = (
        await db.execute(
            select(spec.accumulative_column)
            .where(ProfileAnalyticsAccumulative.user_id == user_id)
            .order_by(ProfileAnalyticsAccumulative.analysis_date.desc())
            .limit(1)
        )
    ).scalar_one_or_none()
    return float(value or 0)
