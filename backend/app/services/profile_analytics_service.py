"""Profile-level analytics (followers, profile views, ...).

Produces the same current/comparison/summary shape as post metrics but reads
the profile tables. Content-type filters do not apply to profile metrics.
"""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.repositories import analytics_repository
from app.schemas.analytics import MetricQuery, ProfileSeriesResult, ProfileSummary
from app.services.date_range import DateRange
from app.services.fetch_guard import guarded_fetch
from app.services.metric_registry import MetricScope, MetricSpec
from app.services.series import aggregate_rows, bucket_series, sum_rows, summarize

logger = logging.getLogger(__name__)


class ProfileAnalyticsService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        fetch_timeout: float | None = None,
    ):
        self._session_factory = session_factory
        self._fetch_timeout = fetch_timeout

    async def query(
        self,
        spec: MetricSpec,
        query: MetricQuery,
        owner_id: uuid.UUID,
        date_range: DateRange,
    ) -> ProfileSeriesResult:
        if spec.scope != MetricScope.PROFILE:
            raise ValueError(f"{spec.name.value} is not a profile metric")

        label = f"profile {spec.name.value}"
        async with self._session_factory() as db:
            rows = await guarded_fetch(
                label,
                analytics_repository.fetch_profile_metric_rows(
                    db, user_id=owner_id, spec=spec, interval=date_range.current
                ),
                self._fetch_timeout,
            )
            comp_rows = await guarded_fetch(
                f"{label} (comparison)",
                analytics_repository.fetch_profile_metric_rows(
                    db, user_id=owner_id, spec=spec, interval=date_range.comparison
                ),
                self._fetch_timeout,
            )
            accumulative_total = await guarded_fetch(
                f"{label} (accumulative)",
                analytics_repository.get_latest_profile_total(db, user_id=owner_id, spec=spec),
                self._fetch_timeout,
            )

        current = bucket_series(aggregate_rows(rows), query.granularity)
        comp_series = aggregate_rows(comp_rows)
        # Comparison series is always daily for profile metrics.
        comparison = bucket_series(comp_series, "daily") if query.compare else None

        base = summarize(current, sum_rows(comp_rows))
        summary = ProfileSummary(
            **base.model_dump(),
            accumulative_total=accumulative_total,
            comp_count=len(comp_series),
        )
        logger.debug(
            "Profile metric %s for %s: %d points, comp_count=%d",
            spec.name.value, owner_id, len(current), summary.comp_count,
        )
        return ProfileSeriesResult(current=current, comparison=comparison, summary=summary)
