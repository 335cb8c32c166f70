"""Analytics business logic.

``MetricQueryEngine`` is the single entry point for metric queries. One
request flows through date-range resolution, the optional content-type
filter, the store reads, aggregation, bucketing and the summary. In "all"
mode the post-metric pipeline runs once per configured metric, concurrently,
and the results are merged only if every metric succeeded.
"""
import asyncio
import logging
import uuid
from collections.abc import Collection
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models.post import MediaType
from app.repositories import analytics_repository, post_repository
from app.schemas.analytics import (
    ALL_CONTENT_TYPES,
    GRANULARITIES,
    MetricCatalog,
    MetricQuery,
    MetricSeriesResult,
    MultiMetricResult,
    ProfileSeriesResult,
)
from app.services.analytics_errors import AnalyticsError, MultiMetricFailureError
from app.services.date_range import PERIODS, DateRange, resolve_date_range
from app.services.fetch_guard import guarded_fetch
from app.services.metric_registry import (
    ALL_METRICS_SENTINEL,
    DEFAULT_ALL_MODE_METRICS,
    POST_METRICS,
    PROFILE_METRICS,
    MetricName,
    MetricScope,
    MetricSpec,
    get_metric_spec,
    primary_metric_of,
)
from app.services.profile_analytics_service import ProfileAnalyticsService
from app.services.series import (
    aggregate_rows,
    bucket_series,
    combine_summaries,
    series_total,
    summarize,
    validate_granularity,
)

logger = logging.getLogger(__name__)

# None means "no content-type constraint"; an empty frozenset means nothing matched.
PostIdFilter = frozenset[uuid.UUID] | None


class MetricQueryEngine:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        all_mode_metrics: Collection[MetricName] = DEFAULT_ALL_MODE_METRICS,
        fetch_timeout: float | None = None,
        profile_service: ProfileAnalyticsService | None = None,
    ):
        metric_set = tuple(all_mode_metrics)
        if not metric_set:
            raise ValueError("all_mode_metrics must not be empty")
        for name in metric_set:
            if get_metric_spec(name).scope != MetricScope.POST:
                raise ValueError(f"All-mode metric must be a post metric: {name}")

        self._session_factory = session_factory
        self._fetch_timeout = fetch_timeout
        self.all_mode_metrics: tuple[MetricName, ...] = metric_set
        self.profile_service = profile_service or ProfileAnalyticsService(
            session_factory, fetch_timeout=fetch_timeout
        )

    # ── Entry point ──

    async def query(
        self,
        query: MetricQuery,
        owner_id: uuid.UUID,
        today: date,
    ) -> MetricSeriesResult | ProfileSeriesResult | MultiMetricResult:
        """Answer one metric query for ``owner_id`` as of ``today``.

        Validation (metric, granularity, period bounds) completes before any
        store read is issued.
        """
        if query.metric == ALL_METRICS_SENTINEL:
            return await self.query_all(query, owner_id, today)

        spec = get_metric_spec(query.metric)
        validate_granularity(query.granularity)
        date_range = resolve_date_range(query.period, query.start_date, query.end_date, today)

        if spec.scope == MetricScope.PROFILE:
            return await self.profile_service.query(spec, query, owner_id, date_range)

        post_ids = await self.resolve_content_filter(query.content_type, owner_id)
        if post_ids is not None and not post_ids:
            logger.info("Content type %r matched no posts for %s", query.content_type, owner_id)
            return MetricSeriesResult.empty()

        return await self.run_post_metric(spec, query, owner_id, date_range, post_ids)

    # ── Content filter ──

    async def resolve_content_filter(self, content_type: str | None, owner_id: uuid.UUID) -> PostIdFilter:
        if not content_type or content_type == ALL_CONTENT_TYPES:
            return None
        async with self._session_factory() as db:
            ids = await guarded_fetch(
                f"posts of type {content_type}",
                post_repository.list_ids_by_media_type(db, user_id=owner_id, media_type=content_type),
                self._fetch_timeout,
            )
        return frozenset(ids)

    # ── Single post metric ──

    async def run_post_metric(
        self,
        spec: MetricSpec,
        query: MetricQuery,
        owner_id: uuid.UUID,
        date_range: DateRange,
        post_ids: PostIdFilter,
    ) -> MetricSeriesResult:
        label = spec.name.value
        async with self._session_factory() as db:
            rows = await guarded_fetch(
                label,
                analytics_repository.fetch_post_metric_rows(
                    db, user_id=owner_id, spec=spec, interval=date_range.current, post_ids=post_ids
                ),
                self._fetch_timeout,
            )
            current = bucket_series(aggregate_rows(rows), query.granularity)

            comparison = None
            if query.compare:
                comp_rows = await guarded_fetch(
                    f"{label} (comparison)",
                    analytics_repository.fetch_post_metric_rows(
                        db, user_id=owner_id, spec=spec, interval=date_range.comparison, post_ids=post_ids
                    ),
                    self._fetch_timeout,
                )
                comparison = bucket_series(aggregate_rows(comp_rows), query.granularity)
                comp_total = series_total(comparison)
            else:
                comp_total = await guarded_fetch(
                    f"{label} (previous period)",
                    analytics_repository.sum_post_metric(
                        db, user_id=owner_id, spec=spec, interval=date_range.comparison, post_ids=post_ids
                    ),
                    self._fetch_timeout,
                )

        summary = summarize(current, comp_total, rate_metric=spec.is_rate)
        return MetricSeriesResult(current=current, comparison=comparison, summary=summary)

    # ── All mode ──

    async def query_all(self, query: MetricQuery, owner_id: uuid.UUID, today: date) -> MultiMetricResult:
        validate_granularity(query.granularity)
        date_range = resolve_date_range(query.period, query.start_date, query.end_date, today)
        primary = primary_metric_of(self.all_mode_metrics)

        post_ids = await self.resolve_content_filter(query.content_type, owner_id)
        if post_ids is not None and not post_ids:
            return MultiMetricResult(series={m.value: [] for m in self.all_mode_metrics})

        tasks: dict[MetricName, asyncio.Task[MetricSeriesResult]] = {}
        try:
            async with asyncio.TaskGroup() as tg:
                for name in self.all_mode_metrics:
                    tasks[name] = tg.create_task(
                        self.run_post_metric(get_metric_spec(name), query, owner_id, date_range, post_ids),
                        name=f"analytics:{name.value}",
                    )
        except ExceptionGroup as eg:
            _, unexpected = eg.split(AnalyticsError)
            if unexpected is not None:
                raise
            failed = [
                name.value
                for name, task in tasks.items()
                if task.done() and not task.cancelled() and task.exception() is not None
            ]
            logger.error("All-mode analytics failed for %s: %s", owner_id, ", ".join(failed))
            raise MultiMetricFailureError(
                f"Failed to fetch metrics: {', '.join(failed)}", failed_metrics=failed
            ) from eg

        results = {name: task.result() for name, task in tasks.items()}
        return MultiMetricResult(
            series={name.value: result.current for name, result in results.items()},
            current=results[primary].current,
            comparison=None,
            summary=combine_summaries([result.summary for result in results.values()]),
        )

    # ── Catalog ──

    def catalog(self) -> MetricCatalog:
        return MetricCatalog(
            post_metrics=[m.value for m in POST_METRICS],
            profile_metrics=[m.value for m in PROFILE_METRICS],
            all_mode_metrics=[m.value for m in self.all_mode_metrics],
            content_types=[ALL_CONTENT_TYPES] + [m.value for m in MediaType],
            periods=list(PERIODS),
            granularities=list(GRANULARITIES),
        )
