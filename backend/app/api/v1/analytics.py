"""Analytics API - metric series and catalog."""
from fastapi import APIRouter, Depends, Query

from app.dependencies import get_current_user, get_query_engine
from app.models.user import User
from app.schemas.analytics import MetricQuery
from app.schemas.common import APIResponse, ErrorDetail
from app.services.analytics_service import MetricQueryEngine
from app.services.inflight import in_flight_requests
from app.utils.helpers import fingerprint, utc_now

router = APIRouter()


_ERROR_RESPONSES = {
    400: {"model": ErrorDetail, "description": "Invalid metric, period bounds or granularity"},
    409: {"model": ErrorDetail, "description": "Superseded by a newer identical request"},
    502: {"model": ErrorDetail, "description": "Store read failed or timed out"},
}


# GET /analytics/metrics
@router.get("/metrics", response_model=APIResponse, responses=_ERROR_RESPONSES)
async def get_metrics(
    metric: str = Query("impressions", description="Post metric, profile metric, or 'all'"),
    period: str = Query("30d", description="7d, 30d, 90d, 1y or custom"),
    start_date: str | None = Query(None, alias="startDate", description="YYYY-MM-DD, required for custom period"),
    end_date: str | None = Query(None, alias="endDate", description="YYYY-MM-DD, required for custom period"),
    content_type: str = Query("all", alias="contentType", description="Post media type or 'all'"),
    compare: bool = Query(False, description="Include the comparison series"),
    granularity: str = Query("daily", description="daily, weekly or monthly"),
    current_user: User = Depends(get_current_user),
    engine: MetricQueryEngine = Depends(get_query_engine),
):
    query = MetricQuery(
        metric=metric,
        period=period,
        start_date=start_date,
        end_date=end_date,
        content_type=content_type,
        compare=compare,
        granularity=granularity,
    )
    owner_id = current_user.id
    today = utc_now().date()

    # A re-issued identical query cancels the one still in flight.
    key = (str(owner_id), fingerprint(query.model_dump()))
    result = await in_flight_requests.run(key, lambda: engine.query(query, owner_id, today))
    return APIResponse(status="success", data=result.model_dump(mode="json"))


# GET /analytics/metrics/catalog
@router.get("/metrics/catalog", response_model=APIResponse)
async def get_metric_catalog(
    _current_user: User = Depends(get_current_user),
    engine: MetricQueryEngine = Depends(get_query_engine),
):
    return APIResponse(status="success", data=engine.catalog().model_dump())
