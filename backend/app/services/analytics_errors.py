"""Analytics error taxonomy.

Each error carries a machine-readable ``kind`` that the global handler
renders as the problem-details ``type``.
"""
from enum import Enum

from app.middleware.error_handler import AppException


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    FETCH_FAILED = "fetch_failed"
    PARTIAL_MULTI_METRIC_FAILURE = "partial_multi_metric_failure"
    CANCELLED = "cancelled"


class AnalyticsError(AppException):
    kind: ErrorKind = ErrorKind.FETCH_FAILED
    status_code_for_kind: int = 500
    title_for_kind: str = "Analytics Error"

    def __init__(self, detail: str):
        super().__init__(
            status_code=self.status_code_for_kind,
            detail=detail,
            error_type=self.kind.value,
            title=self.title_for_kind,
        )


class InvalidRequestError(AnalyticsError):
    """Rejected before any fetch is issued."""

    kind = ErrorKind.INVALID_REQUEST
    status_code_for_kind = 400
    title_for_kind = "Invalid Request"


class FetchFailedError(AnalyticsError):
    """Store I/O failed or timed out; the metric pipeline is aborted."""

    kind = ErrorKind.FETCH_FAILED
    status_code_for_kind = 502
    title_for_kind = "Fetch Failed"


class MultiMetricFailureError(AnalyticsError):
    kind = ErrorKind.PARTIAL_MULTI_METRIC_FAILURE
    status_code_for_kind = 502
    title_for_kind = "Multi-Metric Fetch Failed"

    def __init__(self, detail: str, failed_metrics: list[str]):
        super().__init__(detail)
        self.failed_metrics = failed_metrics


class RequestCancelledError(AnalyticsError):
    """Superseded by a newer request for the same query."""

    kind = ErrorKind.CANCELLED
    status_code_for_kind = 409
    title_for_kind = "Request Cancelled"
