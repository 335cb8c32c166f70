"""Period and comparison window resolution."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from app.services.analytics_errors import InvalidRequestError

logger = logging.getLogger(__name__)

CUSTOM_PERIOD = "custom"
DEFAULT_PERIOD_DAYS = 30

_PERIOD_DAYS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
PERIODS: tuple[str, ...] = ("7d", "30d", "90d", "1y", CUSTOM_PERIOD)


@dataclass(frozen=True)
class DateInterval:
    """Inclusive calendar-date interval."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidRequestError(
                f"start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    @property
    def length(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class DateRange:
    current: DateInterval
    comparison: DateInterval


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        # Feb 29 -> Feb 28
        return day.replace(year=day.year - 1, day=28)


def period_start(period: str, today: date) -> date:
    if period == "1y":
        return _one_year_before(today)
    days = _PERIOD_DAYS.get(period)
    if days is None:
        logger.debug("Unknown period %r, falling back to %d days", period, DEFAULT_PERIOD_DAYS)
        days = DEFAULT_PERIOD_DAYS
    return today - timedelta(days=days)


def parse_iso_date(value: str, field: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidRequestError(f"{field} must be a YYYY-MM-DD date, got {value!r}")


def comparison_interval(current: DateInterval) -> DateInterval:
    """Equal-length window ending the day before ``current`` starts."""
    comp_end = current.start - timedelta(days=1)
    return DateInterval(start=comp_end - current.length, end=comp_end)


def resolve_date_range(
    period: str,
    custom_start: str | None,
    custom_end: str | None,
    today: date,
) -> DateRange:
    """Resolve a period token (or custom bounds) into current and comparison intervals."""
    if period == CUSTOM_PERIOD:
        if not custom_start or not custom_end:
            raise InvalidRequestError("startDate and endDate are required for custom period")
        current = DateInterval(
            start=parse_iso_date(custom_start, "startDate"),
            end=parse_iso_date(custom_end, "endDate"),
        )
    else:
        current = DateInterval(start=period_start(period, today), end=today)

    return DateRange(current=current, comparison=comparison_interval(current))
