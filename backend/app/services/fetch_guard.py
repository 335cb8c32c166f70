"""Timeout and error translation for store reads."""
import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.services.analytics_errors import FetchFailedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded_fetch(label: str, awaitable: Awaitable[T], timeout: float | None) -> T:
    """Await a store read under a timeout.

    Timeouts and store errors both surface as FetchFailedError. No retry is
    attempted here.
    """
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError as exc:
        logger.warning("Analytics fetch timed out after %ss: %s", timeout, label)
        raise FetchFailedError(f"Timed out fetching {label}") from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Analytics fetch failed: %s (%s)", label, exc)
        raise FetchFailedError(f"Failed to fetch {label}") from exc
