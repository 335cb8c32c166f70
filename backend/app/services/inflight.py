"""Supersede-on-reissue tracking for in-flight analytics requests."""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import TypeVar

from app.services.analytics_errors import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightRequests:
    """Run at most one task per key; a newer request cancels the older one.

    The superseded caller receives RequestCancelledError. A caller that is
    itself cancelled sees CancelledError, and its task is cancelled with it,
    which cancels every fetch still outstanding underneath.
    """

    def __init__(self):
        self._tasks: dict[Hashable, asyncio.Task] = {}

    def is_running(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        if self.is_running(key):
            logger.info("Superseding in-flight analytics request %s", key)
            self._tasks[key].cancel()

        task = asyncio.ensure_future(factory())
        self._tasks[key] = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise RequestCancelledError("Request was superseded by a newer request for the same query")
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]


in_flight_requests = InFlightRequests()
