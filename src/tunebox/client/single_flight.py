"""Coalesce concurrent calls into one shared in-flight operation."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _consume_exception(task: asyncio.Task) -> None:
    # Waiters may all have been cancelled; mark the error as retrieved
    if not task.cancelled():
        task.exception()


class SingleFlight(Generic[T]):
    """Run at most one instance of an async operation at a time.

    The first caller starts the operation as a task; every caller that
    arrives while it is pending awaits that same task and receives the
    same result or the same exception. Once the task settles it is
    discarded, so the next call starts a fresh operation.

    Waiters await the task through ``asyncio.shield``: cancelling one
    waiter never cancels the shared operation.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[T] | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Join the pending operation or start a new one with ``fn``."""
        if self._task is None or self._task.done():
            self._task = asyncio.ensure_future(self._execute(fn))
            self._task.add_done_callback(_consume_exception)
        else:
            logger.debug("Joining in-flight operation")
        return await asyncio.shield(self._task)

    async def _execute(self, fn: Callable[[], Awaitable[T]]) -> T:
        try:
            return await fn()
        finally:
            self._task = None
