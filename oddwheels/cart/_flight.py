"""
Single-flight — concurrent callers share one in-flight operation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta


class SingleFlight[T]:
    """
    At most one operation runs at a time; callers arriving while it runs
    await the same result instead of starting another.

    Note: A caller that times out stops waiting, but the operation keeps
    running to completion.

    Example:
        flight: SingleFlight[int] = SingleFlight()
        a, b = await asyncio.gather(flight.run(work), flight.run(work))
        # work ran once; a == b
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[T] | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        timeout: timedelta | None = None,
    ) -> T:
        """Join or start the operation. Raises TimeoutError after ``timeout``."""
        if self._task is None or self._task.done():
            task: asyncio.Task[T] = asyncio.ensure_future(operation())
            self._task = task
            task.add_done_callback(self._release)

        shielded = asyncio.shield(self._task)
        if timeout is None:
            return await shielded
        return await asyncio.wait_for(shielded, timeout.total_seconds())

    def _release(self, task: asyncio.Task[T]) -> None:
        if self._task is task:
            self._task = None


__all__ = ("SingleFlight",)
