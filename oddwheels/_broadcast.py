"""
Broadcast — fire-and-forget fan-out to async listeners.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable

logger = logging.getLogger(__name__)

type Listener[E] = Callable[[E], Awaitable[None]]


class Broadcast[E]:
    """
    Listeners run as tasks; publish never waits for them.

    A listener registered under a key is skipped when an event is
    published with the same key as ``skip``, so a sender does not hear
    its own events.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, tuple[Hashable | None, Listener[E]]] = {}
        self._next_token = 0
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(
        self,
        listener: Listener[E],
        key: Hashable | None = None,
    ) -> Callable[[], None]:
        """Register listener. Returns an unsubscribe function."""
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = (key, listener)

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def publish(self, event: E, skip: Hashable | None = None) -> int:
        """Schedule delivery to every listener not keyed ``skip``. Returns count."""
        delivered = 0
        for key, listener in list(self._listeners.values()):
            if skip is not None and key == skip:
                continue
            task = asyncio.ensure_future(self._deliver(listener, event))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            delivered += 1
        return delivered

    async def drain(self) -> None:
        """Wait until every delivery scheduled so far has finished."""
        while pending := [t for t in self._pending if not t.done()]:
            await asyncio.gather(*pending)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @staticmethod
    async def _deliver(listener: Listener[E], event: E) -> None:
        try:
            await listener(event)
        except Exception:
            logger.exception("Listener failed for %r", event)


__all__ = ("Broadcast", "Listener")
