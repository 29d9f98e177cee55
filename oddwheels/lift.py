"""
Lift — helpers for lifting storage calls into Results.

Re-exports from combinators.lift with storefront-specific additions.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult

from combinators.lift import (
    pure,
    fail,
    catching_async,
)

from oddwheels._errors import PersistenceFailure


def persisting[T](
    what: str,
    action: Callable[[], Awaitable[T]],
) -> LazyCoroResult[T, PersistenceFailure]:
    """
    Run a storage call, turning any exception into PersistenceFailure.

    Example:
        await persisting("insert order", lambda: repo.insert_header(row))
    """
    return catching_async(
        action,
        on_error=lambda e: PersistenceFailure(f"Failed to {what}: {e}", e),
    )


__all__ = (
    "pure",
    "fail",
    "catching_async",
    "persisting",
)
