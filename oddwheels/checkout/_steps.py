"""
Compensated steps — run actions in order, undo the finished ones on failure.

    flow = (
        step(save_header, compensate=lambda order: drop_header(order.id))
        .then(lambda order: step(save_items(order), compensate=drop_items))
    )

    match await run(flow):
        case Ok(done):
            done.value
        case Error(failed):
            failed.error, failed.rollback_complete
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from kungfu import Result, Ok, Error, LazyCoroResult

logger = logging.getLogger(__name__)

type Compensator[T] = Callable[[T], Awaitable[None]]
"""Receives the step's value and undoes it."""


# ═══════════════════════════════════════════════════════════════════════════════
# Step AST
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Step[T, E]:
    """
    One action plus its undo.

    The compensator is recorded only once the action succeeds.
    """

    action: LazyCoroResult[T, E]
    compensate: Compensator[T] | None = None
    name: str = "step"

    def then[U, E2](self, f: Callable[[T], Step[U, E2]]) -> Then[T, U, E, E2]:
        return Then(self, f)


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """Sequential composition: f sees the value of inner."""

    inner: Step[T, E] | Then[Any, T, Any, E]
    f: Callable[[T], Step[U, E2]]

    def then[V, E3](self, g: Callable[[U], Step[V, E3]]) -> Then[U, V, E | E2, E3]:
        return Then(self, g)


type Flow[T, E] = Step[T, E] | Then[Any, T, Any, E]


@dataclass(frozen=True, slots=True)
class Completed[T]:
    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class Failed[E]:
    """A step failed. Every finished step was compensated, newest first."""

    error: E
    step_failed: str
    compensators_run: int
    compensators_failed: int

    @property
    def rollback_complete(self) -> bool:
        return self.compensators_failed == 0


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T] | None = None,
    name: str = "step",
) -> Step[T, E]:
    return Step(action=action, compensate=compensate, name=name)


# ═══════════════════════════════════════════════════════════════════════════════
# Execution
# ═══════════════════════════════════════════════════════════════════════════════

type Recorded = tuple[str, Any, Compensator[Any]]


@dataclass(slots=True)
class _Trace:
    recorded: list[Recorded]
    executed: int = 0
    failed_at: str = ""


async def _run_flow(flow: Flow[Any, Any], trace: _Trace) -> Result[Any, Any]:
    match flow:
        case Step(action=action, compensate=compensate, name=name):
            trace.executed += 1
            result = await action
            match result:
                case Ok(value):
                    if compensate is not None:
                        trace.recorded.append((name, value, compensate))
                case Error(_):
                    trace.failed_at = name
            return result

        case Then(inner=inner, f=f):
            match await _run_flow(inner, trace):
                case Ok(value):
                    return await _run_flow(f(value), trace)
                case failure:
                    return failure

    raise TypeError(f"Not a step flow: {flow!r}")


async def _compensate(recorded: list[Recorded]) -> tuple[int, int]:
    """Run compensators newest first. Returns (run, failed)."""
    run_count = 0
    failed = 0
    for name, value, undo in reversed(recorded):
        try:
            await undo(value)
            run_count += 1
        except Exception:
            logger.exception("Compensating %s failed", name)
            failed += 1
    return run_count, failed


async def run[T, E](flow: Flow[T, E]) -> Result[Completed[T], Failed[E]]:
    trace = _Trace(recorded=[])

    match await _run_flow(flow, trace):
        case Ok(value):
            return Ok(Completed(
                value=value,
                steps_executed=trace.executed,
                compensators_recorded=len(trace.recorded),
            ))
        case Error(error):
            comp_run, comp_failed = await _compensate(trace.recorded)
            return Error(Failed(
                error=error,
                step_failed=trace.failed_at,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
            ))


__all__ = (
    "Compensator",
    "Step",
    "Then",
    "Flow",
    "Completed",
    "Failed",
    "step",
    "run",
)
