from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pagetasks.browser.actions import Sleep, Task
from pagetasks.tasks.context import TaskContext
from pagetasks.tasks.errors import PageTaskError, TaskTimeoutError

logger = logging.getLogger(__name__)

GuardedTask = Callable[[], Awaitable[list[Any]]]


async def run_task(ctx: TaskContext, task: Task) -> list[Any]:
    """Run actions in order; the first failure stops the task."""
    results: list[Any] = []
    for action in task:
        logger.debug("action %r", action)
        if isinstance(action, Sleep):
            await asyncio.sleep(ctx.seconds(action.units))
            results.append(None)
        else:
            results.append(await ctx.driver.perform(action))
    return results


def with_timeout(ctx: TaskContext, duration: float, task: Task) -> GuardedTask:
    """Bound the whole of ``task`` by a single deadline of ``duration`` units.

    The deadline never exceeds ``ctx.timeout``, so a child context with a
    shorter timeout is honoured.

    When the deadline expires the in-flight action is cancelled and
    :class:`TaskTimeoutError` is raised. Actions that already completed are
    not undone.
    """

    bound = min(duration, ctx.timeout)

    async def guarded() -> list[Any]:
        try:
            return await asyncio.wait_for(run_task(ctx, task), timeout=ctx.seconds(bound))
        except TimeoutError as exc:
            if isinstance(exc, PageTaskError):
                raise
            raise TaskTimeoutError(
                "RunWithTimeout", f"task did not finish within {bound:g} time units"
            ) from exc

    return guarded

