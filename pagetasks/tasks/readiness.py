from __future__ import annotations

import logging

from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_attempt, wait_fixed

from pagetasks.tasks.context import TaskContext
from pagetasks.tasks.errors import PageTaskError, TaskTimeoutError
from pagetasks.tasks.extract import get_bool
from pagetasks.tasks.progress import Progress

logger = logging.getLogger(__name__)

LOADING_SCRIPT = "document.readyState !== 'ready' && document.readyState !== 'complete'"
MAX_POLLS = 61
POLL_INTERVAL = 1


async def wait_loaded(ctx: TaskContext, verbose: bool = False) -> None:
    """Poll ``document.readyState`` until the page reports it has loaded.

    Gives up with :class:`TaskTimeoutError` after ``MAX_POLLS`` evaluations.
    Evaluation failures are not retried.
    """
    progress = Progress(ctx.console, verbose)
    progress.begin("Wait")
    retrying = AsyncRetrying(
        stop=stop_after_attempt(MAX_POLLS),
        wait=wait_fixed(ctx.seconds(POLL_INTERVAL)),
        retry=retry_if_result(lambda loading: loading is True),
        before_sleep=lambda state: progress.tick(),
    )
    try:
        await retrying(get_bool, ctx, LOADING_SCRIPT)
    except RetryError as exc:
        progress.done("")
        raise TaskTimeoutError(
            "WaitLoaded", f"page still loading after {MAX_POLLS} polls"
        ) from exc
    except PageTaskError as exc:
        progress.done("")
        raise exc.wrap("WaitLoaded") from exc
    logger.debug("page loaded")
    progress.done("")
