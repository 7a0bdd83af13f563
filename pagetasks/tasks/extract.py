"""Typed extraction functions.

Each function builds a task, runs it under the context deadline and decodes
the evaluation result. Failures are re-raised tagged with the function's own
operation name, chained to the underlying error.
"""

from __future__ import annotations

import io
from typing import Any

from pagetasks.browser.actions import Task
from pagetasks.tasks import composer
from pagetasks.tasks.context import TaskContext
from pagetasks.tasks.errors import DecodeMismatch, PageTaskError
from pagetasks.tasks.guard import with_timeout
from pagetasks.tasks.progress import Progress


async def _run(operation: str, ctx: TaskContext, task: Task) -> Any:
    try:
        results = await with_timeout(ctx, ctx.timeout, task)()
    except PageTaskError as exc:
        raise exc.wrap(operation) from exc
    return results[-1] if results else None


def _describe(value: Any) -> str:
    text = repr(value)
    return text if len(text) <= 200 else text[:197] + "..."


def decode_string(operation: str, raw: Any) -> str:
    if not isinstance(raw, str):
        raise DecodeMismatch(operation, f"expected a string, got {_describe(raw)}")
    return raw


def decode_strings(operation: str, raw: Any) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise DecodeMismatch(operation, f"expected a list of strings, got {_describe(raw)}")
    return raw


def decode_bool(operation: str, raw: Any) -> bool:
    if not isinstance(raw, bool):
        raise DecodeMismatch(operation, f"expected a boolean, got {_describe(raw)}")
    return raw


async def check_conn(ctx: TaskContext) -> bool:
    raw = await _run("CheckConn", ctx, composer.check_connection())
    return decode_bool("CheckConn", raw)


async def open_url(ctx: TaskContext, url: str, verbose: bool = False) -> None:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Opening page url {url} - ")
    raw = await _run("OpenURL", ctx, composer.open_url(url))
    decode_string("OpenURL", raw)
    progress.done("Ok!.")


async def reload(ctx: TaskContext) -> None:
    await _run("Reload", ctx, composer.reload())


async def wait_visible(ctx: TaskContext, selector: str, verbose: bool = False) -> None:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Wait visible css:' {selector} ' - ")
    await _run("WaitVisible", ctx, composer.wait_visible(selector))
    progress.done("Ok!.")


async def wait_ready(ctx: TaskContext, selector: str, verbose: bool = False) -> None:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Wait ready css:' {selector} ' - ")
    await _run("WaitReady", ctx, composer.wait_ready(selector))
    progress.done("Ok!.")


async def get_string(ctx: TaskContext, js: str, verbose: bool = False) -> str:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Getting a string ' {js}  ' - ")
    raw = await _run("GetString", ctx, composer.get_string(js))
    value = decode_string("GetString", raw)
    progress.done()
    return value


async def get_strings(ctx: TaskContext, js: str, verbose: bool = False) -> list[str]:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Getting a strings slice ' {js}  ' - ")
    raw = await _run("GetStringsSlice", ctx, composer.get_strings(js))
    value = decode_strings("GetStringsSlice", raw)
    progress.done()
    return value


async def get_reader(ctx: TaskContext, js: str, verbose: bool = False) -> io.StringIO:
    """Like :func:`get_string`, but hands the text back as a seekable stream."""
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Getting a string ' {js}  ' - ")
    raw = await _run("GetReader", ctx, composer.get_string(js))
    value = decode_string("GetReader", raw)
    progress.done()
    return io.StringIO(value)


async def get_bool(ctx: TaskContext, js: str, verbose: bool = False) -> bool:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Getting a bool ' {js}  ' - ")
    raw = await _run("GetBool", ctx, composer.get_bool(js))
    value = decode_bool("GetBool", raw)
    progress.done()
    return value


async def click(ctx: TaskContext, selector: str, verbose: bool = False) -> None:
    """Wait for ``selector`` to become visible, then click it.

    The click task is never started when the visibility wait fails.
    """
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Click selector: ' {selector} '  - ")
    await _run("wait visible in Click", ctx, composer.wait_visible(selector))
    await _run("click in Click", ctx, composer.click(selector))
    progress.done()


async def set_input_value(ctx: TaskContext, selector: str, value: str, verbose: bool = False) -> None:
    progress = Progress(ctx.console, verbose)
    progress.begin(f"Setting an input >>>{selector}<<< value - >>>{value}<<<")
    raw = await _run("SetInputValue", ctx, composer.set_input_value(selector, value))
    decode_string("SetInputValue", raw)
    progress.done()
