from __future__ import annotations

from pagetasks.tasks.context import TaskContext, settle
from pagetasks.tasks.errors import PageTaskError
from pagetasks.tasks.extract import get_string, get_strings, open_url, wait_visible
from pagetasks.tasks.readiness import wait_loaded

PAGE_SETTLE = 3


async def _load(ctx: TaskContext, url: str, wait_for: tuple[str, ...]) -> None:
    await open_url(ctx, url)
    if not wait_for:
        await wait_loaded(ctx)
    else:
        for selector in wait_for:
            await wait_visible(ctx, selector)
    # Scripted pages keep changing after the DOM reports ready.
    await settle(ctx, PAGE_SETTLE)


async def _parse_page(ctx: TaskContext, js: str) -> list[str]:
    try:
        return await get_strings(ctx, js)
    except PageTaskError as exc:
        raise exc.wrap("parsePage") from exc


async def _parse_str_page(ctx: TaskContext, js: str) -> str:
    try:
        return await get_string(ctx, js)
    except PageTaskError as exc:
        raise exc.wrap("parseStrPage") from exc


async def strings_from_page(ctx: TaskContext, url: str, js: str, *wait_for: str) -> list[str]:
    """Open ``url``, wait for it, and evaluate ``js`` to a list of strings.

    With no ``wait_for`` selectors the page is polled until loaded; otherwise
    each selector must become visible, in order.
    """
    try:
        await _load(ctx, url, wait_for)
        return await _parse_page(ctx, js)
    except PageTaskError as exc:
        raise exc.wrap("StringSliceFromPage") from exc


async def string_from_page(ctx: TaskContext, url: str, js: str, *wait_for: str) -> str:
    """Open ``url``, wait for it, and evaluate ``js`` to a string."""
    try:
        await _load(ctx, url, wait_for)
        return await _parse_str_page(ctx, js)
    except PageTaskError as exc:
        raise exc.wrap("StringFromPage") from exc
