from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from pagetasks.browser.devtools_adapter import DevToolsAdapter
from pagetasks.browser.launcher import BrowserProcess, browser_flags, resolve_browser_executable, wait_for_endpoint
from pagetasks.cdp_client.session import CdpSession
from pagetasks.cdp_client.transport import WebSocketTransport, discover_page_ws_url
from pagetasks.config import Settings
from pagetasks.tasks.context import TaskContext
from pagetasks.tasks.errors import PageTaskError
from pagetasks.tasks.extract import check_conn
from pagetasks.tasks.pipelines import string_from_page, strings_from_page

console = Console()
logger = logging.getLogger("pagetasks")

CHECK_CONN_TIMEOUT = 10


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Open a page in Chrome and evaluate a script against it")
    parser.add_argument("--url", required=True, help="Page to open")
    parser.add_argument("--script", required=True, help="Script whose completion value is the result")
    parser.add_argument(
        "--wait-for",
        action="append",
        default=[],
        metavar="SELECTOR",
        help="CSS selector that must become visible before extraction (repeatable)",
    )
    parser.add_argument("--list", action="store_true", help="Decode the result as a list of strings")
    parser.add_argument("--verbose", action="store_true", help="Print progress and debug logs")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace, settings: Settings) -> Any:
    browser: BrowserProcess | None = None
    session: CdpSession | None = None
    try:
        if settings.browser_mode != "attach":
            browser = BrowserProcess(
                resolve_browser_executable(settings.chrome_path),
                browser_flags(
                    settings.browser_mode,
                    settings.cdp_port,
                    user_data_dir=settings.user_data_dir,
                    proxy=settings.proxy_server,
                ),
            )
            await browser.start()
            await wait_for_endpoint(settings.cdp_host, settings.cdp_port)

        ws_url = await discover_page_ws_url(settings.cdp_host, settings.cdp_port)
        session = CdpSession(WebSocketTransport(ws_url), timeout_seconds=settings.command_timeout)
        await session.start()

        ctx = TaskContext(
            driver=DevToolsAdapter(session),
            timeout=settings.task_timeout,
            time_unit=settings.time_unit_seconds,
            console=console,
        )
        if not await check_conn(ctx.with_timeout(CHECK_CONN_TIMEOUT)):
            logger.warning("Browser reports it is offline")

        if args.list:
            return await strings_from_page(ctx, args.url, args.script, *args.wait_for)
        return await string_from_page(ctx, args.url, args.script, *args.wait_for)
    finally:
        if session is not None:
            with contextlib.suppress(Exception):
                await session.stop()
        if browser is not None:
            with contextlib.suppress(Exception):
                await browser.stop()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = _parse_args(argv)
    settings = Settings.from_env()
    verbose = args.verbose or settings.verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        result = asyncio.run(_run(args, settings))
    except PageTaskError as exc:
        console.print(f"Failed: {exc}", style="bold red", markup=False, highlight=False)
        return 1

    console.print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
