from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
import sys
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_delay, wait_fixed

from pagetasks.cdp_client.transport import browser_version

logger = logging.getLogger(__name__)

LAUNCH_MODES = ("headless", "headed", "proxy")


def browser_flags(
    mode: str,
    port: int,
    user_data_dir: str | None = None,
    proxy: str | None = None,
) -> list[str]:
    if mode not in LAUNCH_MODES:
        raise ValueError(f"Unknown launch mode: {mode}")
    flags = [f"--remote-debugging-port={port}", "--no-sandbox", "--no-first-run"]
    if user_data_dir:
        flags.append(f"--user-data-dir={user_data_dir}")
    if mode == "headless":
        flags.extend(["--headless", "--disable-gpu"])
    elif mode == "proxy":
        if not proxy:
            raise ValueError("proxy mode requires a proxy server")
        flags.append(f"--proxy-server={proxy}")
    flags.append("about:blank")
    return flags


def resolve_browser_executable(configured: str | None = None) -> str:
    if configured and os.path.exists(configured):
        return configured

    for name in ("google-chrome", "google-chrome-stable", "chromium", "chromium-browser", "chrome"):
        resolved = shutil.which(name)
        if resolved:
            return resolved

    if sys.platform == "darwin":
        candidates = [
            "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
            "/Applications/Chromium.app/Contents/MacOS/Chromium",
        ]
    else:
        local_app_data = os.getenv("LOCALAPPDATA", "")
        program_files = os.getenv("ProgramFiles", "C:\\Program Files")
        program_files_x86 = os.getenv("ProgramFiles(x86)", "C:\\Program Files (x86)")
        candidates = [
            os.path.join(program_files, "Google", "Chrome", "Application", "chrome.exe"),
            os.path.join(program_files_x86, "Google", "Chrome", "Application", "chrome.exe"),
            os.path.join(local_app_data, "Google", "Chrome", "Application", "chrome.exe"),
        ]
    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            return candidate
    raise RuntimeError("Chrome executable not found. Set CHROME_PATH to the browser binary.")


class BrowserProcess:
    def __init__(self, executable: str, flags: list[str]) -> None:
        self.executable = executable
        self.flags = flags
        self._process: asyncio.subprocess.Process | None = None

    async def start(self) -> None:
        logger.info("Launching %s %s", self.executable, " ".join(self.flags))
        self._process = await asyncio.create_subprocess_exec(
            self.executable,
            *self.flags,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )

    async def stop(self) -> None:
        if self._process is None:
            return
        process = self._process
        if process.returncode is None:
            process.terminate()
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(process.wait(), timeout=5)
            if process.returncode is None:
                process.kill()
                with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                    await asyncio.wait_for(process.wait(), timeout=5)
        logger.info("Browser stopped (exit code %s)", process.returncode)
        self._process = None


async def wait_for_endpoint(host: str, port: int, timeout_seconds: float = 20.0) -> dict[str, Any]:
    """Wait until the browser's debugging endpoint answers ``/json/version``."""
    retrying = AsyncRetrying(
        stop=stop_after_delay(timeout_seconds),
        wait=wait_fixed(0.25),
        retry=retry_if_exception_type(httpx.HTTPError),
        reraise=True,
    )
    return await retrying(browser_version, host, port)
