from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from pagetasks.browser.actions import (
    Action,
    Click,
    EvaluateScript,
    Navigate,
    Reload,
    Sleep,
    WaitReady,
    WaitVisible,
)
from pagetasks.cdp_client.jsonrpc import CdpError
from pagetasks.cdp_client.session import CdpSession
from pagetasks.tasks.errors import ProtocolFailure

logger = logging.getLogger(__name__)


class DevToolsAdapter:
    """Executes single actions against one page over the DevTools protocol."""

    def __init__(self, session: CdpSession, poll_interval: float = 0.1) -> None:
        self.session = session
        self.poll_interval = poll_interval

    async def perform(self, action: Action) -> Any:
        logger.debug("perform %r", action)
        if isinstance(action, EvaluateScript):
            return await self.evaluate(action.script)
        if isinstance(action, Navigate):
            return await self.navigate(action.url)
        if isinstance(action, Reload):
            return await self._call("Page.reload", {})
        if isinstance(action, WaitVisible):
            return await self._wait_for(action.selector, self._visible_script(action.selector))
        if isinstance(action, WaitReady):
            return await self._wait_for(action.selector, self._ready_script(action.selector))
        if isinstance(action, Click):
            return await self.click(action.selector)
        if isinstance(action, Sleep):
            raise ProtocolFailure("perform", "Sleep is run by the task runner, not the driver")
        raise ProtocolFailure("perform", f"Unsupported action: {type(action).__name__}")

    async def evaluate(self, script: str) -> Any:
        raw = await self._call(
            "Runtime.evaluate",
            {"expression": script, "returnByValue": True, "awaitPromise": True},
        )
        details = raw.get("exceptionDetails")
        if details:
            raise ProtocolFailure("Runtime.evaluate", self._exception_text(details))
        result = raw.get("result", {})
        if result.get("type") == "undefined":
            return None
        return result.get("value")

    async def navigate(self, url: str) -> dict[str, Any]:
        raw = await self._call("Page.navigate", {"url": url})
        error_text = raw.get("errorText")
        if error_text:
            raise ProtocolFailure("Page.navigate", f"{url}: {error_text}")
        return raw

    async def click(self, selector: str) -> dict[str, Any]:
        box = await self.evaluate(self._center_script(selector))
        if not isinstance(box, dict):
            raise ProtocolFailure("Click", f"no element matches selector {selector}")
        x, y = box["x"], box["y"]
        await self._call("Input.dispatchMouseEvent", {"type": "mouseMoved", "x": x, "y": y})
        for event_type in ("mousePressed", "mouseReleased"):
            await self._call(
                "Input.dispatchMouseEvent",
                {"type": event_type, "x": x, "y": y, "button": "left", "clickCount": 1},
            )
        return box

    async def _wait_for(self, selector: str, script: str) -> bool:
        # No deadline of its own; the surrounding task guard bounds it.
        while True:
            try:
                if await self.evaluate(script) is True:
                    return True
            except ProtocolFailure as exc:
                # The execution context is swapped out while a navigation commits.
                if not isinstance(exc.__cause__, CdpError):
                    raise
                logger.debug("%s not checkable yet: %s", selector, exc.message)
            logger.debug("waiting for %s", selector)
            await asyncio.sleep(self.poll_interval)

    async def _call(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.session.send_command(method, params)
        except CdpError as exc:
            raise ProtocolFailure(method, exc.message) from exc
        except TimeoutError as exc:
            raise ProtocolFailure(method, "no reply from browser") from exc
        except (RuntimeError, OSError) as exc:
            raise ProtocolFailure(method, str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _exception_text(details: dict[str, Any]) -> str:
        exception = details.get("exception")
        if isinstance(exception, dict) and exception.get("description"):
            return str(exception["description"])
        return str(details.get("text", "script raised an exception"))

    @staticmethod
    def _ready_script(selector: str) -> str:
        return f"document.querySelector({json.dumps(selector)}) !== null"

    @staticmethod
    def _visible_script(selector: str) -> str:
        selector_json = json.dumps(selector)
        return (
            "(() => {"
            f"const el = document.querySelector({selector_json});"
            "if (!el) return false;"
            "const rect = el.getBoundingClientRect();"
            "if (!rect || rect.width <= 0 || rect.height <= 0) return false;"
            "const style = window.getComputedStyle(el);"
            "return style.display !== 'none' && style.visibility !== 'hidden';"
            "})()"
        )

    @staticmethod
    def _center_script(selector: str) -> str:
        selector_json = json.dumps(selector)
        return (
            "(() => {"
            f"const el = document.querySelector({selector_json});"
            "if (!el) return null;"
            "el.scrollIntoView({block:'center', inline:'center'});"
            "const rect = el.getBoundingClientRect();"
            "return {x: rect.left + rect.width / 2, y: rect.top + rect.height / 2};"
            "})()"
        )
