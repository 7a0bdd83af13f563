from __future__ import annotations

import contextlib
import json
import logging
from typing import Any

import httpx
import websockets

logger = logging.getLogger(__name__)


class WebSocketTransport:
    def __init__(self, url: str, max_size: int = 50_000_000) -> None:
        self.url = url
        self.max_size = max_size
        self._ws: Any = None

    async def start(self) -> None:
        self._ws = await websockets.connect(self.url, max_size=self.max_size)
        logger.debug("Connected to %s", self.url)

    async def stop(self) -> None:
        if self._ws is None:
            return
        ws = self._ws
        self._ws = None
        with contextlib.suppress(Exception):
            await ws.close()

    async def send(self, payload: dict) -> None:
        if self._ws is None:
            raise RuntimeError("Transport is not started")
        try:
            await self._ws.send(json.dumps(payload, ensure_ascii=False))
        except websockets.ConnectionClosed as exc:
            raise RuntimeError("CDP transport closed") from exc

    async def recv(self) -> dict:
        if self._ws is None:
            raise RuntimeError("Transport is not started")
        try:
            message = await self._ws.recv()
        except websockets.ConnectionClosed as exc:
            raise RuntimeError("CDP transport closed") from exc
        if isinstance(message, bytes):
            message = message.decode("utf-8")
        return json.loads(message)


async def list_targets(host: str, port: int, timeout_seconds: float = 10.0) -> list[dict[str, Any]]:
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        response = await client.get(f"http://{host}:{port}/json/list")
        response.raise_for_status()
        return response.json()


async def browser_version(host: str, port: int, timeout_seconds: float = 5.0) -> dict[str, Any]:
    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        response = await client.get(f"http://{host}:{port}/json/version")
        response.raise_for_status()
        return response.json()


async def discover_page_ws_url(host: str, port: int) -> str:
    """Return the debugger URL of the first page target on host:port."""
    targets = await list_targets(host, port)
    for target in targets:
        if target.get("type") == "page" and target.get("webSocketDebuggerUrl"):
            logger.debug("Using page target %s (%s)", target.get("id"), target.get("url"))
            return str(target["webSocketDebuggerUrl"])
    raise RuntimeError(f"No page target with a debugger URL found on {host}:{port}")
