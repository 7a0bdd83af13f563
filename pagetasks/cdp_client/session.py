from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from typing import Any

from .jsonrpc import build_command, extract_result, is_event, is_response
from .transport import WebSocketTransport

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, dict[str, Any]], None]


class CdpSession:
    def __init__(self, transport: WebSocketTransport, timeout_seconds: float = 30.0) -> None:
        self.transport = transport
        self.timeout_seconds = timeout_seconds
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._handlers: list[EventHandler] = []
        self._reader_task: asyncio.Task[None] | None = None
        self._closed: RuntimeError | None = None

    async def start(self) -> None:
        await self.transport.start()
        self._closed = None
        self._reader_task = asyncio.create_task(self._reader_loop())

    async def stop(self) -> None:
        if self._reader_task is not None:
            self._reader_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, TimeoutError):
                await asyncio.wait_for(self._reader_task, timeout=2)
            self._reader_task = None
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self.transport.stop(), timeout=5)
        self._close(RuntimeError("CDP session stopped"))

    def on_event(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    async def send_command(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        if self._closed is not None:
            raise RuntimeError(f"CDP session is closed: {self._closed}")
        command = build_command(method, params)
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[Any] = loop.create_future()
        self._pending[command.id] = fut
        logger.debug("-> %s #%s", method, command.id)
        try:
            await self.transport.send(command.to_dict())
            return await asyncio.wait_for(fut, timeout=self.timeout_seconds)
        finally:
            self._pending.pop(command.id, None)

    async def _reader_loop(self) -> None:
        try:
            while True:
                try:
                    message = await self.transport.recv()
                except ValueError as exc:
                    logger.warning("Dropping malformed CDP frame: %s", exc)
                    continue
                if is_response(message):
                    future = self._pending.pop(int(message["id"]), None)
                    if future is not None and not future.done():
                        try:
                            future.set_result(extract_result(message))
                        except Exception as exc:
                            future.set_exception(exc)
                elif is_event(message):
                    self._dispatch(message.get("method", ""), message.get("params", {}))
        except RuntimeError as exc:
            logger.debug("CDP reader stopped: %s", exc)
            self._close(exc)
        except Exception as exc:
            logger.error("CDP reader failed: %s: %s", type(exc).__name__, exc)
            self._close(RuntimeError(f"CDP reader failed: {exc}"))

    def _dispatch(self, method: str, params: dict[str, Any]) -> None:
        for handler in self._handlers:
            try:
                handler(method, params)
            except Exception:
                logger.exception("CDP event handler failed for %s", method)

    def _close(self, exc: RuntimeError) -> None:
        self._closed = exc
        self._fail_pending(exc)

    def _fail_pending(self, exc: Exception) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(exc)
        self._pending.clear()
