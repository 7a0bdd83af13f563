from __future__ import annotations

import asyncio
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Protocol

from rich.console import Console

from pagetasks.browser.actions import Action

DEFAULT_TIMEOUT = 60


class ActionDriver(Protocol):
    async def perform(self, action: Action) -> Any: ...


@dataclass(slots=True)
class TaskContext:
    """Caller-owned handle to one browser page.

    ``timeout`` and settle delays are expressed in time units; ``time_unit``
    is the length of one unit in seconds.
    """

    driver: ActionDriver
    timeout: float = DEFAULT_TIMEOUT
    time_unit: float = 1.0
    console: Console = field(default_factory=Console)

    def with_timeout(self, timeout: float) -> TaskContext:
        return dataclasses.replace(self, timeout=min(timeout, self.timeout))

    def seconds(self, units: float) -> float:
        return units * self.time_unit


async def settle(ctx: TaskContext, units: float) -> None:
    await asyncio.sleep(ctx.seconds(units))
