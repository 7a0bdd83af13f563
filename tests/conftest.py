"""
Pytest fixtures for page task tests
"""
from __future__ import annotations

import asyncio
import io
from collections.abc import Callable
from typing import Any

import pytest
from rich.console import Console

from pagetasks.browser.actions import Action, EvaluateScript
from pagetasks.tasks.context import TaskContext
from pagetasks.tasks.errors import ProtocolFailure

TIME_UNIT = 0.001


class FakeDriver:
    """Records every action and answers evaluations from a script of replies.

    ``replies`` is consumed in order for EvaluateScript actions; a reply that is
    an exception instance is raised instead of returned. ``handler`` overrides
    replies for any action when set.
    """

    def __init__(self, replies: list[Any] | None = None, handler: Callable[[Action], Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.handler = handler
        self.performed: list[Action] = []
        self.delay: float = 0.0

    async def perform(self, action: Action) -> Any:
        self.performed.append(action)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.handler is not None:
            reply = self.handler(action)
        elif isinstance(action, EvaluateScript):
            if not self.replies:
                raise ProtocolFailure("Runtime.evaluate", "no scripted reply left")
            reply = self.replies.pop(0)
        else:
            reply = None
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def evaluations(self) -> list[EvaluateScript]:
        return [action for action in self.performed if isinstance(action, EvaluateScript)]


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_ctx(output: io.StringIO) -> Callable[..., TaskContext]:
    def _make(driver: FakeDriver, timeout: float = 60) -> TaskContext:
        console = Console(file=output, force_terminal=False, width=200)
        return TaskContext(driver=driver, timeout=timeout, time_unit=TIME_UNIT, console=console)

    return _make


@pytest.fixture
def fake_driver() -> type[FakeDriver]:
    return FakeDriver
