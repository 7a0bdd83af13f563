from __future__ import annotations

import contextlib

from rich.console import Console


class Progress:
    """Optional begin/end markers for a single operation."""

    def __init__(self, console: Console, enabled: bool) -> None:
        self.console = console
        self.enabled = enabled

    def begin(self, text: str) -> None:
        self._write(text, style="green", end="")

    def done(self, text: str = "-ok") -> None:
        self._write(text, style="bold green")

    def tick(self, text: str = ".") -> None:
        self._write(text, style="green", end="")

    def _write(self, text: str, style: str, end: str = "\n") -> None:
        if not self.enabled:
            return
        # The console is a side channel; a broken sink must not fail the task.
        with contextlib.suppress(OSError):
            self.console.print(text, style=style, end=end, markup=False, highlight=False)
