from __future__ import annotations


class PageTaskError(Exception):
    """Failure of a page task, tagged with the operation that reported it.

    Each layer re-raises the error it received via :meth:`wrap`, so the final
    message reads as a chain of operation tags from the outermost call down to
    the failing primitive, and the error class is preserved along the way.
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")

    def wrap(self, operation: str) -> PageTaskError:
        return type(self)(operation, str(self))

    @property
    def operations(self) -> list[str]:
        tags: list[str] = []
        current: BaseException | None = self
        while isinstance(current, PageTaskError):
            tags.append(current.operation)
            current = current.__cause__
        return tags


class TaskTimeoutError(PageTaskError, TimeoutError):
    pass


class ProtocolFailure(PageTaskError):
    pass


class DecodeMismatch(PageTaskError):
    pass
