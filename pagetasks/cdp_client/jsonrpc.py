from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any


_command_id = itertools.count(1)


@dataclass(slots=True)
class CdpCommand:
    method: str
    params: dict[str, Any] | None = None
    id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"method": self.method}
        if self.id is not None:
            payload["id"] = self.id
        if self.params is not None:
            payload["params"] = self.params
        return payload


class CdpError(Exception):
    def __init__(self, code: int, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"CDP error {code}: {message}")


def next_id() -> int:
    return next(_command_id)


def build_command(method: str, params: dict[str, Any] | None = None) -> CdpCommand:
    return CdpCommand(method=method, params=params, id=next_id())


def is_response(payload: dict[str, Any]) -> bool:
    return "id" in payload and ("result" in payload or "error" in payload)


def is_event(payload: dict[str, Any]) -> bool:
    return "method" in payload and "id" not in payload


def extract_result(payload: dict[str, Any]) -> dict[str, Any]:
    if "error" in payload:
        err = payload["error"]
        raise CdpError(
            code=err.get("code", -32000),
            message=err.get("message", "Unknown CDP error"),
            data=err.get("data"),
        )
    return payload.get("result") or {}
