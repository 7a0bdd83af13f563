from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Navigate:
    url: str


@dataclass(frozen=True, slots=True)
class Reload:
    pass


@dataclass(frozen=True, slots=True)
class Sleep:
    units: float


@dataclass(frozen=True, slots=True)
class WaitVisible:
    selector: str


@dataclass(frozen=True, slots=True)
class WaitReady:
    selector: str


@dataclass(frozen=True, slots=True)
class Click:
    selector: str


@dataclass(frozen=True, slots=True)
class EvaluateScript:
    script: str


Action = Union[Navigate, Reload, Sleep, WaitVisible, WaitReady, Click, EvaluateScript]

# Executed strictly in order, stopping at the first failing action.
Task = tuple[Action, ...]
