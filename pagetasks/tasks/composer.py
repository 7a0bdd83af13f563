from __future__ import annotations

from pagetasks.browser import scripts
from pagetasks.browser.actions import Click, EvaluateScript, Reload, Sleep, Task, WaitReady, WaitVisible

RELOAD_SETTLE = 5
CLICK_SETTLE = 1


def check_connection() -> Task:
    return (EvaluateScript(scripts.check_conn()),)


def open_url(url: str) -> Task:
    # Navigation goes through script so failures come back as trace strings
    # like every other evaluation.
    return (EvaluateScript(scripts.open_url(url)),)


def reload() -> Task:
    return (Reload(), Sleep(RELOAD_SETTLE))


def wait_visible(selector: str) -> Task:
    return (WaitVisible(selector),)


def wait_ready(selector: str) -> Task:
    return (WaitReady(selector),)


def click(selector: str) -> Task:
    return (Sleep(CLICK_SETTLE), Click(selector))


def set_input_value(selector: str, value: str) -> Task:
    return (EvaluateScript(scripts.set_input_value(selector, value)),)


def get_string(js: str) -> Task:
    return (EvaluateScript(scripts.get_string(js)),)


def get_strings(js: str) -> Task:
    return (EvaluateScript(scripts.get_strings(js)),)


def get_bool(js: str) -> Task:
    return (EvaluateScript(scripts.get_bool(js)),)
