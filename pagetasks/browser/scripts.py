"""In-page script bodies.

Every body is guarded by ``try/catch`` so that a page-side exception resolves
to ``err.stack`` instead of surfacing as a protocol error. The completion
value of the script is what the evaluation returns.

Interpolated text is inserted verbatim; callers are trusted to pass
well-formed selectors, values and URLs.
"""

from __future__ import annotations

SET_INPUT_OK = "Ok!"


def _guarded(body: str, on_error: str = "err.stack", prelude: str = "") -> str:
    return (
        prelude
        + "try {\n"
        + body
        + "\n} catch(err) {\n"
        + on_error
        + "\n}\n"
    )


def check_conn() -> str:
    return _guarded("navigator.onLine")


def open_url(url: str) -> str:
    return _guarded("location.href = '" + url + "';")


def get_string(js: str) -> str:
    return _guarded(js)


def get_strings(js: str) -> str:
    return _guarded(js, on_error="result.push(err.stack);\nresult", prelude="var result = [];\n")


def get_bool(js: str) -> str:
    return _guarded(js)


def set_input_value(selector: str, value: str) -> str:
    body = (
        'var input = document.querySelector("' + selector + '");\n'
        'input.value = "' + value + '";\n'
        "input.select();\n"
        '"' + SET_INPUT_OK + '"'
    )
    return _guarded(body)
