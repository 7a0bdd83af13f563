import asyncio

import pytest

from pagetasks.browser.actions import Click, EvaluateScript, Reload, WaitVisible
from pagetasks.tasks import extract, guard
from pagetasks.tasks.errors import DecodeMismatch, ProtocolFailure, TaskTimeoutError

BOOM_TRACE = "Error: boom\n    at <anonymous>:3:10"


def test_thrown_script_comes_back_as_trace_string(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=[BOOM_TRACE]))

    value = asyncio.run(extract.get_string(ctx, "throw new Error('boom')"))

    assert "boom" in value


def test_thrown_script_through_bool_extractor_is_decode_mismatch(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=[BOOM_TRACE]))

    with pytest.raises(DecodeMismatch) as excinfo:
        asyncio.run(extract.get_bool(ctx, "throw new Error('boom')"))

    assert excinfo.value.operation == "GetBool"


def test_open_url_failure_is_tagged_and_wraps_cause(fake_driver, make_ctx) -> None:
    failure = ProtocolFailure("Runtime.evaluate", "net::ERR_NAME_NOT_RESOLVED")
    ctx = make_ctx(fake_driver(replies=[failure]))

    with pytest.raises(ProtocolFailure) as excinfo:
        asyncio.run(extract.open_url(ctx, "https://unreachable.invalid"))

    err = excinfo.value
    assert err.operation == "OpenURL"
    assert "net::ERR_NAME_NOT_RESOLVED" in str(err)
    assert err.__cause__ is failure
    assert err.operations == ["OpenURL", "Runtime.evaluate"]


def test_click_never_clicks_when_wait_visible_fails(fake_driver, make_ctx) -> None:
    def handler(action):
        if isinstance(action, WaitVisible):
            return ProtocolFailure("WaitVisible", "selector never resolved")
        return None

    driver = fake_driver(handler=handler)
    ctx = make_ctx(driver)

    with pytest.raises(ProtocolFailure) as excinfo:
        asyncio.run(extract.click(ctx, "#missing"))

    assert driver.performed == [WaitVisible("#missing")]
    assert "wait visible" in excinfo.value.operation
    assert not excinfo.value.operation.startswith("click")


def test_click_waits_then_clicks(fake_driver, make_ctx) -> None:
    driver = fake_driver(handler=lambda action: None)
    ctx = make_ctx(driver)

    asyncio.run(extract.click(ctx, "#go"))

    assert driver.performed == [WaitVisible("#go"), Click("#go")]


def test_click_failure_is_tagged_click_stage(fake_driver, make_ctx) -> None:
    def handler(action):
        if isinstance(action, Click):
            return ProtocolFailure("Click", "detached node")
        return None

    ctx = make_ctx(fake_driver(handler=handler))

    with pytest.raises(ProtocolFailure) as excinfo:
        asyncio.run(extract.click(ctx, "#go"))

    assert excinfo.value.operation == "click in Click"


def test_get_reader_is_rereadable(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=["hello"]))

    reader = asyncio.run(extract.get_reader(ctx, "'hello'"))

    assert reader.read() == "hello"
    assert reader.read() == ""
    reader.seek(0)
    assert reader.read() == "hello"


def test_get_strings_decodes_list_and_null(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=[["a", "b"], None]))

    assert asyncio.run(extract.get_strings(ctx, "result = ['a', 'b']")) == ["a", "b"]
    assert asyncio.run(extract.get_strings(ctx, "null")) == []


def test_get_strings_rejects_mixed_values(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=[["a", 1]]))

    with pytest.raises(DecodeMismatch) as excinfo:
        asyncio.run(extract.get_strings(ctx, "['a', 1]"))

    assert excinfo.value.operation == "GetStringsSlice"


def test_get_string_rejects_missing_value(fake_driver, make_ctx) -> None:
    ctx = make_ctx(fake_driver(replies=[None]))

    with pytest.raises(DecodeMismatch):
        asyncio.run(extract.get_string(ctx, "undefined"))


def test_check_conn_and_set_input_value(fake_driver, make_ctx) -> None:
    driver = fake_driver(replies=[True, "Ok!"])
    ctx = make_ctx(driver)

    assert asyncio.run(extract.check_conn(ctx)) is True
    asyncio.run(extract.set_input_value(ctx, "#q", "books"))

    assert 'input.value = "books";' in driver.evaluations[1].script


def test_reload_sleeps_after_reloading(fake_driver, make_ctx, monkeypatch) -> None:
    events = []

    async def record_sleep(seconds):
        events.append(("sleep", seconds))

    monkeypatch.setattr(guard.asyncio, "sleep", record_sleep)
    driver = fake_driver(handler=lambda action: events.append(type(action).__name__))
    ctx = make_ctx(driver)

    asyncio.run(extract.reload(ctx))

    assert events == ["Reload", ("sleep", ctx.seconds(5))]
    assert driver.performed == [Reload()]


def test_extraction_timeout_is_tagged(fake_driver, make_ctx) -> None:
    driver = fake_driver(replies=["late"])
    driver.delay = 1.0
    ctx = make_ctx(driver, timeout=5)

    with pytest.raises(TaskTimeoutError) as excinfo:
        asyncio.run(extract.get_string(ctx, "'late'"))

    assert excinfo.value.operations == ["GetString", "RunWithTimeout"]


def test_verbose_prints_begin_and_end_markers(fake_driver, make_ctx, output) -> None:
    ctx = make_ctx(fake_driver(replies=["https://example.com"]))

    asyncio.run(extract.open_url(ctx, "https://example.com", verbose=True))

    text = output.getvalue()
    assert text.startswith("Opening page url https://example.com -")
    assert text.rstrip().endswith("Ok!.")
    assert text.count("\n") == 1


def test_quiet_by_default(fake_driver, make_ctx, output) -> None:
    ctx = make_ctx(fake_driver(replies=["x"]))

    asyncio.run(extract.get_string(ctx, "'x'"))

    assert output.getvalue() == ""


def test_verbose_keeps_selector_brackets(fake_driver, make_ctx, output) -> None:
    ctx = make_ctx(fake_driver(handler=lambda action: None))

    asyncio.run(extract.wait_visible(ctx, "input[name=q]", verbose=True))

    assert "input[name=q]" in output.getvalue()


def test_evaluate_actions_carry_wrapped_script(fake_driver, make_ctx) -> None:
    driver = fake_driver(replies=[False])
    ctx = make_ctx(driver)

    asyncio.run(extract.get_bool(ctx, "window.flag === true"))

    (action,) = driver.performed
    assert isinstance(action, EvaluateScript)
    assert "window.flag === true" in action.script
