from pagetasks.browser.actions import Click, EvaluateScript, Reload, Sleep, WaitReady, WaitVisible
from pagetasks.tasks import composer


def test_open_url_navigates_through_script() -> None:
    task = composer.open_url("https://example.com")
    assert len(task) == 1
    assert isinstance(task[0], EvaluateScript)
    assert "location.href = 'https://example.com'" in task[0].script


def test_reload_settles_for_five_units() -> None:
    assert composer.reload() == (Reload(), Sleep(5))


def test_click_settles_before_clicking() -> None:
    assert composer.click("#go") == (Sleep(1), Click("#go"))


def test_waits_are_single_actions() -> None:
    assert composer.wait_visible("#a") == (WaitVisible("#a"),)
    assert composer.wait_ready("#a") == (WaitReady("#a"),)


def test_evaluation_tasks_are_single_scripts() -> None:
    for task in (
        composer.check_connection(),
        composer.set_input_value("#q", "x"),
        composer.get_string("1"),
        composer.get_strings("1"),
        composer.get_bool("1"),
    ):
        assert len(task) == 1
        assert isinstance(task[0], EvaluateScript)


def test_tasks_are_immutable_values() -> None:
    task = composer.click("#go")
    assert isinstance(task, tuple)
    assert composer.click("#go") == task
