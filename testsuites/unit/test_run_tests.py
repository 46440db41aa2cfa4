import sys

import pytest

from run_tests import SUITE_PATHS, TestRunner, build_parser


def test_unit_suite_command():
    cmd = TestRunner(suite="unit", allure_report=False).build_pytest_command()
    assert cmd[:3] == [sys.executable, "-m", "pytest"]
    assert "testsuites/unit" in cmd
    assert "testsuites/ui_testing/tests" not in cmd
    assert cmd[-1] == "-q"


def test_tags_parallel_and_allure():
    runner = TestRunner(suite="ui", tags=["smoke_ui", "P0"], parallel=4, verbose=True)
    cmd = runner.build_pytest_command()
    assert cmd[cmd.index("-m") + 1] == "smoke_ui or P0"
    assert cmd[cmd.index("-n") + 1] == "4"
    assert cmd[cmd.index("--alluredir") + 1] == str(runner.allure_results)
    assert cmd[-1] == "-v"


def test_browser_settings_travel_through_env():
    env = TestRunner(
        suite="ui", browser="firefox", headless=False, e2e=True,
        env="staging", base_url="https://staging.superbet.ro",
    ).build_env(base={"PATH": "/usr/bin"})

    assert env["PATH"] == "/usr/bin"
    assert env["UI_BROWSER"] == "firefox"
    assert env["UI_HEADLESS"] == "false"
    assert env["UI_E2E"] == "1"
    assert env["ENV"] == "staging"
    assert env["UI_BASE_URL"] == "https://staging.superbet.ro"

    env = TestRunner(suite="unit").build_env(base={})
    assert "UI_E2E" not in env
    assert env["UI_HEADLESS"] == "true"


def test_parser_and_unknown_suite():
    args = build_parser().parse_args(["--suite", "ui", "--e2e", "--no-headless", "-n", "2"])
    assert args.suite == "ui" and args.e2e and args.no_headless and args.parallel == 2
    assert set(SUITE_PATHS) == {"unit", "ui", "all"}

    with pytest.raises(ValueError):
        TestRunner(suite="api")
