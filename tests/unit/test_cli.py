import pytest

from procguard import cli, interrupt
from procguard.process_status import ProcessStatus
from tests.helpers.child_scripts import exit_with, python_argv


@pytest.fixture(autouse=True)
def _no_global_side_effects(monkeypatch):
    monkeypatch.setattr(cli.interrupt, "install_handler", lambda: None)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


@pytest.mark.parametrize(
    "status, expected",
    [
        (ProcessStatus.success(), 0),
        (ProcessStatus.failure(3), 3),
        (ProcessStatus.failure(300), 1),
        (ProcessStatus.timeout(), 124),
        (ProcessStatus.signalled(9), 137),
        (ProcessStatus.other(), 1),
    ],
)
def test_exit_code_for(status, expected):
    assert cli.exit_code_for(status) == expected


def test_runs_command_and_returns_child_code(tmp_path):
    code = cli.main(["--log-dir", str(tmp_path), "--name", "unit/exit", "--", *exit_with(4)])
    assert code == 4
    log_path = tmp_path / "unit__exit.log"
    assert log_path.exists()
    assert log_path.read_text(encoding="utf-8").rstrip().endswith("*** result: Failure(4)")


def test_env_option_reaches_child(tmp_path):
    argv = python_argv("import os, sys; sys.exit(0 if os.environ.get('CLI_FLAG') == 'on' else 9)")
    assert cli.main(["--log-dir", str(tmp_path), "--env", "CLI_FLAG=on", "--", *argv]) == 0


def test_timeout_option(tmp_path):
    argv = python_argv("import time; time.sleep(30)")
    assert cli.main(["--log-dir", str(tmp_path), "--timeout", "0.2", "--", *argv]) == cli.EXIT_TIMEOUT


def test_interrupt_returns_130(tmp_path):
    interrupt.request_interrupt("test")
    argv = python_argv("import time; time.sleep(30)")
    assert cli.main(["--log-dir", str(tmp_path), "--", *argv]) == cli.EXIT_INTERRUPTED


def test_spawn_failure_returns_1(tmp_path):
    assert cli.main(["--log-dir", str(tmp_path), "--", str(tmp_path / "missing")]) == 1


def test_missing_command_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-dir", str(tmp_path)])
    assert excinfo.value.code == 2


def test_bad_env_pair_is_usage_error(tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["--env", "NOEQUALS", "--", *exit_with(0)])


def test_zero_jobs_is_configuration_error(tmp_path, capsys):
    assert cli.main(["--log-dir", str(tmp_path), "--jobs", "0", "--", *exit_with(0)]) == 2
    assert "jobserver limit" in capsys.readouterr().err


def test_oversized_jobserver_is_configuration_error(tmp_path):
    argv = ["--log-dir", str(tmp_path), "--jobs", str(4 * 1024 * 1024), "--", *exit_with(0)]
    assert cli.main(argv) == 2


def test_jobs_option_advertises_jobserver(tmp_path):
    argv = python_argv("import os, sys; sys.exit(0 if '--jobserver-auth=' in os.environ.get('CARGO_MAKEFLAGS', '') else 9)")
    assert cli.main(["--log-dir", str(tmp_path), "--jobs", "2", "--", *argv]) == 0


def test_unusable_log_dir_returns_1(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    assert cli.main(["--log-dir", str(blocker / "logs"), "--", *exit_with(0)]) == 1


def test_verbose_setting_enables_debug_logging(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setenv("PROCGUARD_VERBOSE", "yes")
    assert cli.main(["--log-dir", str(tmp_path), "--", *exit_with(0)]) == 0
    assert calls == [(("DEBUG",), {"user_friendly": False})]
