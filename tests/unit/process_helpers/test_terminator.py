import errno
import os
import signal
from types import SimpleNamespace

import pytest

from procguard.errors import TerminationSignalError
from procguard.process_helpers import terminator


class FakeChild:
    def __init__(self, pid: int = 4242, kill_error: OSError | None = None):
        self.pid = pid
        self.kill_error = kill_error
        self.killed = False

    def kill(self) -> None:
        if self.kill_error is not None:
            raise self.kill_error
        self.killed = True


@pytest.fixture
def killpg_calls(monkeypatch):
    calls = []
    outcome = SimpleNamespace(error=None)

    def fake_killpg(pid, signum):
        calls.append((pid, signum))
        if outcome.error is not None:
            raise outcome.error

    monkeypatch.setattr(terminator.os, "killpg", fake_killpg, raising=False)
    return calls, outcome


def test_sends_sigterm_to_process_group(killpg_calls):
    calls, _ = killpg_calls
    terminator.terminate_process_group(FakeChild(pid=77), platform="linux")
    assert calls == [(77, signal.SIGTERM)]


def test_already_gone_group_is_success(killpg_calls):
    _, outcome = killpg_calls
    outcome.error = ProcessLookupError(errno.ESRCH, "No such process")
    terminator.terminate_process_group(FakeChild(), platform="linux")


def test_eperm_is_tolerated_on_darwin(killpg_calls):
    _, outcome = killpg_calls
    outcome.error = PermissionError(errno.EPERM, "Operation not permitted")
    terminator.terminate_process_group(FakeChild(), platform="darwin")


def test_eperm_is_an_error_elsewhere(killpg_calls):
    _, outcome = killpg_calls
    outcome.error = PermissionError(errno.EPERM, "Operation not permitted")
    with pytest.raises(TerminationSignalError) as excinfo:
        terminator.terminate_process_group(FakeChild(pid=5), platform="linux")
    assert excinfo.value.pid == 5
    assert excinfo.value.errno == errno.EPERM
    assert "EPERM" in str(excinfo.value)


def test_other_signal_failures_raise(killpg_calls, caplog):
    _, outcome = killpg_calls
    outcome.error = OSError(errno.EINVAL, "Invalid argument")
    with caplog.at_level("WARNING"):
        with pytest.raises(TerminationSignalError):
            terminator.terminate_process_group(FakeChild(pid=6), platform="darwin")
    assert any("failed to terminate child 6" in record.message for record in caplog.records)


def test_kill_single_process_kills_handle():
    child = FakeChild()
    terminator.kill_single_process(child)
    assert child.killed


def test_kill_single_process_wraps_os_errors():
    child = FakeChild(kill_error=PermissionError(errno.EACCES, "Access is denied"))
    with pytest.raises(TerminationSignalError) as excinfo:
        terminator.kill_single_process(child)
    assert excinfo.value.errno == errno.EACCES


def test_terminate_process_tree_dispatches_by_platform(monkeypatch):
    seen = []
    monkeypatch.setattr(terminator, "terminate_process_group", lambda child: seen.append("group"))
    monkeypatch.setattr(terminator, "kill_single_process", lambda child: seen.append("single"))

    terminator.terminate_process_tree(FakeChild())

    assert seen == (["group"] if os.name == "posix" else ["single"])
