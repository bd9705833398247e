# tests/test_sudo_keeper.py
import subprocess
import threading

import pytest

from postinstall.sudo_keeper import SudoKeepAlive

REFRESH = ["sudo", "-n", "true"]


def _fake_sudo(mocker, refresh_error=None):
    calls = []
    refreshed = threading.Event()

    def fake_run(command, **kwargs):
        calls.append(command)
        if command == REFRESH:
            if calls.count(REFRESH) >= 2:
                refreshed.set()
            if refresh_error is not None:
                raise refresh_error
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    mocker.patch("postinstall.sudo_keeper.util.run_command", side_effect=fake_run)
    return calls, refreshed


def test_prompts_once_then_refreshes_until_stopped(mocker):
    calls, refreshed = _fake_sudo(mocker)
    keeper = SudoKeepAlive(interval=0.01)

    with keeper:
        assert keeper.running
        assert refreshed.wait(timeout=5)

    assert not keeper.running
    assert calls[0] == ["sudo", "-v"]
    assert calls.count(["sudo", "-v"]) == 1


def test_refresh_failures_do_not_stop_the_loop(mocker):
    _, refreshed = _fake_sudo(mocker, refresh_error=subprocess.CalledProcessError(1, REFRESH))
    keeper = SudoKeepAlive(interval=0.01)

    with keeper:
        assert refreshed.wait(timeout=5)
        assert keeper.running

    assert not keeper.running


def test_stopped_when_body_raises(mocker):
    _fake_sudo(mocker)
    keeper = SudoKeepAlive(interval=0.01)

    with pytest.raises(RuntimeError):
        with keeper:
            raise RuntimeError("step failed")

    assert not keeper.running


def test_failed_prompt_starts_no_thread(mocker):
    mocker.patch(
        "postinstall.sudo_keeper.util.run_command",
        side_effect=subprocess.CalledProcessError(1, ["sudo", "-v"]),
    )
    keeper = SudoKeepAlive(interval=0.01)

    with pytest.raises(subprocess.CalledProcessError):
        keeper.start()
    assert not keeper.running


def test_stop_is_idempotent(mocker):
    _fake_sudo(mocker)
    keeper = SudoKeepAlive(interval=0.01)
    keeper.stop()
    keeper.start()
    keeper.stop()
    keeper.stop()
    assert not keeper.running
