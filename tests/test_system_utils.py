# tests/test_system_utils.py
import subprocess

import pytest

from postinstall import system_utils as util


@pytest.fixture
def subprocess_run(mocker):
    return mocker.patch(
        "postinstall.system_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0, stdout="out\n", stderr=""),
    )


def test_dry_run_executes_nothing(subprocess_run, mocker):
    echo = mocker.Mock()

    result = util.run_command(["sudo", "dnf", "install", "-y", "git"], dry_run=True, print_fn_info=echo)

    subprocess_run.assert_not_called()
    assert result.returncode == 0
    assert "sudo dnf install -y git" in echo.call_args.args[0]


def test_nonzero_exit_raises_when_checked(subprocess_run):
    subprocess_run.return_value = subprocess.CompletedProcess(["false"], 3, stdout="", stderr="boom")

    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        util.run_command(["false"])
    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "boom"


def test_nonzero_exit_returned_when_unchecked(subprocess_run):
    subprocess_run.return_value = subprocess.CompletedProcess(["rpm"], 1, stdout="", stderr="")
    assert util.run_command(["rpm", "-q", "nope"], check=False).returncode == 1


def test_missing_executable_propagates(subprocess_run):
    subprocess_run.side_effect = FileNotFoundError(2, "No such file", "frobnicate")
    with pytest.raises(FileNotFoundError):
        util.run_command(["frobnicate"])


def test_env_vars_extend_the_environment(subprocess_run, monkeypatch):
    monkeypatch.setenv("HOME", "/home/tester")

    util.run_command(["sh", "install.sh"], env_vars={"RUNZSH": "no"})

    env = subprocess_run.call_args.kwargs["env"]
    assert env["RUNZSH"] == "no"
    assert env["HOME"] == "/home/tester"


def test_command_output_strips(subprocess_run):
    subprocess_run.return_value = subprocess.CompletedProcess(["rpm"], 0, stdout="42\n", stderr="")
    assert util.command_output(["rpm", "-E", "%fedora"]) == "42"


def test_install_dnf_packages_skips_empty_list(recorded_commands):
    util.install_dnf_packages([])
    assert recorded_commands == []


def test_install_dnf_packages_single_transaction(recorded_commands):
    util.install_dnf_packages(["git", "curl"], allow_erasing=True)
    assert [cmd for cmd, _ in recorded_commands] == [["sudo", "dnf", "install", "-y", "--allowerasing", "git", "curl"]]


def test_group_upgrade_per_group(recorded_commands):
    util.upgrade_dnf_groups(["multimedia", "sound-and-video"], extra_args=["--exclude=PackageKit-gstreamer-plugin"])
    assert [cmd for cmd, _ in recorded_commands] == [
        ["sudo", "dnf", "group", "upgrade", "-y", "multimedia", "--exclude=PackageKit-gstreamer-plugin"],
        ["sudo", "dnf", "group", "upgrade", "-y", "sound-and-video", "--exclude=PackageKit-gstreamer-plugin"],
    ]


def test_flathub_remote_is_idempotent_by_flag(recorded_commands):
    util.ensure_flathub_remote_exists("flathub", "https://dl.flathub.org/repo/flathub.flatpakrepo")
    command = recorded_commands[0][0]
    assert "--if-not-exists" in command
    assert command[-2:] == ["flathub", "https://dl.flathub.org/repo/flathub.flatpakrepo"]


def test_update_flatpak_apps_is_system_wide(recorded_commands):
    util.update_flatpak_apps(dry_run=True)
    command, kwargs = recorded_commands[0]
    assert command == ["sudo", "flatpak", "update", "--system", "--noninteractive", "-y"]
    assert kwargs["dry_run"] is True


def test_set_gsetting(recorded_commands):
    util.set_gsetting("org.gnome.desktop.interface", "clock-show-date", "true", dry_run=True)
    command, kwargs = recorded_commands[0]
    assert command == ["gsettings", "set", "org.gnome.desktop.interface", "clock-show-date", "true"]
    assert kwargs["dry_run"] is True
