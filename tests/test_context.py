# tests/test_context.py
import stat

import pytest

from postinstall import context
from postinstall.context import RunOptions, run_context


@pytest.fixture
def versions(mocker):
    outputs = {"rpm": "42", "gnome-shell": "GNOME Shell 46.2"}
    return mocker.patch(
        "postinstall.context.util.command_output",
        side_effect=lambda command: outputs[command[0]],
    )


def test_run_context_detects_versions_and_owns_scratch(versions):
    with run_context(RunOptions(), {"core": {}}) as ctx:
        scratch = ctx.scratch_dir
        assert ctx.fedora_version == "42"
        assert ctx.shell_version == "46.2"
        assert stat.S_IMODE(scratch.stat().st_mode) == 0o700
        (scratch / "leftover.zip").write_bytes(b"x")
    assert not scratch.exists()


def test_scratch_removed_when_body_raises(versions):
    with pytest.raises(RuntimeError):
        with run_context(RunOptions(), {}) as ctx:
            scratch = ctx.scratch_dir
            raise RuntimeError("step failed")
    assert not scratch.exists()


def test_unexpected_shell_version_output(mocker):
    mocker.patch("postinstall.context.util.command_output", return_value="46.2")
    assert context.detect_shell_version() == "46.2"


def test_write_file_respects_dry_run(make_ctx):
    ctx = make_ctx(dry_run=True)
    target = ctx.home / ".config" / "autostart" / "x.desktop"
    ctx.write_file(target, "[Desktop Entry]\n")
    assert not target.exists()

    ctx = make_ctx()
    ctx.write_file(target, "[Desktop Entry]\n", mode=0o600)
    assert target.read_text() == "[Desktop Entry]\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_download_respects_dry_run(mocker, make_ctx):
    download = mocker.patch("postinstall.context.net_utils.download_file")
    ctx = make_ctx(dry_run=True, session=mocker.Mock())

    dest = ctx.download("https://example.org/f", ctx.scratch_dir / "f")

    assert dest == ctx.scratch_dir / "f"
    download.assert_not_called()


def test_run_defaults_to_printing_commands(mocker, make_ctx, recorded_commands):
    ctx = make_ctx(dry_run=True)
    ctx.run(["sudo", "dnf", "clean", "all"])
    _, kwargs = recorded_commands[0]
    assert kwargs["dry_run"] is True
    assert callable(kwargs["print_fn_info"])


def test_enabled_and_section(make_ctx):
    ctx = make_ctx(modules={"gaming": False}, packages={"core": {"dnf_packages": ["git"]}})
    assert ctx.enabled("core")
    assert not ctx.enabled("gaming")
    assert not ctx.enabled("nvidia")
    assert ctx.section("core") == {"dnf_packages": ["git"]}
    assert ctx.section("themes") == {}
