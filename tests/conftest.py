# tests/conftest.py
import io
import subprocess
import zipfile
from types import MappingProxyType

import pytest

from postinstall.config import MODULE_DEFAULTS
from postinstall.context import RunContext, RunOptions
from postinstall.logger_utils import setup_logger


@pytest.fixture(autouse=True)
def no_log_file():
    """Keep test runs out of the real log file."""
    setup_logger(log_to_file=False)
    yield


@pytest.fixture
def make_ctx(tmp_path):
    """Factory for a RunContext rooted in tmp_path (home and scratch dir)."""
    home = tmp_path / "home"
    scratch = tmp_path / "scratch"
    home.mkdir()
    scratch.mkdir()

    def _make(modules=None, dry_run=False, packages=None, shell_version="46.2", session=None):
        flags = dict(MODULE_DEFAULTS)
        flags.update(modules or {})
        options = RunOptions(modules=MappingProxyType(flags), dry_run=dry_run)
        return RunContext(
            options=options,
            packages=packages if packages is not None else {},
            fedora_version="42",
            shell_version=shell_version,
            scratch_dir=scratch,
            home=home,
            _session=session,
        )

    return _make


@pytest.fixture
def recorded_commands(mocker):
    """
    Replaces system_utils.run_command. Every call is recorded as (command, kwargs)
    and succeeds with empty output.
    """
    calls = []

    def fake_run(command, **kwargs):
        calls.append((list(command) if isinstance(command, list) else command, kwargs))
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    mocker.patch("postinstall.system_utils.run_command", side_effect=fake_run)
    return calls


def make_zip_bytes(files):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


@pytest.fixture
def extension_zip():
    return make_zip_bytes({
        "metadata.json": '{"uuid": "dash-to-dock@micxgx.gmail.com", "shell-version": ["46"]}',
        "extension.js": "export default class Extension {}",
    })


@pytest.fixture
def zip_factory():
    return make_zip_bytes
