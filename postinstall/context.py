# fedora-postinstall/postinstall/context.py

import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

import requests

from postinstall import config_loader
from postinstall import console_output as con
from postinstall import net_utils
from postinstall import system_utils as util
from postinstall.config import APP_NAME, MODULE_DEFAULTS
from postinstall.logger_utils import app_logger


@dataclass(frozen=True)
class RunOptions:
    """Everything decided on the command line. Built once, never mutated."""
    modules: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType(dict(MODULE_DEFAULTS)))
    dry_run: bool = False
    verbose: bool = False


@dataclass
class RunContext:
    options: RunOptions
    packages: Dict[str, Any]
    fedora_version: str
    shell_version: str
    scratch_dir: Path
    home: Path = field(default_factory=Path.home)
    _session: Optional[requests.Session] = field(default=None, repr=False)

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = net_utils.new_session()
        return self._session

    def enabled(self, module: str) -> bool:
        return bool(self.options.modules.get(module, False))

    def section(self, module: str) -> Dict[str, Any]:
        return config_loader.get_phase_data(self.packages, module)

    def run(self, command: Union[str, List[str]], **kwargs) -> subprocess.CompletedProcess:
        """Runs a mutating command, or only echoes it in dry-run mode."""
        kwargs.setdefault("print_fn_info", con.print_info)
        return util.run_command(command, dry_run=self.dry_run, **kwargs)

    def write_file(self, path: Path, content: str, mode: Optional[int] = None) -> None:
        if self.dry_run:
            con.print_info(f"[dim](dry-run)[/] would write {path}")
            app_logger.info(f"[dry-run] Would write {len(content)} bytes to {path}")
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            path.chmod(mode)
        app_logger.info(f"Wrote {path}")

    def download(self, url: str, dest: Path) -> Path:
        if self.dry_run:
            con.print_info(f"[dim](dry-run)[/] would download {url}")
            return dest
        return net_utils.download_file(self.session, url, dest)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None


def detect_fedora_version() -> str:
    return util.command_output(["rpm", "-E", "%fedora"])


def detect_shell_version() -> str:
    """Returns the running GNOME Shell version, e.g. '46.2' from 'GNOME Shell 46.2'."""
    output = util.command_output(["gnome-shell", "--version"])
    parts = output.split()
    if len(parts) < 3 or parts[0] != "GNOME":
        app_logger.warning(f"Unexpected 'gnome-shell --version' output: {output!r}")
        return parts[-1] if parts else ""
    return parts[2]


@contextmanager
def run_context(options: RunOptions, packages: Dict[str, Any]) -> Iterator[RunContext]:
    """
    Resolves the per-run values and owns the scratch directory.
    The scratch directory is removed on every exit path.
    """
    fedora_version = detect_fedora_version()
    shell_version = detect_shell_version()
    app_logger.info(f"Fedora {fedora_version}, GNOME Shell {shell_version}")

    scratch_dir = Path(tempfile.mkdtemp(prefix=f"{APP_NAME}-"))
    os.chmod(scratch_dir, 0o700)
    app_logger.info(f"Scratch directory: {scratch_dir}")
    ctx = RunContext(
        options=options,
        packages=packages,
        fedora_version=fedora_version,
        shell_version=shell_version,
        scratch_dir=scratch_dir,
    )
    try:
        yield ctx
    finally:
        ctx.close()
        shutil.rmtree(scratch_dir, ignore_errors=True)
        app_logger.info(f"Removed scratch directory {scratch_dir}")
