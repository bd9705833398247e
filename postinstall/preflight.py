# fedora-postinstall/postinstall/preflight.py
"""
Checks that must pass before anything on the system is touched.

The order is fixed: superuser check, then required executables, then a
single network probe. Later steps write into $HOME and download from the
internet, so a failure here aborts the run before any of them start.
"""

import os
import shutil
import subprocess
from typing import Iterable, List

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import NETWORK_PROBE_HOST, NETWORK_PROBE_TIMEOUT, REQUIRED_COMMANDS
from postinstall.errors import PreflightError
from postinstall.logger_utils import app_logger


def check_not_root() -> None:
    if os.geteuid() == 0:
        app_logger.error("Refusing to run as root.")
        raise PreflightError("Do not run this script as root. Run it as your desktop user; sudo is requested when needed.")


def missing_commands(required: Iterable[str]) -> List[str]:
    return [cmd for cmd in required if shutil.which(cmd) is None]


def check_required_commands(required: Iterable[str] = REQUIRED_COMMANDS) -> None:
    missing = missing_commands(required)
    if missing:
        app_logger.error(f"Missing required commands: {missing}")
        raise PreflightError(f"Required command(s) not found: {', '.join(missing)}")
    app_logger.info("All required commands are present.")


def check_network(host: str = NETWORK_PROBE_HOST, timeout: int = NETWORK_PROBE_TIMEOUT) -> None:
    try:
        proc = util.run_command(
            ["ping", "-c", "1", "-W", str(timeout), host],
            capture_output=True, check=False
        )
    except (FileNotFoundError, subprocess.SubprocessError) as e:
        raise PreflightError(f"Network check could not be run: {e}") from e
    if proc.returncode != 0:
        app_logger.error(f"Network probe to {host} failed (exit {proc.returncode}).")
        raise PreflightError("No network connectivity. Please check your connection.")
    app_logger.info(f"Network probe to {host} succeeded.")


def run_preflight(
    required: Iterable[str] = REQUIRED_COMMANDS,
    probe_host: str = NETWORK_PROBE_HOST
) -> None:
    """Runs every preflight check in order. Raises PreflightError on the first failure."""
    check_not_root()
    con.print_sub_step("Checking required commands...")
    check_required_commands(required)
    con.print_sub_step(f"Checking network connectivity ({probe_host})...")
    check_network(probe_host)
    con.print_success("Preflight checks passed.")
