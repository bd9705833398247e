# fedora-postinstall/postinstall/system_utils.py

import subprocess
import os
import shlex
from pathlib import Path
from typing import List, Optional, Union, Dict, Callable
import logging

from postinstall.logger_utils import app_logger as default_script_logger


Command = Union[str, List[str]]


def _display(command: Command) -> str:
    if isinstance(command, list):
        return subprocess.list2cmdline([str(item) for item in command])
    if isinstance(command, str):
        return command
    raise TypeError("Command must be a string or list of strings.")


def run_command(
    command: Command,
    capture_output: bool = False,
    check: bool = True,
    cwd: Optional[Union[str, Path]] = None,
    env_vars: Optional[Dict[str, str]] = None,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> subprocess.CompletedProcess:
    """
    Runs one external command and returns its CompletedProcess (returncode, stdout, stderr).

    With check=True a non-zero exit raises subprocess.CalledProcessError after the
    command's output has been logged. A missing executable raises FileNotFoundError.
    With dry_run=True nothing is executed and a successful empty result is returned.
    """
    log = logger or default_script_logger
    display_command_str = _display(command)

    current_env = None
    if env_vars:
        current_env = os.environ.copy()
        current_env.update(env_vars)

    if dry_run:
        log.info(f"[dry-run] Would execute: {display_command_str}")
        if print_fn_info:
            print_fn_info(f"[dim](dry-run)[/] {display_command_str}")
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    log.info(f"Executing: {display_command_str}")
    if print_fn_info:
        print_fn_info(f"Executing: {display_command_str}")

    try:
        process = subprocess.run(
            command,
            check=False,
            capture_output=capture_output,
            text=True,
            cwd=str(cwd) if cwd else None,
            env=current_env
        )
    except FileNotFoundError:
        if isinstance(command, list) and command:
            missing = str(command[0])
        else:
            missing = shlex.split(str(command))[0] if command else ""
        log.error(f"Command executable not found: '{missing}' (Full command attempted: '{display_command_str}')")
        raise

    if process.stdout and process.stdout.strip():
        log.debug(f"CMD STDOUT for '{display_command_str}':\n{process.stdout.strip()}")

    if process.stderr and process.stderr.strip():
        # Some tools write progress and notices to stderr even on success.
        log.warning(f"CMD STDERR for '{display_command_str}':\n{process.stderr.strip()}")

    if check and process.returncode != 0:
        log.error(f"Command '{display_command_str}' returned non-zero exit status {process.returncode}.")
        raise subprocess.CalledProcessError(
            returncode=process.returncode,
            cmd=command,
            output=process.stdout,
            stderr=process.stderr
        )

    return process


def command_output(command: Command, logger: Optional[logging.Logger] = None) -> str:
    """Runs a read-only query command and returns its stripped stdout."""
    return run_command(command, capture_output=True, check=True, logger=logger).stdout.strip()


# --- RPM / DNF Operations ---

def is_package_installed_rpm(package_name: str, logger: Optional[logging.Logger] = None) -> bool:
    """Checks if a package is already installed using 'rpm -q'."""
    log = logger or default_script_logger
    if not package_name:
        return False
    proc = run_command(["rpm", "-q", package_name], capture_output=True, check=False, logger=log)
    installed = proc.returncode == 0
    log.info(f"RPM package '{package_name}' is {'installed' if installed else 'not installed'}.")
    return installed


def is_package_available_dnf(package_name: str, logger: Optional[logging.Logger] = None) -> bool:
    """Checks whether the enabled repositories offer a package ('dnf list')."""
    proc = run_command(["dnf", "list", "--quiet", package_name], capture_output=True, check=False, logger=logger)
    return proc.returncode == 0


def install_dnf_packages(
    packages: List[str],
    allow_erasing: bool = False,
    extra_args: Optional[List[str]] = None,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Installs DNF packages in one transaction. Raises CalledProcessError on failure."""
    log = logger or default_script_logger
    if not packages:
        log.info("No DNF packages specified for installation.")
        return

    cmd = ["sudo", "dnf", "install", "-y"]
    if allow_erasing:
        cmd.append("--allowerasing")
    if extra_args:
        cmd.extend(extra_args)
    cmd.extend(packages)

    log.info(f"Installing DNF packages: {', '.join(packages)}")
    run_command(cmd, check=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log)


def remove_dnf_packages(
    packages: List[str],
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Removes the given packages, skipping ones that are not installed."""
    log = logger or default_script_logger
    installed = [pkg for pkg in packages if is_package_installed_rpm(pkg, logger=log)]
    if not installed:
        log.info(f"None of {packages} are installed, nothing to remove.")
        return
    run_command(["sudo", "dnf", "remove", "-y"] + installed, check=True, dry_run=dry_run,
                print_fn_info=print_fn_info, logger=log)


def upgrade_dnf_groups(
    groups: List[str],
    extra_args: Optional[List[str]] = None,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Runs 'dnf group upgrade' for each group, one transaction per group."""
    log = logger or default_script_logger
    for group in groups:
        cmd = ["sudo", "dnf", "group", "upgrade", "-y", group]
        if extra_args:
            cmd.extend(extra_args)
        log.info(f"Upgrading DNF group '{group}'.")
        run_command(cmd, check=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log)


def swap_dnf_packages(
    from_pkg: str,
    to_pkg: str,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Swaps one package for another with --allowerasing."""
    log = logger or default_script_logger
    if not is_package_installed_rpm(from_pkg, logger=log):
        log.info(f"'{from_pkg}' is not installed, installing '{to_pkg}' directly.")
        install_dnf_packages([to_pkg], allow_erasing=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log)
        return
    run_command(["sudo", "dnf", "swap", "-y", "--allowerasing", from_pkg, to_pkg],
                check=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log)


# --- Flatpak Operations ---

def ensure_flathub_remote_exists(
    remote_name: str,
    repo_url: str,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Adds the Flathub remote system-wide if it is not configured yet."""
    log = logger or default_script_logger
    run_command(
        ["sudo", "flatpak", "remote-add", "--system", "--if-not-exists", remote_name, repo_url],
        check=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log
    )
    log.info(f"Flatpak remote '{remote_name}' is configured (system-wide).")


def update_flatpak_apps(
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Updates every system-wide Flatpak application and runtime."""
    run_command(["sudo", "flatpak", "update", "--system", "--noninteractive", "-y"], check=True,
                dry_run=dry_run, print_fn_info=print_fn_info, logger=logger)


def install_flatpak_apps(
    app_ids: List[str],
    remote_name: str = "flathub",
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Installs (or updates) Flatpak applications system-wide in a single call.
    Already-installed apps are a no-op for flatpak thanks to --or-update.
    """
    log = logger or default_script_logger
    if not app_ids:
        log.info("No Flatpak applications specified for installation.")
        return
    cmd = ["sudo", "flatpak", "install", "--system", "--noninteractive", "--or-update", remote_name]
    cmd.extend(app_ids)
    log.info(f"Installing Flatpak applications: {', '.join(app_ids)}")
    run_command(cmd, check=True, dry_run=dry_run, print_fn_info=print_fn_info, logger=log)


# --- Desktop settings ---

def set_gsetting(
    schema: str,
    key: str,
    value: str,
    dry_run: bool = False,
    print_fn_info: Optional[Callable[[str], None]] = None,
    logger: Optional[logging.Logger] = None
) -> None:
    """Writes one key through gsettings for the current user."""
    run_command(["gsettings", "set", schema, key, value], check=True, dry_run=dry_run,
                print_fn_info=print_fn_info, logger=logger)
