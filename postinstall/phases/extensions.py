# fedora-postinstall/postinstall/phases/extensions.py

import subprocess

from postinstall import console_output as con
from postinstall import gnome_extensions as ext
from postinstall.errors import ConfigurationError
from postinstall.logger_utils import app_logger

USER_THEME_UUID = "user-theme@gnome-shell-extensions.gcampax.github.com"


def _apply_shell_theme(ctx, setting: dict) -> None:
    """Soft write: the user-theme schema only exists once that extension is installed."""
    command = ["gsettings"]
    schemas = ext.extension_dir(ctx.home, USER_THEME_UUID) / "schemas"
    if schemas.is_dir():
        command += ["--schemadir", str(schemas)]
    command += ["set", setting["schema"], setting["key"], setting["value"]]
    try:
        ctx.run(command, capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        app_logger.warning(f"Could not set the shell theme: {e}")
        con.print_warning("Shell theme not applied; pick it in Tweaks after the next login.")


def run(ctx) -> None:
    cfg = ctx.section("extensions")
    try:
        descriptors = [ext.ExtensionDescriptor.from_config(entry) for entry in cfg.get("gnome_extensions", [])]
    except (ValueError, KeyError, TypeError) as e:
        raise ConfigurationError(f"Invalid entry in 'gnome_extensions': {e}") from e

    if not descriptors:
        con.print_warning("No GNOME extensions configured.")
        return

    con.print_sub_step(f"Installing {len(descriptors)} extension(s) for GNOME Shell {ctx.shell_version}...")
    report = ext.install_extensions(descriptors, ctx)

    summary = (
        f"installed: {len(report.installed)}, already present: {len(report.skipped)}, "
        f"not found: {len(report.missing)}"
    )
    if ctx.dry_run:
        summary += f", planned: {len(report.planned)}"
    con.print_info(f"Extensions {summary}")
    for uuid in report.missing:
        con.print_warning(f"Not installed: {uuid}")

    if cfg.get("shell_theme"):
        _apply_shell_theme(ctx, cfg["shell_theme"])
