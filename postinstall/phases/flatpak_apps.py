# fedora-postinstall/postinstall/phases/flatpak_apps.py
"""Phases that only install a list of Flatpak applications (productivity, creative, comm)."""

from typing import Callable

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import FLATHUB_REMOTE_NAME


def install_module_apps(ctx, module: str) -> None:
    apps = ctx.section(module).get("flatpak_apps", [])
    if not apps:
        con.print_warning(f"No Flatpak applications configured for '{module}'.")
        return
    con.print_sub_step(f"Installing {len(apps)} Flatpak application(s)...")
    util.install_flatpak_apps(apps, remote_name=FLATHUB_REMOTE_NAME,
                              dry_run=ctx.dry_run, print_fn_info=con.print_info)


def handler_for(module: str) -> Callable[..., None]:
    def run(ctx) -> None:
        install_module_apps(ctx, module)
    run.__name__ = f"run_{module}"
    return run
