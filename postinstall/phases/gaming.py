# fedora-postinstall/postinstall/phases/gaming.py

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import FLATHUB_REMOTE_NAME


def run(ctx) -> None:
    """Steam, Lutris, Wine and friends from DNF; launchers from Flathub."""
    cfg = ctx.section("gaming")

    con.print_sub_step("Installing gaming packages...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)

    con.print_sub_step("Installing gaming Flatpaks...")
    util.install_flatpak_apps(cfg.get("flatpak_apps", []), remote_name=FLATHUB_REMOTE_NAME,
                              dry_run=ctx.dry_run, print_fn_info=con.print_info)
