# fedora-postinstall/postinstall/phases/power.py

from postinstall import console_output as con
from postinstall import system_utils as util


def run(ctx) -> None:
    cfg = ctx.section("power")

    # tlp refuses to coexist with the power-profiles daemons.
    conflicting = cfg.get("conflicting_packages", [])
    if conflicting:
        con.print_sub_step("Removing conflicting power daemons...")
        util.remove_dnf_packages(conflicting, dry_run=ctx.dry_run, print_fn_info=con.print_info)

    con.print_sub_step("Installing power-management tooling...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)

    for service in cfg.get("enable_services", []):
        ctx.run(["sudo", "systemctl", "enable", "--now", service])

    units = cfg.get("mask_units", [])
    if units:
        ctx.run(["sudo", "systemctl", "mask"] + units)
