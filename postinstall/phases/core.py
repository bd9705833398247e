# fedora-postinstall/postinstall/phases/core.py

from postinstall import console_output as con
from postinstall import system_utils as util


def run(ctx) -> None:
    """Core command-line and desktop utilities."""
    packages = ctx.section("core").get("dnf_packages", [])
    if not packages:
        con.print_warning("No core packages configured.")
        return
    con.print_sub_step(f"Installing {len(packages)} core packages...")
    util.install_dnf_packages(packages, dry_run=ctx.dry_run, print_fn_info=con.print_info)
