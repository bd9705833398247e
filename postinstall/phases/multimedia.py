# fedora-postinstall/postinstall/phases/multimedia.py

from postinstall import console_output as con
from postinstall import system_utils as util


def run(ctx) -> None:
    """Codecs from RPM Fusion: multimedia groups, full ffmpeg, gstreamer plugins."""
    cfg = ctx.section("multimedia")
    kw = dict(dry_run=ctx.dry_run, print_fn_info=con.print_info)

    con.print_sub_step("Updating multimedia groups...")
    util.upgrade_dnf_groups(cfg.get("dnf_groups", []), extra_args=cfg.get("dnf_group_args"), **kw)
    util.upgrade_dnf_groups(cfg.get("extra_dnf_groups", []), **kw)

    swap = cfg.get("dnf_swap")
    if swap:
        con.print_sub_step(f"Swapping {swap['from']} for {swap['to']}...")
        util.swap_dnf_packages(swap["from"], swap["to"], **kw)

    con.print_sub_step("Installing codec packages...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), **kw)
