# fedora-postinstall/postinstall/phases/nvidia.py

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.errors import PostInstallError


def run(ctx) -> None:
    """
    Proprietary NVIDIA driver (akmod) from RPM Fusion nonfree. Off by default;
    enable with --nvidia.
    """
    cfg = ctx.section("nvidia")

    if not ctx.enabled("repos") and not util.is_package_installed_rpm("rpmfusion-nonfree-release"):
        raise PostInstallError(
            "RPM Fusion nonfree is required for the NVIDIA driver. Rerun with the repos module enabled."
        )

    con.print_warning("With Secure Boot enabled the akmod must be signed before the driver loads.")
    con.print_sub_step("Installing the NVIDIA driver...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)

    for schema, key, value in cfg.get("gsettings", []):
        util.set_gsetting(schema, key, value, dry_run=ctx.dry_run, print_fn_info=con.print_info)

    con.print_warning("The kernel module is built in the background; wait a few minutes before rebooting.")
