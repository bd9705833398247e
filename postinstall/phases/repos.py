# fedora-postinstall/postinstall/phases/repos.py

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import FLATHUB_REMOTE_NAME, FLATHUB_REPO_URL
from postinstall.logger_utils import app_logger


def run(ctx) -> None:
    """
    Repository setup: system upgrade, RPM Fusion and the core group, extra
    Fedora repos, Flatpak with the Flathub remote, then a Flatpak update.
    Every later phase relies on this one.
    """
    cfg = ctx.section("repos")

    con.print_sub_step("Updating the system...")
    ctx.run(["sudo", "dnf", "upgrade", "--refresh", "-y"])

    rpmfusion = [url.format(fedora_version=ctx.fedora_version) for url in cfg.get("rpmfusion_urls", [])]
    if rpmfusion:
        con.print_sub_step(f"Enabling RPM Fusion for Fedora {ctx.fedora_version}...")
        util.install_dnf_packages(rpmfusion, dry_run=ctx.dry_run, print_fn_info=con.print_info)

    groups = cfg.get("dnf_groups", [])
    if groups:
        con.print_sub_step(f"Upgrading DNF groups: {', '.join(groups)}...")
        util.upgrade_dnf_groups(groups, dry_run=ctx.dry_run, print_fn_info=con.print_info)

    for repo_id in cfg.get("enable_repos", []):
        con.print_sub_step(f"Enabling repository '{repo_id}'...")
        ctx.run(["sudo", "dnf", "config-manager", "setopt", f"{repo_id}.enabled=1"])

    con.print_sub_step("Setting up Flatpak...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)

    for package in cfg.get("optional_dnf_packages", []):
        if util.is_package_available_dnf(package):
            util.install_dnf_packages([package], dry_run=ctx.dry_run, print_fn_info=con.print_info)
        else:
            app_logger.warning(f"Optional package '{package}' is not available.")
            con.print_warning(f"{package} not found in Fedora {ctx.fedora_version}. Skipping.")

    util.ensure_flathub_remote_exists(
        FLATHUB_REMOTE_NAME, FLATHUB_REPO_URL,
        dry_run=ctx.dry_run, print_fn_info=con.print_info
    )
    con.print_sub_step("Updating Flatpak applications...")
    util.update_flatpak_apps(dry_run=ctx.dry_run, print_fn_info=con.print_info)
