# fedora-postinstall/postinstall/phases/security.py

from typing import Any, Dict

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import FLATHUB_REMOTE_NAME, USER_AUTOSTART_REL_PATH


def render_autostart_entry(entry: Dict[str, Any]) -> str:
    """Builds a freedesktop autostart .desktop file."""
    lines = [
        "[Desktop Entry]",
        "Type=Application",
        f"Name={entry['name']}",
        f"Exec={entry['exec']}",
    ]
    if entry.get("icon"):
        lines.append(f"Icon={entry['icon']}")
    lines += [
        "Terminal=false",
        "X-GNOME-Autostart-enabled=true",
    ]
    return "\n".join(lines) + "\n"


def _configure_firewall(ctx) -> None:
    con.print_sub_step("Configuring ufw defaults...")
    ctx.run(["sudo", "ufw", "default", "deny", "incoming"])
    ctx.run(["sudo", "ufw", "default", "allow", "outgoing"])
    ctx.run(["sudo", "ufw", "--force", "enable"])


def run(ctx) -> None:
    cfg = ctx.section("security")

    con.print_sub_step("Installing security tooling...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)

    for service in cfg.get("services", []):
        ctx.run(["sudo", "systemctl", "enable", "--now", service])

    if "ufw" in cfg.get("services", []):
        _configure_firewall(ctx)

    con.print_sub_step("Updating ClamAV signatures...")
    ctx.run(["sudo", "freshclam"])

    util.install_flatpak_apps(cfg.get("flatpak_apps", []), remote_name=FLATHUB_REMOTE_NAME,
                              dry_run=ctx.dry_run, print_fn_info=con.print_info)

    autostart = cfg.get("autostart")
    if autostart:
        path = ctx.home / USER_AUTOSTART_REL_PATH / autostart["file_name"]
        con.print_sub_step(f"Adding {autostart['name']} to session autostart...")
        ctx.write_file(path, render_autostart_entry(autostart))
