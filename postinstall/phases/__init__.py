# fedora-postinstall/postinstall/phases/__init__.py

from . import repos
from . import core
from . import security
from . import multimedia
from . import power
from . import gaming
from . import flatpak_apps
from . import zsh
from . import themes
from . import extensions
from . import nvidia
from . import cleanup

# Execution order is the insertion order; keys match config.MODULE_NAMES.
PHASES = {
    "repos": {
        "name": "Repositories & Flathub 📦",
        "description": "System upgrade, RPM Fusion, openh264, Flatpak and the Flathub remote.",
        "handler": repos.run
    },
    "core": {
        "name": "Core Utilities 🧰",
        "description": "Command-line tools, GNOME Tweaks, dconf-editor, fontconfig.",
        "handler": core.run
    },
    "security": {
        "name": "Security 🛡️",
        "description": "ufw, fail2ban, ClamAV, rkhunter and Proton VPN.",
        "handler": security.run
    },
    "multimedia": {
        "name": "Multimedia Codecs 🎬",
        "description": "RPM Fusion multimedia groups, full ffmpeg and gstreamer plugins.",
        "handler": multimedia.run
    },
    "power": {
        "name": "Power Management 🔋",
        "description": "tlp and powertop in place of the power-profiles daemons.",
        "handler": power.run
    },
    "gaming": {
        "name": "Gaming 🎮",
        "description": "Steam, Lutris, Wine, gamemode and Flathub launchers.",
        "handler": gaming.run
    },
    "productivity": {
        "name": "Productivity Apps 📝",
        "description": "Editors, mail, notes and music from Flathub.",
        "handler": flatpak_apps.handler_for("productivity")
    },
    "creative": {
        "name": "Creative Apps 🎨",
        "description": "Krita, GIMP, Inkscape, darktable and kdenlive from Flathub.",
        "handler": flatpak_apps.handler_for("creative")
    },
    "comm": {
        "name": "Communication Apps 💬",
        "description": "Signal, SimpleX and Proton Mail Bridge from Flathub.",
        "handler": flatpak_apps.handler_for("comm")
    },
    "zsh": {
        "name": "Zsh & Powerlevel10k 🐚",
        "description": "Zsh login shell, oh-my-zsh, powerlevel10k and plugins.",
        "handler": zsh.run
    },
    "themes": {
        "name": "Themes & Fonts 🖼️",
        "description": "Qogir GTK and icon themes, MesloLGS NF fonts, desktop preferences.",
        "handler": themes.run
    },
    "extensions": {
        "name": "GNOME Extensions 🧩",
        "description": "Extensions from extensions.gnome.org matched to the running shell.",
        "handler": extensions.run
    },
    "nvidia": {
        "name": "NVIDIA Driver 🖥️",
        "description": "Proprietary akmod driver from RPM Fusion nonfree (off by default).",
        "handler": nvidia.run
    },
    "cleanup": {
        "name": "Cleanup 🧹",
        "description": "dnf autoremove, dnf clean and leftover temp files.",
        "handler": cleanup.run
    },
}
