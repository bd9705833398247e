# fedora-postinstall/postinstall/config.py

from pathlib import Path

# --- Constants ---
APP_NAME = "fedora-postinstall"
CONFIG_FILE_NAME = "packages.json"
DEFAULT_CONFIG_PATH = Path(__file__).parent / CONFIG_FILE_NAME

# Module name -> enabled by default. Order is the execution order.
MODULE_DEFAULTS = {
    "repos": True,
    "core": True,
    "security": True,
    "multimedia": True,
    "power": True,
    "gaming": True,
    "productivity": True,
    "creative": True,
    "comm": True,
    "zsh": True,
    "themes": True,
    "extensions": True,
    "nvidia": False,
    "cleanup": True,
}
MODULE_NAMES = tuple(MODULE_DEFAULTS)

# --- Preflight ---
REQUIRED_COMMANDS = (
    "sudo", "dnf", "rpm", "flatpak", "git",
    "gsettings", "gnome-extensions", "gnome-shell", "ping", "fc-cache",
)
NETWORK_PROBE_HOST = "1.1.1.1"
NETWORK_PROBE_TIMEOUT = 5

# --- Privilege session ---
SUDO_REFRESH_INTERVAL = 60

# --- Downloads ---
FETCH_ATTEMPTS = 3
FETCH_BACKOFF_SECONDS = 2
HTTP_TIMEOUT = 60
USER_AGENT = f"{APP_NAME}/1.0"

# --- GNOME extensions catalog (extensions.gnome.org) ---
EGO_BASE_URL = "https://extensions.gnome.org"
EGO_QUERY_URL = EGO_BASE_URL + "/extension-query/"
EGO_RESULTS_PER_PAGE = 25
EGO_MAX_PAGES = 5
EGO_DOWNLOAD_URL_TEMPLATE = EGO_BASE_URL + "/download-extension/{uuid}.shell-extension.zip?version_tag={version_tag}"
USER_EXTENSIONS_BASE_DIR_REL_PATH = Path(".local/share/gnome-shell/extensions")

# --- Flatpak ---
FLATHUB_REMOTE_NAME = "flathub"
FLATHUB_REPO_URL = "https://dl.flathub.org/repo/flathub.flatpakrepo"

# --- User paths (relative to $HOME) ---
USER_FONTS_REL_PATH = Path(".local/share/fonts")
USER_AUTOSTART_REL_PATH = Path(".config/autostart")
