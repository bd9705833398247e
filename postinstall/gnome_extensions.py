# fedora-postinstall/postinstall/gnome_extensions.py
"""
GNOME Shell extension installation from extensions.gnome.org (EGO).

For every extension descriptor:
  1. skip if ~/.local/share/gnome-shell/extensions/<uuid> already exists (no network),
  2. search the EGO catalog for the uuid and match it exactly, page by page,
  3. pick the package version for the running shell (exact match, else the highest),
  4. download the zip into the scratch directory (retried, see net_utils),
  5. unpack it into the per-user extension directory named by the uuid,
  6. enable it with `gnome-extensions enable`. Failing to enable only warns,
     the shell usually picks new extensions up after the next login.

A catalog miss or a missing version map warns and moves on to the next
extension. Download and unpack failures abort the run.
"""

import logging
import shutil
import subprocess
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import requests

from postinstall import console_output as con
from postinstall import net_utils
from postinstall.config import (
    EGO_DOWNLOAD_URL_TEMPLATE,
    EGO_MAX_PAGES,
    EGO_QUERY_URL,
    EGO_RESULTS_PER_PAGE,
    USER_EXTENSIONS_BASE_DIR_REL_PATH,
)
from postinstall.errors import ExtensionInstallError
from postinstall.logger_utils import app_logger


@dataclass(frozen=True)
class ExtensionDescriptor:
    """Catalog search name plus author suffix, e.g. ('dash-to-dock', 'micxgx.gmail.com')."""
    name: str
    author: str

    @property
    def uuid(self) -> str:
        return f"{self.name}@{self.author}"

    @classmethod
    def from_config(cls, entry: Any) -> "ExtensionDescriptor":
        """Accepts {"name": ..., "author": ...} or a plain "name@author" string."""
        if isinstance(entry, str):
            name, sep, author = entry.partition("@")
            if not sep or not name or not author:
                raise ValueError(f"Extension entry '{entry}' is not of the form name@author")
            return cls(name, author)
        if isinstance(entry, Mapping) and entry.get("name") and entry.get("author"):
            return cls(str(entry["name"]), str(entry["author"]))
        raise ValueError(f"Invalid extension entry: {entry!r}")


@dataclass(frozen=True)
class ResolvedExtension:
    uuid: str
    pk: int
    shell_version: str
    version_tag: int
    version: Optional[int] = None

    @property
    def download_url(self) -> str:
        return EGO_DOWNLOAD_URL_TEMPLATE.format(uuid=self.uuid, version_tag=self.version_tag)


@dataclass
class InstallReport:
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    planned: List[str] = field(default_factory=list)


# --- Version negotiation ---

def catalog_shell_version(shell_version: str) -> str:
    """
    Normalises a running shell version to the form EGO uses as map keys.
    GNOME 40+ is keyed by major version ('46.2' -> '46'), 3.x by major.minor ('3.38.4' -> '3.38').
    """
    parts = shell_version.strip().split(".")
    if not parts or not parts[0].isdigit():
        return shell_version.strip()
    if int(parts[0]) >= 40 or len(parts) == 1:
        return parts[0]
    return ".".join(parts[:2])


def _version_sort_key(version: str) -> Tuple[int, ...]:
    # Non-numeric components (e.g. '47.beta') sort below any release number.
    return tuple(int(part) if part.isdigit() else -1 for part in version.split("."))


def negotiate_version(
    version_map: Mapping[str, Any],
    shell_version: str
) -> Optional[Tuple[str, Any]]:
    """
    Picks the (shell_version_key, entry) to install.

    An exact match on the normalised running version wins. Otherwise the entry with the
    numerically highest shell version is used; map order is irrelevant.
    Returns None for an empty map.
    """
    if not version_map:
        return None
    wanted = catalog_shell_version(shell_version)
    if wanted in version_map:
        return wanted, version_map[wanted]
    if shell_version in version_map:
        return shell_version, version_map[shell_version]
    best = max(version_map, key=_version_sort_key)
    return best, version_map[best]


# --- Catalog ---

class EgoCatalog:
    """Read-only client for the extensions.gnome.org query API."""

    def __init__(self, session: requests.Session, query_url: str = EGO_QUERY_URL,
                 logger: Optional[logging.Logger] = None):
        self.session = session
        self.query_url = query_url
        self.log = logger or app_logger

    def lookup(self, descriptor: ExtensionDescriptor) -> Optional[Dict[str, Any]]:
        """Returns the catalog entry whose uuid matches the descriptor, or None."""
        seen = 0
        page, numpages = 1, 1
        while page <= min(numpages, EGO_MAX_PAGES):
            params = {"search": descriptor.uuid, "n_per_page": str(EGO_RESULTS_PER_PAGE), "page": str(page)}
            data = net_utils.fetch_json(self.session, self.query_url, params=params, logger=self.log)
            if not isinstance(data, dict):
                break
            extensions = data.get("extensions") or []
            for entry in extensions:
                if entry.get("uuid") == descriptor.uuid:
                    return entry
            seen += len(extensions)
            numpages = int(data.get("numpages") or 1)
            page += 1
        self.log.warning(f"No catalog entry with uuid '{descriptor.uuid}' among {seen} result(s) for '{descriptor.name}'.")
        return None

    def resolve(self, descriptor: ExtensionDescriptor, shell_version: str) -> Optional[ResolvedExtension]:
        entry = self.lookup(descriptor)
        if entry is None:
            return None
        negotiated = negotiate_version(entry.get("shell_version_map") or {}, shell_version)
        if negotiated is None:
            self.log.warning(f"Catalog entry for '{descriptor.uuid}' has no shell versions.")
            return None
        key, version_entry = negotiated
        if key != catalog_shell_version(shell_version):
            self.log.info(f"'{descriptor.uuid}' has no build for GNOME {shell_version}; using the one for {key}.")
        if isinstance(version_entry, Mapping):
            version_tag, version = version_entry.get("pk"), version_entry.get("version")
        else:
            version_tag, version = version_entry, None
        if version_tag is None:
            self.log.warning(f"Catalog entry for '{descriptor.uuid}' (shell {key}) has no version tag.")
            return None
        return ResolvedExtension(
            uuid=descriptor.uuid,
            pk=entry.get("pk"),
            shell_version=key,
            version_tag=version_tag,
            version=version,
        )


# --- Installation ---

def extension_dir(home: Path, uuid: str) -> Path:
    return home / USER_EXTENSIONS_BASE_DIR_REL_PATH / uuid


def is_installed(home: Path, uuid: str) -> bool:
    return extension_dir(home, uuid).is_dir()


def extract_archive(archive: Path, target_dir: Path) -> None:
    """Unpacks an extension zip into target_dir. Removes target_dir again on failure."""
    target_dir.mkdir(parents=True, exist_ok=True)
    root = target_dir.resolve()
    try:
        with zipfile.ZipFile(archive) as zf:
            for member in zf.namelist():
                destination = (root / member).resolve()
                if destination != root and root not in destination.parents:
                    raise ExtensionInstallError(f"Archive member '{member}' escapes {target_dir}")
            zf.extractall(root)
    except (zipfile.BadZipFile, ExtensionInstallError) as e:
        shutil.rmtree(target_dir, ignore_errors=True)
        if isinstance(e, ExtensionInstallError):
            raise
        raise ExtensionInstallError(f"{archive.name} is not a valid extension archive: {e}") from e


def activate(uuid: str, ctx) -> bool:
    """Enables an extension. Never raises for a failed enable."""
    try:
        ctx.run(["gnome-extensions", "enable", uuid], capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        app_logger.warning(f"Could not enable '{uuid}': {e}")
        con.print_warning(f"Extension {uuid} will be active after the next login.")
        return False
    return True


def install_extension(descriptor: ExtensionDescriptor, ctx, catalog: EgoCatalog) -> str:
    """Installs one extension. Returns 'skipped', 'missing', 'planned' or 'installed'."""
    uuid = descriptor.uuid
    target = extension_dir(ctx.home, uuid)

    if target.is_dir():
        con.print_info(f"{uuid} is already installed, skipping.")
        app_logger.info(f"Extension '{uuid}' already present at {target}.")
        return "skipped"

    if ctx.dry_run:
        con.print_info(f"[dim](dry-run)[/] would install and enable {uuid}")
        return "planned"

    resolved = catalog.resolve(descriptor, ctx.shell_version)
    if resolved is None:
        con.print_warning(f"No compatible catalog entry for {uuid}, skipping it.")
        return "missing"

    con.print_info(f"Installing {uuid} (shell {resolved.shell_version}, version {resolved.version or resolved.version_tag})...")
    archive = ctx.scratch_dir / f"{uuid}.zip"
    net_utils.download_file(catalog.session, resolved.download_url, archive)
    extract_archive(archive, target)
    app_logger.info(f"Extension '{uuid}' unpacked into {target}.")

    if activate(uuid, ctx):
        con.print_success(f"Extension {uuid} installed and enabled.")
    return "installed"


def install_extensions(
    descriptors: Iterable[ExtensionDescriptor],
    ctx,
    session: Optional[requests.Session] = None
) -> InstallReport:
    """Installs extensions one after another and reports what happened to each."""
    catalog = EgoCatalog(session or ctx.session)
    report = InstallReport()
    for descriptor in descriptors:
        outcome = install_extension(descriptor, ctx, catalog)
        getattr(report, outcome).append(descriptor.uuid)
    app_logger.info(f"Extension results: {report}")
    return report
