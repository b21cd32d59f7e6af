"""
reconciler.py — Mod installation for the DayZ server directory
---------------------------------------------------------------
Every run starts from a clean slate: all ``@*`` entries and mirrored keys are
removed, then each desired mod is downloaded (or taken from the cache),
activated as ``@<name>`` and its keys mirrored into ``keys/``.
"""
from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Protocol
from .activation import Activation, entry_exists, remove_entry
from .errors import AggregateInstallError, InstallError, IntegrityError, KeyMirrorError, LinkError
from .fs_layout import ACTIVATION_PREFIX, Layout
from .models import DesiredModSet, ModEntry
from .logging_setup import get_logger

log = get_logger("dayz.launcher.mods")

KEY_SUFFIX = ".bikey"


class DownloadService(Protocol):
    def ensure_item(self, entry: ModEntry) -> Path: ...


class InstallationReconciler:
    def __init__(self, layout: Layout, downloads: DownloadService, activation: Activation,
                 *, reserved_key: str = "dayz.bikey"):
        self.layout = layout
        self.downloads = downloads
        self.activation = activation
        self.reserved_key = reserved_key

    # ---------------- Clear ----------------
    def clear(self) -> int:
        """Best-effort removal of all activation entries and non-reserved keys."""
        log.info("Cleaning up previous mod installations...")
        removed = self._clear_activation_entries() + self._clear_keys()
        log.info("Previous mod installations cleaned up (%d entries removed)", removed)
        return removed

    def _clear_activation_entries(self) -> int:
        removed = 0
        try:
            entries = sorted(self.layout.install_dir.iterdir())
        except OSError as e:
            log.warning("Cannot list %s: %s", self.layout.install_dir, e)
            return 0
        for p in entries:
            if not p.name.startswith(ACTIVATION_PREFIX):
                continue
            try:
                remove_entry(p)
                removed += 1
                log.debug("Removed %s", p.name)
            except OSError as e:
                log.warning("Failed to remove %s: %s", p, e)
        return removed

    def _clear_keys(self) -> int:
        keys_dir = self.layout.keys_dir
        if not keys_dir.is_dir():
            return 0
        log.debug("Clearing keys directory (keeping %s)", self.reserved_key)
        removed = 0
        try:
            entries = sorted(keys_dir.iterdir())
        except OSError as e:
            log.warning("Cannot list %s: %s", keys_dir, e)
            return 0
        for p in entries:
            if p.name.lower() == self.reserved_key.lower():
                continue
            if p.is_dir() and not p.is_symlink():
                continue
            try:
                p.unlink()
                removed += 1
            except OSError as e:
                log.warning("Failed to remove key %s: %s", p, e)
        return removed

    # ---------------- Install ----------------
    def reconcile(self, desired: DesiredModSet) -> None:
        self.clear()

        if desired.is_empty():
            log.info("No mods configured, skipping mod installation")
            return

        self.layout.keys_dir.mkdir(parents=True, exist_ok=True)
        log.info("Installing %d individual and %d collection mod(s)...",
                 len(desired.individual), len(desired.collection))

        failed: List[str] = []
        for entry in desired.all():
            try:
                self.install_one(entry)
            except InstallError as e:
                log.error("Failed to install mod %s: %s", entry, e)
                failed.append(entry.name)

        if failed:
            log.error("Failed to install %d mod(s): %s", len(failed), ", ".join(failed))
            raise AggregateInstallError(failed)
        log.info("All mods installed successfully")

    def install_one(self, entry: ModEntry) -> None:
        log.info("Installing %s...", entry)

        source = self.downloads.ensure_item(entry)
        if not source.exists():
            raise IntegrityError(
                entry.name,
                f"Mod directory not found after download: {source}. Make sure the mod was downloaded successfully via SteamCMD",
            )

        target = self.layout.activation_path(entry.name)
        if entry_exists(target):
            log.debug("Activation entry already exists: %s", target)
        else:
            try:
                self.activation.link_dir(source, target)
            except OSError as e:
                raise LinkError(entry.name, f"Failed to activate {source} as {target} ({self.activation.name}): {e}") from e

        keys = _find_keys_dir(source)
        if keys is None:
            log.debug("No keys required for %s (client-side or configuration mod)", entry)
        else:
            self._mirror_keys(entry, keys)

        log.info("Successfully installed %s", entry)

    def _mirror_keys(self, entry: ModEntry, keys: Path) -> None:
        try:
            self.layout.keys_dir.mkdir(parents=True, exist_ok=True)
            key_files = sorted(p for p in keys.iterdir() if p.is_file() and p.suffix.lower() == KEY_SUFFIX)
        except OSError as e:
            raise KeyMirrorError(entry.name, f"Failed to read keys directory {keys}: {e}") from e

        for key_file in key_files:
            target = self.layout.keys_dir / key_file.name
            if entry_exists(target):
                log.debug("Key already exists, skipping: %s", key_file.name)
                continue
            try:
                self.activation.link_file(key_file, target)
            except OSError as e:
                raise KeyMirrorError(entry.name, f"Failed to mirror key {key_file} to {target}: {e}") from e
            log.debug("Linked key: %s", key_file.name)


def _find_keys_dir(source: Path) -> Optional[Path]:
    exact = source / "keys"
    if exact.is_dir():
        return exact
    try:
        for p in source.iterdir():
            if p.is_dir() and p.name.lower() == "keys":
                return p
    except OSError:
        return None
    return None
