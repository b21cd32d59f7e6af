"""
activation.py — Exposing cached workshop content inside the server directory
-----------------------------------------------------------------------------
A mod is active when ``<install>/@<name>`` exists. How that entry is made is
up to the Activation implementation: a symbolic link where the OS permits
it, a plain copy where it does not (e.g. Windows without developer mode).
"""
from __future__ import annotations
import os
import shutil
import uuid
from pathlib import Path
from .logging_setup import get_logger

log = get_logger("dayz.launcher.activation")


def entry_exists(path: Path) -> bool:
    # broken symlinks count as present
    return path.is_symlink() or path.exists()


def _is_junction(path: Path) -> bool:
    is_junction = getattr(path, "is_junction", None)
    return bool(is_junction and is_junction())


def remove_entry(path: Path) -> None:
    """Remove a link, junction, file or directory without following links."""
    if path.is_symlink():
        path.unlink()
    elif _is_junction(path):
        os.rmdir(path)
    elif path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()


class Activation:
    name = "base"

    def link_dir(self, source: Path, link: Path) -> None:
        raise NotImplementedError

    def link_file(self, source: Path, link: Path) -> None:
        raise NotImplementedError


class SymlinkActivation(Activation):
    name = "symlink"

    def link_dir(self, source: Path, link: Path) -> None:
        link.symlink_to(source, target_is_directory=True)

    def link_file(self, source: Path, link: Path) -> None:
        link.symlink_to(source)


class CopyActivation(Activation):
    name = "copy"

    def link_dir(self, source: Path, link: Path) -> None:
        shutil.copytree(source, link, symlinks=True)

    def link_file(self, source: Path, link: Path) -> None:
        shutil.copy2(source, link)


def can_symlink(probe_dir: Path) -> bool:
    probe_dir.mkdir(parents=True, exist_ok=True)
    link = probe_dir / f".dzsm-symlink-probe-{uuid.uuid4().hex}"
    try:
        link.symlink_to(probe_dir, target_is_directory=True)
    except (OSError, NotImplementedError):
        return False
    try:
        link.unlink()
    except OSError as e:
        log.warning("Could not remove symlink probe %s: %s", link, e)
    return True


def build_activation(mode: str, probe_dir: Path) -> Activation:
    mode = (mode or "auto").strip().lower()
    if mode == "symlink":
        return SymlinkActivation()
    if mode == "copy":
        return CopyActivation()
    if mode != "auto":
        raise ValueError(f"Unknown activation mode {mode!r} (expected auto, symlink or copy)")
    if can_symlink(probe_dir):
        log.debug("Symlinks permitted in %s, activating mods via symlink", probe_dir)
        return SymlinkActivation()
    log.warning("Symlinks not permitted in %s, activating mods by copying", probe_dir)
    return CopyActivation()
