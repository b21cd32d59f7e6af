from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable
from . import __version__
from .errors import SetupError
from .logging_setup import get_logger

log = get_logger("dayz.launcher.lock")

def check_if_initialized(lock_path: Path, confirm: Callable[[str], bool]) -> bool:
    """
    True when the directory is (now) managed by DZSM; False when the user
    declined to initialise it.
    """
    if lock_path.exists():
        log.info("Found existing DZSM setup in %s", lock_path.parent)
        return True

    log.warning("No existing DZSM setup found in %s", lock_path.parent)
    if not confirm(
        f'Use "{lock_path.parent}" as server directory? DZSM will install its configuration '
        "along with DayZ server and mod files there."
    ):
        return False

    create_lock_file(lock_path)
    log.info("Created new DZSM setup")
    return True

def create_lock_file(lock_path: Path) -> None:
    created = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock_path.write_text(
            f"Managed by DZSM v{__version__} - DayZ Server Manager\nCreated: {created}\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise SetupError(f"Failed to create '{lock_path}': {e}") from e
    log.info("Created lock file %s", lock_path)
