from __future__ import annotations
import random
import time
from pathlib import Path
from typing import Callable
from .errors import DownloadError, NotAvailableOfflineError, SetupError, SteamCmdError
from .fs_layout import Layout
from .models import ModEntry, ServerSection
from .steamcmd import SteamCMD
from .logging_setup import get_logger

log = get_logger("dayz.launcher.content")

class ContentManager:
    """
    Download policy around SteamCMD: offline mode, validation and retries.

    ``ensure_item`` is the download service the reconciler talks to; it
    returns the absolute cache directory of a workshop item.
    """

    def __init__(
        self,
        layout: Layout,
        server: ServerSection,
        steamcmd: SteamCMD,
        *,
        offline: bool = False,
        validate_server: bool = True,
        validate_mods: bool = True,
        max_attempts: int = 5,
        base_delay_s: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.layout = layout
        self.server = server
        self.steamcmd = steamcmd
        self.offline = offline
        self.validate_server = validate_server
        self.validate_mods = validate_mods
        self.max_attempts = max(1, max_attempts)
        self.base_delay_s = base_delay_s
        self.max_delay_s = 600.0
        self._sleep = sleep

    # ---------------- Server app ----------------
    def ensure_server(self) -> None:
        exe = self.layout.server_exe
        if self.offline:
            if not exe.exists():
                raise SetupError(f"{exe.name} not found locally. Run without --offline to install it first.")
            log.info("Skipping server update check (offline mode enabled)")
            return

        log.info("Installing or updating DayZ server (app_id=%s) into %s validate=%s",
                 self.server.server_app_id, self.layout.install_dir, self.validate_server)
        try:
            self._with_retries(
                f"server app {self.server.server_app_id}",
                lambda: self.steamcmd.ensure_app(self.server.server_app_id, self.layout.install_dir,
                                                 validate=self.validate_server),
            )
        except SteamCmdError as e:
            raise SetupError(f"Server install/update failed: {e}") from e

    # ---------------- Workshop items ----------------
    def ensure_item(self, entry: ModEntry) -> Path:
        cache = self.layout.workshop_item_dir(entry.id).absolute()

        if self.offline:
            if not cache.exists():
                raise NotAvailableOfflineError(
                    entry.name,
                    f"Mod {entry} not found locally at {cache}. Run without --offline to download it first.",
                )
            log.info("Skipping update check for %s (offline mode enabled)", entry)
            return cache

        log.info("Downloading or checking for updates: %s validate=%s", entry, self.validate_mods)
        try:
            self._with_retries(
                str(entry),
                lambda: self.steamcmd.workshop_download(self.server.game_app_id, entry.id,
                                                        validate=self.validate_mods),
            )
        except SteamCmdError as e:
            raise DownloadError(entry.name, f"Workshop download failed for {entry}: {e.kind}: {e}") from e
        return cache

    def _with_retries(self, what: str, call: Callable[[], None]) -> None:
        # SteamCMD hits rate limits and dropped sessions; back off exponentially with jitter
        attempt = 0
        while True:
            attempt += 1
            try:
                call()
                return
            except SteamCmdError as e:
                if not e.transient or attempt >= self.max_attempts:
                    raise
                delay = min(self.max_delay_s, self.base_delay_s * (2 ** (attempt - 1)))
                sleep_s = delay + random.uniform(0.0, min(5.0, delay * 0.1))
                log.warning("SteamCMD transient error (%s) for %s. Retry %d/%d in %.1fs",
                            e.kind, what, attempt, self.max_attempts, sleep_s)
                self._sleep(sleep_s)
