from __future__ import annotations
from typing import Callable, List, Optional
from .activation import Activation, build_activation
from .collection_fetcher import CollectionFetcher
from .config_loader import check_and_load
from .content_manager import ContentManager
from .errors import AggregateInstallError, SetupError
from .fs_layout import Layout, build_layout, ensure_dirs
from .launch_args import build_mod_args, build_server_command
from .models import DesiredModSet, RootConfig
from .planner import Plan, PlanAction
from .process_runner import ProcessRunner
from .reconciler import InstallationReconciler
from .resolver import ModSourceResolver
from .settings import Settings
from .steam_credentials import load_credentials
from .steamcmd import SteamCMD
from .ui import make_confirm
from .logging_setup import get_logger

log = get_logger("dayz.launcher.orch")

class Orchestrator:
    def __init__(self, settings: Settings, *, fetcher: Optional[CollectionFetcher] = None,
                 confirm: Optional[Callable[[str], bool]] = None):
        self.settings = settings
        self.runner = ProcessRunner()
        self.confirm = confirm or make_confirm(settings.assume_yes)
        self.fetcher = fetcher or CollectionFetcher(timeout=settings.collection_timeout)
        self.last_failed: List[str] = []
        self._cfg: Optional[RootConfig] = None
        self._resolver: Optional[ModSourceResolver] = None
        self._desired: Optional[DesiredModSet] = None
        self._steamcmd: Optional[SteamCMD] = None
        self._activation: Optional[Activation] = None

    @property
    def cfg(self) -> RootConfig:
        if self._cfg is None:
            self._cfg = check_and_load(self.settings.config_path, self.settings.install_dir)
        return self._cfg

    @property
    def layout(self) -> Layout:
        return build_layout(self.settings, self.cfg)

    @property
    def resolver(self) -> ModSourceResolver:
        if self._resolver is None:
            self._resolver = ModSourceResolver(self.cfg.mods, self.fetcher)
        return self._resolver

    def desired(self) -> DesiredModSet:
        if self._desired is None:
            self._desired = self.resolver.resolve()
        return self._desired

    @property
    def steamcmd(self) -> SteamCMD:
        if self._steamcmd is None:
            # offline runs never call SteamCMD, so they do not need a login
            creds = ("", None) if self.settings.offline else load_credentials(self.settings, self.cfg.server.username)
            self._steamcmd = SteamCMD(self.layout.steamcmd_dir, creds)
        return self._steamcmd

    @property
    def content(self) -> ContentManager:
        return ContentManager(
            self.layout, self.cfg.server, self.steamcmd,
            offline=self.settings.offline,
            validate_server=self.settings.validate_server,
            validate_mods=self.settings.validate_mods,
            max_attempts=self.settings.download_max_attempts,
            base_delay_s=self.settings.download_base_delay,
        )

    @property
    def activation(self) -> Activation:
        if self._activation is None:
            self._activation = build_activation(self.settings.activation, self.layout.install_dir)
        return self._activation

    def reconciler(self) -> InstallationReconciler:
        return InstallationReconciler(self.layout, self.content, self.activation,
                                      reserved_key=self.settings.reserved_key)

    def reload(self) -> None:
        """Forget the loaded config and resolved mods so the next step re-reads config.toml."""
        self._cfg = None
        self._resolver = None
        self._desired = None
        self._steamcmd = None

    # ---------------- Steps ----------------
    def prepare_environment(self) -> None:
        ensure_dirs(self.layout)

    def ensure_steamcmd(self) -> None:
        if self.settings.offline:
            log.info("Offline mode: not checking SteamCMD installation")
            return
        self.steamcmd.check_and_install(self.confirm)

    def ensure_server(self) -> None:
        self.content.ensure_server()

    def sync_mods(self) -> None:
        self.last_failed = []
        try:
            self.reconciler().reconcile(self.desired())
        except AggregateInstallError as e:
            self.last_failed = list(e.failed)
            raise

    def launch_args(self) -> List[str]:
        return build_mod_args(self.desired())

    def server_command(self) -> List[str]:
        return build_server_command(self.layout, self.desired())

    def start_server(self) -> int:
        exe = self.layout.server_exe
        if not exe.exists():
            raise SetupError(f"DayZ server executable not found: {exe}. Make sure the server has been downloaded/updated first.")
        rc = self.runner.run("server", self.server_command(), cwd=self.layout.install_dir)
        log.info("DayZ server has stopped")
        return rc

    def run(self, *, start: bool = True) -> int:
        self.prepare_environment()
        self.ensure_steamcmd()
        self.ensure_server()
        try:
            self.sync_mods()
        except AggregateInstallError as e:
            log.error("%s. Check the SteamCMD output above for details.", e)
            return 1
        if not start:
            log.info("Launch command: %s", " ".join(self.server_command()))
            return 0
        return self.start_server()

    # ---------------- Planning ----------------
    def plan(self) -> Plan:
        layout = self.layout
        desired = self.desired()
        actions: List[PlanAction] = []
        notes: List[str] = []
        ok = True

        if self.settings.offline:
            notes.append("offline=true: no SteamCMD calls; server and mods must already be cached.")
        else:
            if self.settings.validate_server:
                notes.append("validate_server=true: SteamCMD app_update would run with validate.")
            if self.settings.validate_mods:
                notes.append("validate_mods=true: SteamCMD workshop_download_item would run with validate.")

        actions.append(PlanAction(
            action="clear",
            target="activation entries and keys",
            detail=f"Remove every @* entry and every key except {self.settings.reserved_key}",
            paths={"install_dir": str(layout.install_dir), "keys_dir": str(layout.keys_dir)},
            will_change=True,
        ))

        exe_missing = not layout.server_exe.exists()
        if self.settings.offline and exe_missing:
            ok = False
        actions.append(PlanAction(
            action="ensure_server",
            target=f"app {self.cfg.server.server_app_id}",
            detail="skipped (offline)" if self.settings.offline else "SteamCMD app_update",
            paths={"exe": str(layout.server_exe)},
            will_change=not self.settings.offline,
            severity=("error" if self.settings.offline else "warn") if exe_missing else "info",
        ))

        for kind, entries in (("individual", desired.individual), ("collection", desired.collection)):
            for m in entries:
                cache = layout.workshop_item_dir(m.id)
                cached = cache.exists()
                if self.settings.offline and not cached:
                    ok = False
                    severity = "error"
                    detail = "not available offline"
                else:
                    severity = "info" if cached else "warn"
                    detail = "cache exists" if cached else "cache currently missing"
                actions.append(PlanAction(
                    action="install_mod",
                    target=f"{kind}:{m.name} ({m.id})",
                    detail=detail,
                    paths={"cache": str(cache), "link": str(layout.activation_path(m.name))},
                    will_change=True,
                    severity=severity,
                ))

        return Plan(ok=ok, actions=actions, notes=notes, launch_args=self.server_command())

    def stop(self) -> None:
        self.runner.stop_all()

    def status(self) -> dict:
        return self.runner.status()
