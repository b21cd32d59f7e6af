from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from .models import RootConfig
from .settings import Settings

ACTIVATION_PREFIX = "@"
SERVER_EXE = "DayZServer_x64.exe" if os.name == "nt" else "DayZServer"
SERVER_CONFIG = "serverDZ.cfg"
SERVER_PROFILES = "profiles"
SERVER_KEYS = "keys"

@dataclass(frozen=True)
class Layout:
    install_dir: Path
    keys_dir: Path
    logs_dir: Path
    server_exe: Path
    steamcmd_dir: Path
    workshop_content: Path

    def activation_path(self, mod_name: str) -> Path:
        return self.install_dir / f"{ACTIVATION_PREFIX}{mod_name}"

    def workshop_item_dir(self, workshop_id: int) -> Path:
        return self.workshop_content / str(workshop_id)

def build_layout(settings: Settings, cfg: RootConfig) -> Layout:
    install = settings.install_dir.absolute()
    steamcmd = Path(cfg.server.steamcmd_dir)
    if not steamcmd.is_absolute():
        steamcmd = install / steamcmd
    return Layout(
        install_dir=install,
        keys_dir=install / SERVER_KEYS,
        logs_dir=install / "logs",
        server_exe=install / SERVER_EXE,
        steamcmd_dir=steamcmd,
        workshop_content=steamcmd / "steamapps" / "workshop" / "content" / str(cfg.server.game_app_id),
    )

def ensure_dirs(layout: Layout) -> None:
    for p in [layout.install_dir, layout.keys_dir, layout.logs_dir]:
        p.mkdir(parents=True, exist_ok=True)
