from __future__ import annotations
import json
from typing import Optional, Tuple
from .errors import SetupError
from .settings import Settings
from .logging_setup import get_logger

log = get_logger("dayz.launcher.steam")

def load_credentials(settings: Settings, config_username: str = "") -> Tuple[str, Optional[str]]:
    """
    Steam login for SteamCMD as (user, password).

    The password may be None: SteamCMD then uses its cached login or prompts
    on the console.
    """
    user = settings.steam_user.strip() or config_username.strip()
    pw: Optional[str] = settings.steam_password or None

    p = settings.steam_credentials_json
    if not p.is_absolute():
        p = settings.install_dir / p
    if p.is_file() and not (user and pw):
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
            user = user or str(data.get("steam_user", "")).strip()
            pw = pw or (str(data.get("steam_password", "")).strip() or None)
        except (OSError, ValueError) as e:
            log.warning("Failed to read %s: %s", p, e)

    if not user or user == "anonymous" or user == "your_steam_username":
        raise SetupError(
            "Steam username missing. Set [server].username in config.toml (the account must own DayZ) "
            "or provide STEAM_USER"
        )
    return user, pw
