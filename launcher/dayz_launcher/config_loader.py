from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any, Dict
from pydantic import ValidationError
from .errors import ConfigCreatedError, ConfigError
from .models import RootConfig
from .logging_setup import get_logger

log = get_logger("dayz.launcher.config")

DEFAULT_CONFIG = """\
# DZSM - DayZ Server Manager configuration

[server]
# Directory SteamCMD lives in (relative to the server directory or absolute)
steamcmd_dir = "steamcmd"
# Steam account that owns DayZ ('anonymous' will NOT work)
username = "your_steam_username"

[mods]
# Optional Steam Workshop collection, loaded via -mod=
mod_collection_url = ""

# Individually configured mods, loaded via -serverMod=
# mod_list = [
#   { id = 1559212036, name = "CF" },
#   { id = 1564026768, name = "Community-Online-Tools" },
# ]
mod_list = []
"""

def load_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

def parse_config(data: Dict[str, Any], *, source: str = "<config>") -> RootConfig:
    try:
        return RootConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}:\n{e}") from e

def load_config(config_path: Path) -> RootConfig:
    log.info("Loading config: %s", config_path)
    return parse_config(load_toml(config_path), source=str(config_path))

def log_summary(cfg: RootConfig, install_dir: Path) -> None:
    log.info("=== Configuration Summary ===")
    log.info("Server: steamcmd_dir=%s username=%s install_dir=%s",
             cfg.server.steamcmd_dir, cfg.server.username, install_dir)
    if not cfg.mods.mod_list:
        log.info("Individual mods: (none)")
    else:
        log.info("Individual mods:")
        for i, m in enumerate(cfg.mods.mod_list, start=1):
            log.info("  %d. %s (%s)", i, m.name, m.id)
    url = cfg.mods.collection_url()
    if url:
        log.info("Collection URL: %s", url)

def check_and_load(config_path: Path, install_dir: Path) -> RootConfig:
    """
    Load config.toml, or write the default one and stop so it can be edited.
    """
    if config_path.exists():
        log.info("Configuration found: %s", config_path)
        cfg = load_config(config_path)
        log_summary(cfg, install_dir)
        return cfg

    log.warning("Configuration missing, creating default: %s", config_path)
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write default config {config_path}: {e}") from e
    log_summary(parse_config(tomllib.loads(DEFAULT_CONFIG), source="defaults"), install_dir)
    log.warning("IMPORTANT: edit '%s' before running again: set your Steam username "
                "(the account must own DayZ), adjust steamcmd_dir and add mods. "
                "'anonymous' login will NOT work.", config_path.name)
    raise ConfigCreatedError(
        f"New configuration created - please customize '{config_path}' before running again"
    )
