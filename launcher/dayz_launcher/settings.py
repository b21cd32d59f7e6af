from __future__ import annotations
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    install_dir: Path = Field(default_factory=Path.cwd, alias="DZSM_INSTALL_DIR")
    config_file: str = Field(default="config.toml", alias="DZSM_CONFIG_FILE")
    lock_file: str = Field(default=".dzsm.lock", alias="DZSM_LOCK_FILE")

    steam_user: str = Field(default="", alias="STEAM_USER")
    steam_password: str = Field(default="", alias="STEAM_PASSWORD")
    steam_credentials_json: Path = Field(default=Path("steam_credentials.json"), alias="STEAM_CREDENTIALS_JSON")

    offline: bool = Field(default=False, alias="DZSM_OFFLINE")
    validate_server: bool = Field(default=True, alias="DZSM_VALIDATE_SERVER")
    validate_mods: bool = Field(default=True, alias="DZSM_VALIDATE_MODS")
    assume_yes: bool = Field(default=False, alias="DZSM_ASSUME_YES")

    # "auto" probes symlink permission and falls back to copying
    activation: str = Field(default="auto", alias="DZSM_ACTIVATION")
    reserved_key: str = Field(default="dayz.bikey", alias="DZSM_RESERVED_KEY")

    collection_timeout: float = Field(default=30.0, alias="DZSM_COLLECTION_TIMEOUT")
    download_max_attempts: int = Field(default=5, alias="DZSM_DOWNLOAD_MAX_ATTEMPTS")
    download_base_delay: float = Field(default=5.0, alias="DZSM_DOWNLOAD_BASE_DELAY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @property
    def config_path(self) -> Path:
        return self.install_dir / self.config_file

    @property
    def lock_path(self) -> Path:
        return self.install_dir / self.lock_file
