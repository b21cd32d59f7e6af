from __future__ import annotations
from typing import Iterator, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

DAYZ_SERVER_APP_ID = 223350
DAYZ_GAME_APP_ID = 221100


class ModEntry(BaseModel):
    """A workshop package; ``name`` doubles as the ``@name`` activation directory."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., gt=0, description="Steam Workshop ID")
    name: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("mod name must not be empty")
        if any(sep in v for sep in ("/", "\\")) or v in (".", ".."):
            raise ValueError(f"mod name {v!r} cannot be used as a directory name")
        return v

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class DesiredModSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    individual: List[ModEntry] = Field(default_factory=list)
    collection: List[ModEntry] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.individual and not self.collection

    def all(self) -> Iterator[ModEntry]:
        yield from self.individual
        yield from self.collection

    def names(self) -> List[str]:
        return [m.name for m in self.all()]


class ServerSection(BaseModel):
    steamcmd_dir: str = "steamcmd"
    username: str = ""
    server_app_id: int = DAYZ_SERVER_APP_ID
    game_app_id: int = DAYZ_GAME_APP_ID


class ModsSection(BaseModel):
    mod_list: List[ModEntry] = Field(default_factory=list)
    mod_collection_url: Optional[str] = None

    def collection_url(self) -> Optional[str]:
        """Configured collection URL, ``None`` when unset or blank."""
        if self.mod_collection_url is None or not self.mod_collection_url.strip():
            return None
        return self.mod_collection_url.strip()


class RootConfig(BaseModel):
    server: ServerSection = Field(default_factory=ServerSection)
    mods: ModsSection = Field(default_factory=ModsSection)
