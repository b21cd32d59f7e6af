"""
Exception types raised by the launcher.

Only ``SetupError`` and ``ConfigError`` stop a run before mods are touched.
Per-mod ``InstallError`` subclasses are collected by the reconciler and
surfaced once as ``AggregateInstallError`` after every mod was attempted.
``FetchError`` never leaves the resolver.
"""
from __future__ import annotations
from typing import List, Optional, Sequence


class LauncherError(RuntimeError):
    pass


class ConfigError(LauncherError):
    pass


class ConfigCreatedError(ConfigError):
    """A default config.toml was written and has to be edited first."""


class ModNameConflictError(ConfigError):
    def __init__(self, conflicts: Sequence[str]):
        self.conflicts: List[str] = list(conflicts)
        super().__init__(
            "Mod name conflict in activation directory namespace: " + "; ".join(self.conflicts)
        )


class SetupError(LauncherError):
    pass


class FetchError(LauncherError):
    INVALID_URL = "INVALID_URL"
    HTTP = "HTTP"
    NETWORK = "NETWORK"
    NOT_A_COLLECTION = "NOT_A_COLLECTION"
    EMPTY = "EMPTY"

    def __init__(self, kind: str, message: str):
        self.kind = kind
        super().__init__(message)


class SteamCmdError(LauncherError):
    RATE_LIMIT = "RATE_LIMIT"
    TIMEOUT = "TIMEOUT"
    REVOKED = "REVOKED"
    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    FAILED = "FAILED"

    TRANSIENT = (RATE_LIMIT, TIMEOUT, REVOKED)

    def __init__(self, kind: str, message: str, returncode: Optional[int] = None):
        self.kind = kind
        self.returncode = returncode
        super().__init__(message)

    @property
    def transient(self) -> bool:
        return self.kind in self.TRANSIENT


class InstallError(LauncherError):
    def __init__(self, mod_name: str, message: str):
        self.mod_name = mod_name
        super().__init__(message)


class DownloadError(InstallError):
    pass


class NotAvailableOfflineError(InstallError):
    pass


class IntegrityError(InstallError):
    pass


class LinkError(InstallError):
    pass


class KeyMirrorError(InstallError):
    pass


class AggregateInstallError(LauncherError):
    def __init__(self, failed: Sequence[str]):
        self.failed: List[str] = list(failed)
        super().__init__(f"Failed to install {len(self.failed)} mod(s): {', '.join(self.failed)}")
