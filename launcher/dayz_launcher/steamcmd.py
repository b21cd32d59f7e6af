from __future__ import annotations
import io
import os
import subprocess
import tarfile
import urllib.error
import urllib.request
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple
from .errors import SetupError, SteamCmdError
from .logging_setup import get_logger

log = get_logger("dayz.launcher.steamcmd")

if os.name == "nt":
    STEAMCMD_EXE = "steamcmd.exe"
    STEAMCMD_DOWNLOAD_URL = "https://steamcdn-a.akamaihd.net/client/installer/steamcmd.zip"
else:
    STEAMCMD_EXE = "steamcmd.sh"
    STEAMCMD_DOWNLOAD_URL = "https://steamcdn-a.akamaihd.net/client/installer/steamcmd_linux.tar.gz"

_ERROR_PATTERNS = [
    (SteamCmdError.RATE_LIMIT, ("rate limit exceeded", "http 429")),
    (SteamCmdError.TIMEOUT, ("timeout", "failed to connect")),
    (SteamCmdError.REVOKED, ("result 26", "request revoked", "login result: 26", "disconnected from steam")),
    (SteamCmdError.NOT_FOUND, ("file not found", "no subscription", "invalid app id")),
    (SteamCmdError.ACCESS_DENIED, ("access denied", "invalid password", "login failure")),
]

def classify_output(output: str) -> Optional[str]:
    """Map SteamCMD console output to a SteamCmdError kind, or None if it looks clean."""
    o = (output or "").lower()
    for kind, patterns in _ERROR_PATTERNS:
        if any(p in o for p in patterns):
            return kind
    if "error!" in o or "failed (" in o:
        return SteamCmdError.FAILED
    return None

def mask_cmd(cmd: List[str]) -> List[str]:
    """Copy of cmd with the password after '+login <user>' redacted."""
    tokens = list(map(str, cmd))
    for idx, t in enumerate(tokens):
        if t == "+login":
            if idx + 2 < len(tokens) and not tokens[idx + 2].startswith("+"):
                tokens[idx + 2] = "<REDACTED_PW>"
            break
    return tokens

class SteamCMD:
    def __init__(self, steamcmd_dir: Path, credentials: Tuple[str, Optional[str]]):
        self.steamcmd_dir = Path(steamcmd_dir)
        self.user, self.password = credentials
        self.bin = self.steamcmd_dir / STEAMCMD_EXE

    # ---------------- Bootstrap ----------------
    def is_installed(self) -> bool:
        return self.bin.is_file()

    def check_and_install(self, confirm: Callable[[str], bool]) -> None:
        """Make sure the SteamCMD executable exists, installing it after confirmation."""
        if self.is_installed():
            log.info("SteamCMD found: %s", self.bin)
            return

        log.warning("SteamCMD missing: %s", self.bin)
        try:
            self.steamcmd_dir.mkdir(parents=True, exist_ok=True)
            empty = not any(self.steamcmd_dir.iterdir())
        except OSError as e:
            raise SetupError(f"Failed to prepare SteamCMD directory {self.steamcmd_dir}: {e}") from e
        if not empty:
            raise SetupError(
                f"SteamCMD directory is not empty: '{self.steamcmd_dir}'. "
                "Please clear the directory or choose a different steamcmd_dir in config.toml"
            )

        if not confirm(f'Install SteamCMD at "{self.steamcmd_dir}"?'):
            raise SetupError("SteamCMD installation declined by user")

        self._download_and_install()
        if not self.is_installed():
            raise SetupError(f"SteamCMD archive did not contain {STEAMCMD_EXE}")
        log.info("SteamCMD installed successfully")

    def _download_and_install(self) -> None:
        log.info("Downloading SteamCMD from %s", STEAMCMD_DOWNLOAD_URL)
        req = urllib.request.Request(STEAMCMD_DOWNLOAD_URL, headers={"User-Agent": "Mozilla/5.0"})
        try:
            with urllib.request.urlopen(req, timeout=60) as resp:
                data = resp.read()
        except (urllib.error.URLError, OSError) as e:
            raise SetupError(f"Failed to download SteamCMD: {e}") from e
        if not data:
            raise SetupError("Downloaded SteamCMD archive is empty")
        log.info("Downloaded %d bytes, extracting...", len(data))

        try:
            if STEAMCMD_DOWNLOAD_URL.endswith(".zip"):
                with zipfile.ZipFile(io.BytesIO(data)) as zf:
                    zf.extractall(self.steamcmd_dir)
            else:
                with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tf:
                    tf.extractall(self.steamcmd_dir, filter="data")
        except (zipfile.BadZipFile, tarfile.TarError, OSError) as e:
            raise SetupError(f"Failed to extract SteamCMD archive: {e}") from e

        if os.name != "nt" and self.bin.exists():
            self.bin.chmod(0o755)

    # ---------------- Commands ----------------
    def _login_args(self) -> List[str]:
        args = ["+login", self.user]
        if self.password:
            args.append(self.password)
        return args

    def _run(self, args: List[str]) -> None:
        cmd = [str(self.bin)] + args
        log.info("SteamCMD: %s", " ".join(mask_cmd(cmd)))
        try:
            if self.password:
                proc = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
            else:
                # no stored password: SteamCMD may prompt for it or a Steam Guard code
                proc = subprocess.run(cmd)
        except FileNotFoundError as e:
            raise SetupError(f"SteamCMD executable not found at {self.bin}") from e

        output = ""
        if proc.stdout:
            output += proc.stdout
            log.debug("steamcmd stdout: %s", proc.stdout[-4000:])
        if proc.stderr:
            output += proc.stderr
            log.debug("steamcmd stderr: %s", proc.stderr[-4000:])

        kind = classify_output(output)
        if proc.returncode != 0 or kind is not None:
            kind = kind or SteamCmdError.FAILED
            raise SteamCmdError(kind, f"SteamCMD failed (rc={proc.returncode}, {kind}). See launcher.log for details.",
                                returncode=proc.returncode)

    def ensure_app(self, app_id: int, install_dir: Path, *, validate: bool = False) -> None:
        args: List[str] = [
            "+force_install_dir", str(install_dir),
            *self._login_args(),
            "+app_update", str(app_id),
        ]
        if validate:
            args.append("validate")
        args += ["+quit"]
        self._run(args)

    def workshop_download(self, game_id: int, workshop_id: int, *, validate: bool = False) -> None:
        args = [
            "+force_install_dir", str(self.steamcmd_dir),
            *self._login_args(),
            "+workshop_download_item", str(game_id), str(workshop_id),
        ]
        if validate:
            args.append("validate")
        args += ["+quit"]
        self._run(args)
