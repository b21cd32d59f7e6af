from __future__ import annotations
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from .logging_setup import get_logger

log = get_logger("dayz.launcher.proc")

@dataclass
class ProcessHandle:
    name: str
    proc: subprocess.Popen

class ProcessRunner:
    def __init__(self):
        self.handles: List[ProcessHandle] = []

    def start(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None,
              env: Optional[dict] = None) -> ProcessHandle:
        # stdin/stdout/stderr are inherited so the server console stays interactive
        log.info("Starting %s: %s", name, " ".join(cmd))
        proc = subprocess.Popen(cmd, cwd=str(cwd) if cwd else None, env=env)
        h = ProcessHandle(name=name, proc=proc)
        self.handles.append(h)
        return h

    def run(self, name: str, cmd: List[str], *, cwd: Optional[Path] = None) -> int:
        h = self.start(name, cmd, cwd=cwd)
        try:
            rc = h.proc.wait()
        except KeyboardInterrupt:
            log.warning("Interrupted, stopping %s", name)
            self.stop_all()
            raise
        log.info("%s exited with rc=%s", name, rc)
        return int(rc if rc is not None else 0)

    def stop_all(self, timeout: float = 10.0) -> None:
        for h in self.handles:
            if h.proc.poll() is None:
                log.info("Stopping %s (pid=%s)", h.name, h.proc.pid)
                h.proc.terminate()
        for h in self.handles:
            if h.proc.poll() is None:
                try:
                    h.proc.wait(timeout=timeout)
                except subprocess.TimeoutExpired:
                    log.warning("Killing %s (pid=%s)", h.name, h.proc.pid)
                    h.proc.kill()

    def status(self) -> dict:
        return {h.name: {"pid": h.proc.pid, "returncode": h.proc.poll()} for h in self.handles}
