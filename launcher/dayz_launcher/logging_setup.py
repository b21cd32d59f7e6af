from __future__ import annotations
import json
import logging
from logging.handlers import RotatingFileHandler
from .settings import Settings

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def setup_logging(settings: Settings) -> None:
    logs_dir = settings.install_dir / "logs"

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.log_level.upper())

    fmt = _JsonFormatter() if settings.log_json else logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)

    launcher_log = logging.getLogger("dayz.launcher")
    for h in list(launcher_log.handlers):
        if isinstance(h, RotatingFileHandler):
            launcher_log.removeHandler(h)
            h.close()

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        launcher_fh = RotatingFileHandler(logs_dir / "launcher.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    except OSError as e:
        root.warning("Could not open log file in %s (%s), continuing with console logging only.", logs_dir, e)
    else:
        launcher_fh.setFormatter(fmt)
        launcher_fh.setLevel(settings.log_level.upper())
        launcher_log.addHandler(launcher_fh)
    launcher_log.propagate = True

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
