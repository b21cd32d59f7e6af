from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from . import __version__
from .errors import LauncherError
from .settings import Settings
from .logging_setup import get_logger, setup_logging
from .lock import check_if_initialized
from .orchestrator import Orchestrator
from .ui import make_confirm, print_banner

log = get_logger("dayz.launcher.cli")

SUBCOMMANDS = ("run", "plan", "api")

def _add_mode_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--install-dir", type=Path, help="Server directory (default: current directory)")
    p.add_argument("--offline", action="store_true", help="No network access; server and mods must already be downloaded")
    p.add_argument("--skip-validation", action="store_true", help="Skip SteamCMD validation of server and mods")
    p.add_argument("--skip-server-validation", action="store_true", help="Skip SteamCMD validation of the server")
    p.add_argument("--skip-mod-validation", action="store_true", help="Skip SteamCMD validation of mods")

def build_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if getattr(args, "install_dir", None):
        overrides["install_dir"] = args.install_dir
    if getattr(args, "offline", False):
        overrides["offline"] = True
    if getattr(args, "skip_validation", False) or getattr(args, "skip_server_validation", False):
        overrides["validate_server"] = False
    if getattr(args, "skip_validation", False) or getattr(args, "skip_mod_validation", False):
        overrides["validate_mods"] = False
    if getattr(args, "yes", False):
        overrides["assume_yes"] = True
    return Settings(**overrides)

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="dzsm", description="DayZ Server Manager - download, update, and run DayZ servers with mod support")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="cmd")

    run_p = sub.add_parser("run", help="Update server + mods and start the server (default)")
    _add_mode_flags(run_p)
    run_p.add_argument("--no-start", action="store_true", help="Only install/update; don't start the server")
    run_p.add_argument("-y", "--yes", action="store_true", help="Answer yes to all prompts")

    plan_p = sub.add_parser("plan", help="Print a dry-run plan as JSON and exit")
    _add_mode_flags(plan_p)

    api_p = sub.add_parser("api", help="Run REST API (FastAPI)")
    _add_mode_flags(api_p)
    api_p.add_argument("--host", default="127.0.0.1")
    api_p.add_argument("--port", type=int, default=8000)

    # bare flags (or nothing at all) mean "run"
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv or argv[0] not in (*SUBCOMMANDS, "-h", "--help", "--version"):
        argv = ["run", *argv]
    args = parser.parse_args(argv)

    settings = build_settings(args)
    setup_logging(settings)

    try:
        if args.cmd == "plan":
            orch = Orchestrator(settings)
            plan = orch.plan().to_dict()
            print(json.dumps(plan, indent=2, ensure_ascii=False))
            return 0 if plan.get("ok", True) else 1

        if args.cmd == "api":
            import uvicorn
            from .api import create_app
            app = create_app(settings)
            uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
            return 0

        print_banner()
        if not check_if_initialized(settings.lock_path, make_confirm(settings.assume_yes)):
            log.info("Installation aborted.")
            return 0
        orch = Orchestrator(settings)
        return orch.run(start=not args.no_start)
    except LauncherError as e:
        log.error("%s", e)
        return 1
