from __future__ import annotations
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel
from . import __version__
from .errors import AggregateInstallError, LauncherError
from .orchestrator import Orchestrator
from .settings import Settings

class ActionResult(BaseModel):
    ok: bool
    detail: str | None = None
    data: dict | None = None

def create_app(settings: Settings, orch: Orchestrator | None = None) -> FastAPI:
    app = FastAPI(title="DZSM Launcher API", version=__version__)
    # prompts cannot be answered over HTTP
    orch = orch or Orchestrator(settings, confirm=lambda _prompt: settings.assume_yes)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/config")
    def get_config():
        try:
            return orch.cfg.model_dump()
        except LauncherError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/mods")
    def mods():
        try:
            return orch.desired().model_dump()
        except LauncherError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/launch-args")
    def launch_args():
        try:
            return {"ok": True, "mod_args": orch.launch_args(), "command": orch.server_command()}
        except LauncherError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/plan")
    def plan():
        # always dry-run; no side effects
        try:
            orch.reload()
            return orch.plan().to_dict()
        except LauncherError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.post("/sync", response_model=ActionResult)
    def sync(dry_run: bool = Query(default=False, description="If true: return plan only, do not touch SteamCMD or filesystem")):
        try:
            # the process outlives edits to config.toml
            orch.reload()
            if dry_run:
                p = orch.plan().to_dict()
                return ActionResult(ok=bool(p.get("ok", True)), detail="dry-run", data=p)

            orch.prepare_environment()
            orch.ensure_steamcmd()
            orch.ensure_server()
            orch.sync_mods()
            return ActionResult(ok=True, detail="synced", data={"launch_args": orch.launch_args()})
        except AggregateInstallError as e:
            return ActionResult(ok=False, detail=str(e), data={"failed": e.failed})
        except LauncherError as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/status", response_model=ActionResult)
    def status():
        return ActionResult(ok=True, data=orch.status())

    @app.post("/stop", response_model=ActionResult)
    def stop():
        orch.stop()
        return ActionResult(ok=True, detail="stopped")

    return app
