"""
Tests for Orchestrator: the run sequence, planning and launch command.
"""

from unittest.mock import Mock, patch

import pytest

from dayz_launcher.errors import ConfigCreatedError, ModNameConflictError, SetupError
from dayz_launcher.fs_layout import SERVER_EXE
from dayz_launcher.models import ModEntry
from dayz_launcher.orchestrator import Orchestrator
from dayz_launcher.settings import Settings

URL = "https://steamcommunity.com/sharedfiles/filedetails/?id=3000000000"

CONFIG = f"""
[server]
steamcmd_dir = "steamcmd"
username = "owner"

[mods]
mod_collection_url = "{URL}"
mod_list = [{{ id = 1, name = "CF" }}]
"""


@pytest.fixture
def install_dir(tmp_path):
    (tmp_path / "config.toml").write_text(CONFIG, encoding="utf-8")
    return tmp_path


@pytest.fixture
def fetcher():
    f = Mock()
    f.fetch_collection_mods.return_value = [ModEntry(id=2, name="Dabs Framework")]
    return f


def _settings(install_dir, **kw):
    kw.setdefault("activation", "copy")
    return Settings(install_dir=install_dir, steam_user="", steam_password="", **kw)


def _cache(install_dir, wid, key=None):
    d = install_dir / "steamcmd" / "steamapps" / "workshop" / "content" / "221100" / str(wid)
    (d / "addons").mkdir(parents=True, exist_ok=True)
    if key:
        (d / "keys").mkdir(exist_ok=True)
        (d / "keys" / key).write_text(key)
    return d


def test_missing_config_stops(tmp_path, fetcher):
    orch = Orchestrator(_settings(tmp_path), fetcher=fetcher, confirm=lambda _p: True)
    with pytest.raises(ConfigCreatedError):
        orch.run(start=False)
    assert (tmp_path / "config.toml").exists()


def test_server_command(install_dir, fetcher):
    orch = Orchestrator(_settings(install_dir), fetcher=fetcher)
    cmd = orch.server_command()
    assert cmd[0] == str(install_dir / SERVER_EXE)
    assert cmd[1:] == ["-config=serverDZ.cfg", "-profiles=profiles", "-serverMod=@CF", "-mod=@Dabs Framework"]
    assert orch.launch_args() == ["-serverMod=@CF", "-mod=@Dabs Framework"]
    fetcher.fetch_collection_mods.assert_called_once_with(URL)


def test_online_run_without_start(install_dir, fetcher):
    orch = Orchestrator(_settings(install_dir), fetcher=fetcher, confirm=lambda _p: True)
    steamcmd = Mock()
    steamcmd.workshop_download.side_effect = lambda _game, wid, validate: _cache(install_dir, wid, f"{wid}.bikey")
    orch._steamcmd = steamcmd

    assert orch.run(start=False) == 0

    steamcmd.check_and_install.assert_called_once()
    steamcmd.ensure_app.assert_called_once_with(223350, install_dir.absolute(), validate=True)
    assert [c.args[1] for c in steamcmd.workshop_download.call_args_list] == [1, 2]
    assert (install_dir / "@CF").is_dir()
    assert (install_dir / "@Dabs Framework").is_dir()
    assert (install_dir / "keys" / "1.bikey").exists()
    assert (install_dir / "keys" / "2.bikey").exists()


def test_offline_run_with_cache(install_dir, fetcher):
    _cache(install_dir, 1)
    _cache(install_dir, 2)
    (install_dir / SERVER_EXE).write_text("bin")

    with patch("dayz_launcher.orchestrator.load_credentials") as creds:
        orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)
        assert orch.run(start=False) == 0
    creds.assert_not_called()
    assert (install_dir / "@CF").is_dir()


def test_failed_mod_returns_1_without_start(install_dir, fetcher):
    _cache(install_dir, 1)
    (install_dir / SERVER_EXE).write_text("bin")
    orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)

    with patch.object(orch, "start_server") as start:
        assert orch.run() == 1
    start.assert_not_called()
    assert orch.last_failed == ["Dabs Framework"]
    assert (install_dir / "@CF").is_dir()


def test_start_server_requires_executable(install_dir, fetcher):
    orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)
    with pytest.raises(SetupError):
        orch.start_server()


def test_start_server_runs_command(install_dir, fetcher):
    (install_dir / SERVER_EXE).write_text("bin")
    orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)
    with patch.object(orch.runner, "run", return_value=0) as run:
        assert orch.start_server() == 0
    run.assert_called_once_with("server", orch.server_command(), cwd=orch.layout.install_dir)


def test_name_conflict_stops_before_changes(install_dir):
    fetcher = Mock()
    fetcher.fetch_collection_mods.return_value = [ModEntry(id=99, name="cf")]
    (install_dir / "@Old").mkdir()
    orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)
    (install_dir / SERVER_EXE).write_text("bin")

    with pytest.raises(ModNameConflictError):
        orch.run(start=False)
    assert (install_dir / "@Old").exists()


class TestPlan:
    def test_offline_plan_flags_missing(self, install_dir, fetcher):
        _cache(install_dir, 1)
        plan = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher).plan().to_dict()

        assert plan["ok"] is False
        actions = {a["target"]: a for a in plan["actions"]}
        assert actions["individual:CF (1)"]["severity"] == "info"
        assert actions["collection:Dabs Framework (2)"]["severity"] == "error"
        assert plan["actions"][0]["action"] == "clear"
        assert plan["launch_args"][-2:] == ["-serverMod=@CF", "-mod=@Dabs Framework"]

    def test_plan_has_no_side_effects(self, install_dir, fetcher):
        (install_dir / "@Keep").mkdir()
        plan = Orchestrator(_settings(install_dir), fetcher=fetcher).plan()
        assert plan.ok is True
        assert (install_dir / "@Keep").exists()
        assert not (install_dir / "keys").exists()


def test_reload_rereads_config(install_dir, fetcher):
    orch = Orchestrator(_settings(install_dir, offline=True), fetcher=fetcher)
    assert orch.launch_args() == ["-serverMod=@CF", "-mod=@Dabs Framework"]

    (install_dir / "config.toml").write_text(CONFIG.replace('name = "CF"', 'name = "CF-Renamed"'), encoding="utf-8")
    assert orch.launch_args() == ["-serverMod=@CF", "-mod=@Dabs Framework"]

    orch.reload()
    assert orch.launch_args() == ["-serverMod=@CF-Renamed", "-mod=@Dabs Framework"]
    assert fetcher.fetch_collection_mods.call_count == 2
