"""Shared fixtures for dayz_launcher tests."""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from dayz_launcher.activation import CopyActivation, SymlinkActivation
from dayz_launcher.errors import DownloadError
from dayz_launcher.fs_layout import Layout
from dayz_launcher.models import ModEntry


class FakeDownloads:
    """Download service stand-in: serves whatever exists in the workshop cache."""

    def __init__(self, layout: Layout, fail_ids: Iterable[int] = (), paths: Optional[Dict[int, Path]] = None):
        self.layout = layout
        self.fail_ids = set(fail_ids)
        self.paths = dict(paths or {})
        self.calls: List[int] = []

    def ensure_item(self, entry: ModEntry) -> Path:
        self.calls.append(entry.id)
        if entry.id in self.fail_ids:
            raise DownloadError(entry.name, f"simulated SteamCMD failure for {entry.id}")
        return self.paths.get(entry.id, self.layout.workshop_item_dir(entry.id))


@pytest.fixture
def layout(tmp_path):
    install = tmp_path / "server"
    steamcmd = tmp_path / "steamcmd"
    layout = Layout(
        install_dir=install,
        keys_dir=install / "keys",
        logs_dir=install / "logs",
        server_exe=install / "DayZServer",
        steamcmd_dir=steamcmd,
        workshop_content=steamcmd / "steamapps" / "workshop" / "content" / "221100",
    )
    install.mkdir(parents=True)
    layout.keys_dir.mkdir()
    (layout.keys_dir / "dayz.bikey").write_text("reserved")
    return layout


@pytest.fixture
def make_mod(layout):
    """Create a cached workshop item, optionally with key files {name: content}."""

    def _make(workshop_id: int, keys: Optional[Dict[str, str]] = None, keys_dirname: str = "keys") -> Path:
        d = layout.workshop_item_dir(workshop_id)
        (d / "addons").mkdir(parents=True, exist_ok=True)
        (d / "meta.cpp").write_text(f"publishedid = {workshop_id};")
        if keys:
            kd = d / keys_dirname
            kd.mkdir(exist_ok=True)
            for name, content in keys.items():
                (kd / name).write_text(content)
        return d

    return _make


@pytest.fixture(params=["symlink", "copy"])
def activation(request):
    return SymlinkActivation() if request.param == "symlink" else CopyActivation()


COLLECTION_HTML = """
<html>
<head><title>Steam Workshop::My DayZ Collection</title></head>
<body>
  <div class="workshopItemDetailsHeader">
    <div class="workshopItemTitle">My DayZ Collection</div>
  </div>
  <div class="collectionChildren">
    <div class="collectionItem workshopItem" id="sharedfile_1559212036">
      <a href="https://steamcommunity.com/sharedfiles/filedetails/?id=1559212036"><img src="cf.png"></a>
      <div class="collectionItemDetails">
        <a href="https://steamcommunity.com/sharedfiles/filedetails/?id=1559212036&searchtext=">
          <div class="workshopItemTitle">CF</div>
        </a>
      </div>
    </div>
    <div class="collectionItem workshopItem" id="sharedfile_1564026768">
      <div class="collectionItemDetails">
        <a href="https://steamcommunity.com/sharedfiles/filedetails/?id=1564026768">
          <div class="workshopItemTitle"> Community-Online-Tools </div>
        </a>
      </div>
    </div>
    <div class="collectionItem workshopItem" id="sharedfile_2545327648">
      <div class="collectionItemDetails">
        <a href="https://steamcommunity.com/sharedfiles/filedetails/?id=2545327648">
          <div class="workshopItemTitle">Dabs Framework</div>
        </a>
      </div>
    </div>
  </div>
</body>
</html>
"""


@pytest.fixture
def collection_html():
    return COLLECTION_HTML
