from __future__ import annotations
from typing import Iterable, List, Optional, Sequence
from .fs_layout import ACTIVATION_PREFIX, SERVER_CONFIG, SERVER_PROFILES, Layout
from .models import DesiredModSet, ModEntry

SERVER_MOD_FLAG = "-serverMod"
MOD_FLAG = "-mod"

def mod_token(entry: ModEntry) -> str:
    return f"{ACTIVATION_PREFIX}{entry.name}"

def join_mods(entries: Iterable[ModEntry]) -> Optional[str]:
    """``@A;@B;@C`` in the given order, or None for no entries."""
    tokens = [mod_token(e) for e in entries]
    return ";".join(tokens) if tokens else None

def build_mod_args(desired: DesiredModSet) -> List[str]:
    """
    Individually configured mods go to -serverMod=, collection mods to -mod=.
    An empty list produces no flag at all.
    """
    args: List[str] = []
    server_mods = join_mods(desired.individual)
    if server_mods is not None:
        args.append(f"{SERVER_MOD_FLAG}={server_mods}")
    mods = join_mods(desired.collection)
    if mods is not None:
        args.append(f"{MOD_FLAG}={mods}")
    return args

def build_server_command(layout: Layout, desired: DesiredModSet, extra_args: Sequence[str] = ()) -> List[str]:
    return [
        str(layout.server_exe),
        f"-config={SERVER_CONFIG}",
        f"-profiles={SERVER_PROFILES}",
        *build_mod_args(desired),
        *extra_args,
    ]
