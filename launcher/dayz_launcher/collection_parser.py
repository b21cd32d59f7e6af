"""
collection_parser.py — Steam Workshop collection page parsing
-------------------------------------------------------------
Extracts (id, title) pairs from the HTML of a workshop collection page.
"""
from __future__ import annotations
import re
from typing import List, Optional
from bs4 import BeautifulSoup
from pydantic import ValidationError
from .errors import FetchError
from .models import ModEntry
from .logging_setup import get_logger

log = get_logger("dayz.launcher.collection")

ITEM_LINK_SELECTOR = "a[href*='/sharedfiles/filedetails/?id=']"
_ID_RE = re.compile(r"[?&]id=(\d+)")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_mod_id(url: str) -> Optional[int]:
    """``.../filedetails/?id=1559212036&searchtext=`` -> 1559212036"""
    m = _ID_RE.search(url)
    return int(m.group(1)) if m else None


def is_collection_page(html: str) -> bool:
    soup = _soup(html)
    return soup.select_one(".collectionChildren") is not None and soup.select_one(".workshopItem") is not None


def get_collection_title(html: str) -> Optional[str]:
    soup = _soup(html)
    title_el = soup.select_one(".workshopItemTitle")
    if title_el is not None:
        title = title_el.get_text(strip=True)
        if title:
            return title
    # "Steam Workshop::Collection Name"
    if soup.title is not None:
        parts = soup.title.get_text().split("::", 1)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()
    return None


def parse_collection_html(html: str) -> List[ModEntry]:
    """
    Return the collection's items in page order.

    Only anchors that wrap a ``.workshopItemTitle`` count as items; repeated
    ids keep their first occurrence. Raises FetchError(EMPTY) when nothing
    could be extracted.
    """
    soup = _soup(html)
    mods: List[ModEntry] = []
    seen = set()

    for a in soup.select(ITEM_LINK_SELECTOR):
        wid = extract_mod_id(a.get("href", ""))
        if wid is None:
            continue
        title_el = a.select_one(".workshopItemTitle")
        if title_el is None:
            continue
        name = title_el.get_text(strip=True)
        if not name or wid in seen:
            continue
        try:
            entry = ModEntry(id=wid, name=name)
        except ValidationError:
            log.warning("Skipping collection item %s: title %r is not usable as a mod directory name", wid, name)
            continue
        seen.add(wid)
        mods.append(entry)

    if not mods:
        raise FetchError(
            FetchError.EMPTY,
            "No workshop items found in the HTML. This might not be a valid Steam Workshop collection page.",
        )
    return mods
