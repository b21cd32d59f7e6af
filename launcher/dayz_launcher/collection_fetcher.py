from __future__ import annotations
import urllib.error
import urllib.request
from typing import List
from .collection_parser import get_collection_title, is_collection_page, parse_collection_html
from .errors import FetchError
from .models import ModEntry
from .logging_setup import get_logger

log = get_logger("dayz.launcher.collection")

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

class CollectionFetcher:
    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def fetch_collection_mods(self, collection_url: str) -> List[ModEntry]:
        """Fetch and parse a Steam Workshop collection by URL."""
        log.info("Fetching collection: %s", collection_url)

        if "steamcommunity.com" not in collection_url or "filedetails" not in collection_url:
            raise FetchError(FetchError.INVALID_URL, f"Invalid Steam Workshop collection URL: {collection_url}")

        html = self.download_page(collection_url)

        if not is_collection_page(html):
            raise FetchError(FetchError.NOT_A_COLLECTION, "URL does not appear to be a Steam Workshop collection")

        title = get_collection_title(html)
        if title:
            log.info("Found collection: '%s'", title)

        mods = parse_collection_html(html)
        log.info("Parsed %d mods from collection", len(mods))
        for i, m in enumerate(mods, start=1):
            log.debug("  %d. %s (%s)", i, m.name, m.id)
        return mods

    def download_page(self, url: str) -> str:
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = getattr(resp, "status", 200)
                body = resp.read()
        except urllib.error.HTTPError as e:
            raise FetchError(FetchError.HTTP, f"HTTP error {e.code}: Failed to fetch collection page") from e
        except (urllib.error.URLError, OSError) as e:
            raise FetchError(FetchError.NETWORK, f"Failed to fetch collection page: {e}") from e

        if status != 200:
            raise FetchError(FetchError.HTTP, f"HTTP error {status}: Failed to fetch collection page")
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FetchError(FetchError.NETWORK, "Failed to decode collection page as UTF-8") from e
