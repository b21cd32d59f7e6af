from __future__ import annotations
from typing import Dict, List, Optional
from .collection_fetcher import CollectionFetcher
from .errors import FetchError, ModNameConflictError
from .models import DesiredModSet, ModEntry, ModsSection
from .logging_setup import get_logger

log = get_logger("dayz.launcher.resolver")

_FETCH_FAILURE_MESSAGES = {
    FetchError.INVALID_URL: "Collection URL is not a Steam Workshop link",
    FetchError.HTTP: "Collection page returned an HTTP error",
    FetchError.NETWORK: "Collection page could not be retrieved",
    FetchError.NOT_A_COLLECTION: "Collection URL does not point to a workshop collection",
    FetchError.EMPTY: "Collection page contains no usable workshop items",
}

class ModSourceResolver:
    """
    Merges the configured mod list with the mods of the configured collection.

    The collection is fetched at most once per instance; a failed fetch is
    logged and treated as an empty collection.
    """

    def __init__(self, mods: ModsSection, fetcher: Optional[CollectionFetcher] = None):
        self.mods = mods
        self.fetcher = fetcher or CollectionFetcher()
        self._collection: Optional[List[ModEntry]] = None

    def individual_mods(self) -> List[ModEntry]:
        return list(self.mods.mod_list)

    def collection_mods(self) -> List[ModEntry]:
        if self._collection is None:
            self._collection = self._fetch_collection()
        return list(self._collection)

    def _fetch_collection(self) -> List[ModEntry]:
        url = self.mods.collection_url()
        if url is None:
            return []
        try:
            return list(self.fetcher.fetch_collection_mods(url))
        except FetchError as e:
            reason = _FETCH_FAILURE_MESSAGES.get(e.kind, "Collection fetch failed")
            log.warning("%s (%s): %s - continuing without collection mods", reason, e.kind, e)
            return []

    def resolve(self) -> DesiredModSet:
        individual = self.individual_mods()
        collection = self.collection_mods()
        individual, collection = _check_names(individual, collection)
        log.info("Resolved %d individual and %d collection mod(s)", len(individual), len(collection))
        return DesiredModSet(individual=individual, collection=collection)


def _check_names(individual: List[ModEntry], collection: List[ModEntry]):
    """
    Activation directory names must be unique (case-insensitive). An entry
    repeated with the same id is dropped after its first occurrence; one name
    used by different ids is a configuration error.
    """
    owners: Dict[str, ModEntry] = {}
    conflicts: List[str] = []

    def keep(entries: List[ModEntry], source: str) -> List[ModEntry]:
        kept = []
        for m in entries:
            key = m.name.casefold()
            first = owners.get(key)
            if first is None:
                owners[key] = m
                kept.append(m)
            elif first.id == m.id:
                log.warning("Mod %s listed again in %s list, keeping first occurrence", m, source)
            else:
                conflicts.append(f"@{m.name} used by {first.id} and {m.id}")
        return kept

    individual = keep(individual, "individual")
    collection = keep(collection, "collection")
    if conflicts:
        raise ModNameConflictError(conflicts)
    return individual, collection
