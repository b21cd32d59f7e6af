"""
Tests for ModSourceResolver: merging, single fetch and name checks.
"""

from unittest.mock import Mock

import pytest

from dayz_launcher.errors import FetchError, ModNameConflictError
from dayz_launcher.models import ModEntry, ModsSection
from dayz_launcher.resolver import ModSourceResolver

URL = "https://steamcommunity.com/sharedfiles/filedetails/?id=3000000000"


def _fetcher(mods=None, error=None):
    fetcher = Mock()
    if error is not None:
        fetcher.fetch_collection_mods.side_effect = error
    else:
        fetcher.fetch_collection_mods.return_value = list(mods or [])
    return fetcher


def test_individual_and_collection_kept_apart():
    fetcher = _fetcher([ModEntry(id=2, name="B"), ModEntry(id=3, name="C")])
    mods = ModsSection(mod_list=[ModEntry(id=1, name="A")], mod_collection_url=URL)

    desired = ModSourceResolver(mods, fetcher).resolve()

    assert [m.name for m in desired.individual] == ["A"]
    assert [m.name for m in desired.collection] == ["B", "C"]
    assert desired.names() == ["A", "B", "C"]


def test_collection_fetched_once():
    fetcher = _fetcher([ModEntry(id=2, name="B")])
    resolver = ModSourceResolver(ModsSection(mod_collection_url=URL), fetcher)

    resolver.collection_mods()
    resolver.resolve()
    resolver.resolve()

    fetcher.fetch_collection_mods.assert_called_once_with(URL)


@pytest.mark.parametrize("url", [None, "", "   "])
def test_blank_url_means_no_collection(url):
    fetcher = _fetcher()
    desired = ModSourceResolver(ModsSection(mod_collection_url=url), fetcher).resolve()
    assert desired.collection == []
    fetcher.fetch_collection_mods.assert_not_called()


@pytest.mark.parametrize("kind", [
    FetchError.INVALID_URL, FetchError.HTTP, FetchError.NETWORK, FetchError.NOT_A_COLLECTION, FetchError.EMPTY,
])
def test_fetch_failure_is_empty_collection(kind, caplog):
    fetcher = _fetcher(error=FetchError(kind, "boom"))
    mods = ModsSection(mod_list=[ModEntry(id=1, name="A")], mod_collection_url=URL)

    with caplog.at_level("WARNING", logger="dayz.launcher.resolver"):
        desired = ModSourceResolver(mods, fetcher).resolve()

    assert desired.collection == []
    assert [m.name for m in desired.individual] == ["A"]
    assert "continuing without collection mods" in caplog.text


def test_same_mod_listed_twice_kept_once():
    fetcher = _fetcher([ModEntry(id=1, name="cf"), ModEntry(id=2, name="B")])
    mods = ModsSection(mod_list=[ModEntry(id=1, name="CF")], mod_collection_url=URL)

    desired = ModSourceResolver(mods, fetcher).resolve()

    assert [m.name for m in desired.individual] == ["CF"]
    assert [m.name for m in desired.collection] == ["B"]


def test_name_used_by_two_ids_is_conflict():
    fetcher = _fetcher([ModEntry(id=99, name="CF")])
    mods = ModsSection(mod_list=[ModEntry(id=1, name="CF")], mod_collection_url=URL)

    with pytest.raises(ModNameConflictError) as ei:
        ModSourceResolver(mods, fetcher).resolve()
    assert ei.value.conflicts == ["@CF used by 1 and 99"]
