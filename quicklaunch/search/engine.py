"""
Search Engine - Literal prefix matching over an ApplicationIndex.

An entry matches when its lowercased name starts with the normalized query.
Substrings, word boundaries and typos do not count: "ari" does not find
"Safari". Matches are ordered by name, case-insensitively.
"""

from typing import Optional

from quicklaunch.services.app_index import AppEntry, ApplicationIndex, sort_key

MAX_CACHED_QUERIES = 256


def normalize_query(query: Optional[str]) -> str:
    """Trim surrounding whitespace and lowercase."""
    if not query:
        return ""
    return query.strip().lower()


def filter_apps(index: ApplicationIndex, query: Optional[str]) -> tuple[AppEntry, ...]:
    """
    Return the entries whose names start with query.

    Args:
        index: Application index snapshot
        query: Raw user input

    Returns:
        Matching entries in alphabetical order. An empty query returns the
        index contents unchanged.
    """
    norm_query = normalize_query(query)
    if not norm_query:
        return tuple(index.entries)

    matches = [entry for entry in index.entries if entry.name.lower().startswith(norm_query)]
    return tuple(sorted(matches, key=sort_key))


class SearchEngine:
    """filter_apps with a per-index cache keyed by raw query."""

    def __init__(self, index: Optional[ApplicationIndex] = None):
        self._index = index if index is not None else ApplicationIndex.empty()
        self._cache: dict[str, tuple[AppEntry, ...]] = {}

    @property
    def index(self) -> ApplicationIndex:
        return self._index

    @index.setter
    def index(self, index: ApplicationIndex) -> None:
        self._index = index
        self._cache.clear()

    def search(self, query: str) -> tuple[AppEntry, ...]:
        results = self._cache.get(query)
        if results is None:
            if len(self._cache) >= MAX_CACHED_QUERIES:
                self._cache.clear()
            results = filter_apps(self._index, query)
            self._cache[query] = results
        return results
