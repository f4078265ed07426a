"""
Metadata resolution against the remote series and title catalogs.

The resolver answers two questions for the ranker: which series could this
title be, and which titles (movies, documentaries) could it be. Results are
genre filtered and cached for the rest of the importer session, keyed by
the normalized query and the genre filter. Catalog failures never escape a
lookup; the affected source just comes back empty.
"""

import logging
from typing import Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

from common.constants import MAX_EXTRA_SERIES, MAX_TITLE_RESULTS, SERIES_TYPE_TAGS

from .models import Episode, SeriesRecord, TitleRecord
from .omdb_client import OMDbClient, OMDbError
from .tmdb_client import TMDbClient, TMDbError
from .tokens import join_tokens

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogLookupError(Exception):
    """A remote catalog call failed."""

    pass


class LookupCache(Generic[T]):
    """Session scoped lookup results. Entries are never invalidated."""

    def __init__(self, name: str):
        self.name = name
        self._entries: Dict[Hashable, T] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[T]:
        if key in self._entries:
            self.hits += 1
            logger.debug(f"{self.name} cache hit: {key}")
            return self._entries[key]
        self.misses += 1
        return None

    def put(self, key: Hashable, value: T) -> None:
        self._entries[key] = value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def apply_genre_filter(items: Iterable[T], genre_filter: str, genres_of: Callable[[T], List[str]]) -> List[T]:
    """
    Keep items according to a genre filter.

    "documentary" keeps items having that genre, "!documentary" keeps items
    without it, and an empty filter keeps everything. Comparison ignores case.
    """
    if not genre_filter:
        return list(items)

    negate = genre_filter.startswith("!")
    wanted = (genre_filter[1:] if negate else genre_filter).lower()

    return [item for item in items if (wanted in {genre.lower() for genre in genres_of(item)}) != negate]


class MetadataResolver:
    """Cached series and title lookups for one importer session."""

    def __init__(
            self,
            series_catalog: Optional[TMDbClient],
            title_catalog: Optional[OMDbClient],
            visible_results: int,
            series_cache: Optional[LookupCache[List[SeriesRecord]]] = None,
            title_cache: Optional[LookupCache[List[TitleRecord]]] = None,
    ):
        self.series_catalog = series_catalog
        self.title_catalog = title_catalog
        self.visible_results = visible_results
        self.series_cache = series_cache if series_cache is not None else LookupCache("series")
        self.title_cache = title_cache if title_cache is not None else LookupCache("title")
        self._genre_cache: LookupCache[List[str]] = LookupCache("title genres")
        self._season_cache: LookupCache[Dict[int, List[Episode]]] = LookupCache("seasons")

    ### Series lookups ###
    def find_series(self, title: str, genre_filter: str = "") -> List[SeriesRecord]:
        """Series matching a title, genre filtered; empty if the catalog fails."""
        query = join_tokens(title)
        key = (query.lower(), genre_filter)
        cached = self.series_cache.get(key)
        if cached is not None:
            return cached

        try:
            records = self._search_series(query)
        except CatalogLookupError as e:
            logger.warning(f"Series lookup failed for '{query}': {e}")
            return []

        records = apply_genre_filter(records, genre_filter, lambda series: series.genres)
        self.series_cache.put(key, records)
        return records

    def _search_series(self, query: str) -> List[SeriesRecord]:
        if self.series_catalog is None:
            raise CatalogLookupError("No series catalog configured")

        try:
            records = self.series_catalog.search_by_title(query, self.visible_results)
        except TMDbError as e:
            raise CatalogLookupError(str(e))

        records.extend(self._recover_series(query, {record.id for record in records}))
        return records

    def _recover_series(self, query: str, known_ids: set) -> List[SeriesRecord]:
        """Series the series search missed, found through the title catalog's series hits."""
        if self.title_catalog is None:
            return []

        extra = []
        try:
            for title in self.title_catalog.search_by_title(query):
                if len(extra) >= MAX_EXTRA_SERIES:
                    break
                if title.type_tag not in SERIES_TYPE_TAGS:
                    continue

                series = self.series_catalog.lookup_by_external_id(title.id)
                if series is not None and series.id not in known_ids:
                    known_ids.add(series.id)
                    extra.append(series)
        except (OMDbError, TMDbError) as e:
            logger.warning(f"Series recovery lookup failed for '{query}': {e}")

        if extra:
            logger.debug(f"Recovered {len(extra)} extra series for '{query}'")
        return extra

    def season_detail(self, series_id: str) -> Dict[int, List[Episode]]:
        """
        Season listing of a series, fetched at most once per session.

        Raises:
            CatalogLookupError: If the listing cannot be fetched
        """
        cached = self._season_cache.get(series_id)
        if cached is not None:
            return cached

        if self.series_catalog is None:
            raise CatalogLookupError("No series catalog configured")

        try:
            seasons = self.series_catalog.fetch_season_detail(series_id)
        except TMDbError as e:
            raise CatalogLookupError(f"Season lookup failed for series {series_id}: {e}")

        self._season_cache.put(series_id, seasons)
        return seasons

    ### Title lookups ###
    def find_titles(
            self,
            title: str,
            allowed_types: Optional[frozenset] = None,
            genre_filter: str = "",
    ) -> List[TitleRecord]:
        """
        Titles matching a string, restricted to type tags and genre filtered.

        Args:
            title: Title extracted from the filename
            allowed_types: Accepted type tags, or None for any type
            genre_filter: Genre filter, see apply_genre_filter()

        Returns:
            At most MAX_TITLE_RESULTS distinct titles; empty if the catalog fails
        """
        query = join_tokens(title)
        key = (query.lower(), genre_filter, allowed_types)
        cached = self.title_cache.get(key)
        if cached is not None:
            return cached

        try:
            records = self._search_titles(query, allowed_types)
            if genre_filter:
                records = apply_genre_filter(records, genre_filter, self._title_genres)
        except CatalogLookupError as e:
            logger.warning(f"Title lookup failed for '{query}': {e}")
            return []

        self.title_cache.put(key, records)
        return records

    def _search_titles(self, query: str, allowed_types: Optional[frozenset]) -> List[TitleRecord]:
        if self.title_catalog is None:
            raise CatalogLookupError("No title catalog configured")

        try:
            results = self.title_catalog.search_by_title(query)
        except OMDbError as e:
            raise CatalogLookupError(str(e))

        records = []
        seen = set()
        for record in results:
            if allowed_types is not None and record.type_tag not in allowed_types:
                continue
            if record.id in seen:
                continue
            seen.add(record.id)
            records.append(record)
            if len(records) >= MAX_TITLE_RESULTS:
                break

        return records

    def _title_genres(self, record: TitleRecord) -> List[str]:
        cached = self._genre_cache.get(record.id)
        if cached is not None:
            return cached

        try:
            genres = self.title_catalog.fetch_detail(record.id).genres
        except OMDbError as e:
            raise CatalogLookupError(f"Detail lookup failed for {record.id}: {e}")

        self._genre_cache.put(record.id, genres)
        return genres
