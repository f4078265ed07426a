"""
Candidate ranking across media kinds and sources.

Every classified kind contributes one candidate list per source (existing
library entries, series catalog hits, title catalog hits). The lists are
merged into a single order by (distance, source priority), so equal scores
are always broken the same way regardless of lookup order.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from common.constants import DOCUMENTARY_GENRE, MOVIE_TYPE_TAGS, NOT_DOCUMENTARY_GENRE

from .classifier import Classification
from .matcher import edit_distance, rank_local_entries
from .metadata import MetadataResolver
from .models import (
    CandidateSource,
    FieldSet,
    LocalPayload,
    MediaKind,
    ScoredCandidate,
    SeriesPayload,
    SeriesRecord,
    TitlePayload,
    TitleRecord,
)

logger = logging.getLogger(__name__)


def _with_year(name: str, year: Optional[str]) -> str:
    return f"{name} {year}" if year else name


def _is_number(text: Optional[str]) -> bool:
    if text is None:
        return False
    try:
        int(text)
    except ValueError:
        return False
    return True


def title_display_name(record: TitleRecord) -> str:
    return f"{record.name} ({record.year})" if record.year else record.name


@dataclass
class Ranking:
    """Merged candidates for one file, best first."""

    candidates: List[ScoredCandidate]
    classifications: Dict[MediaKind, Classification]
    visible_results: int

    def __len__(self) -> int:
        return len(self.candidates)

    def fields_for(self, kind: MediaKind) -> FieldSet:
        return self.classifications[kind].fields

    def sections(self) -> List[Tuple[CandidateSource, List[Tuple[int, ScoredCandidate]]]]:
        """
        The visible part of every source, in source priority order.

        Each entry carries its 1-based position in the merged order, which is
        the number used to select it.
        """
        grouped: Dict[CandidateSource, List[Tuple[int, ScoredCandidate]]] = {}
        for index, candidate in enumerate(self.candidates, start=1):
            rows = grouped.setdefault(candidate.source, [])
            if len(rows) < self.visible_results:
                rows.append((index, candidate))

        return sorted(grouped.items(), key=lambda item: item[0])


class CandidateRanker:
    """Builds the merged candidate list for a classified file."""

    def __init__(self, resolver: MetadataResolver, library: Dict[MediaKind, List[str]], visible_results: int):
        """
        Args:
            resolver: Session metadata resolver
            library: Existing entry names per media kind
            visible_results: Entries shown per source section
        """
        self.resolver = resolver
        self.library = library
        self.visible_results = visible_results

    def rank(self, classifications: Dict[MediaKind, Classification]) -> Ranking:
        candidates: List[ScoredCandidate] = []

        tv = classifications.get(MediaKind.TV_SHOW)
        if tv:
            candidates += self._local(CandidateSource.LOCAL_TV, MediaKind.TV_SHOW, tv.fields)
            candidates += self._series(
                CandidateSource.REMOTE_TV_CATALOG, tv.fields, NOT_DOCUMENTARY_GENRE
            )

        documentary = classifications.get(MediaKind.DOCUMENTARY)
        if documentary:
            fields = documentary.fields
            candidates += self._local(CandidateSource.LOCAL_DOCUMENTARY, MediaKind.DOCUMENTARY, fields)
            if _is_number(fields.get("season")) and _is_number(fields.get("episode")):
                candidates += self._series(
                    CandidateSource.REMOTE_DOCUMENTARY_CATALOG, fields, DOCUMENTARY_GENRE
                )
            candidates += self._titles(
                CandidateSource.REMOTE_DOCUMENTARY_TITLE, fields, None, DOCUMENTARY_GENRE
            )

        movie = classifications.get(MediaKind.MOVIE)
        if movie:
            candidates += self._titles(CandidateSource.REMOTE_MOVIE_TITLE, movie.fields, MOVIE_TYPE_TAGS, "")

        candidates.sort(key=lambda candidate: (candidate.score, candidate.source))
        logger.debug(f"Ranked {len(candidates)} candidates")

        return Ranking(candidates, classifications, self.visible_results)

    def _local(self, source: CandidateSource, kind: MediaKind, fields: FieldSet) -> List[ScoredCandidate]:
        return [
            ScoredCandidate(entry, score, source, LocalPayload(entry))
            for entry, score in rank_local_entries(self.library.get(kind, []), fields["name"])
        ]

    def _series(self, source: CandidateSource, fields: FieldSet, genre_filter: str) -> List[ScoredCandidate]:
        title = _with_year(fields["name"], fields.get("year"))
        records: List[SeriesRecord] = self.resolver.find_series(fields["name"], genre_filter)
        return [
            ScoredCandidate(record.name, edit_distance(title, record.name), source, SeriesPayload(record))
            for record in records
        ]

    def _titles(
            self,
            source: CandidateSource,
            fields: FieldSet,
            allowed_types: Optional[frozenset],
            genre_filter: str,
    ) -> List[ScoredCandidate]:
        title = _with_year(fields["name"], fields.get("year"))
        records = self.resolver.find_titles(fields["name"], allowed_types, genre_filter)
        return [
            ScoredCandidate(
                title_display_name(record),
                edit_distance(title, _with_year(record.name, record.year)),
                source,
                TitlePayload(record),
            )
            for record in records
        ]
