"""
Data model shared by the import pipeline.

Media kinds, candidate sources, catalog records and the tagged candidate
payload variant live here so that the classifier, resolver, ranker and
path formatter agree on one vocabulary.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Union

# Extracted filename fields: name, year, season, episode, other, ext
FieldSet = Dict[str, str]


class MediaKind(Enum):
    """Library category a file can be imported into."""

    TV_SHOW = "TV Show"
    DOCUMENTARY = "Documentary"
    MOVIE = "Movie"


class CandidateSource(IntEnum):
    """Where a candidate came from. Lower values win score ties."""

    LOCAL_TV = 0
    LOCAL_DOCUMENTARY = 1
    LOCAL_MOVIE = 2
    REMOTE_TV_CATALOG = 3
    REMOTE_DOCUMENTARY_CATALOG = 4
    REMOTE_DOCUMENTARY_TITLE = 5
    REMOTE_MOVIE_TITLE = 6

    @property
    def kind(self) -> MediaKind:
        return _SOURCE_KINDS[self]

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]


_SOURCE_KINDS = {
    CandidateSource.LOCAL_TV: MediaKind.TV_SHOW,
    CandidateSource.LOCAL_DOCUMENTARY: MediaKind.DOCUMENTARY,
    CandidateSource.LOCAL_MOVIE: MediaKind.MOVIE,
    CandidateSource.REMOTE_TV_CATALOG: MediaKind.TV_SHOW,
    CandidateSource.REMOTE_DOCUMENTARY_CATALOG: MediaKind.DOCUMENTARY,
    CandidateSource.REMOTE_DOCUMENTARY_TITLE: MediaKind.DOCUMENTARY,
    CandidateSource.REMOTE_MOVIE_TITLE: MediaKind.MOVIE,
}

_SOURCE_LABELS = {
    CandidateSource.LOCAL_TV: "Existing TV shows",
    CandidateSource.LOCAL_DOCUMENTARY: "Existing documentaries",
    CandidateSource.LOCAL_MOVIE: "Existing movies",
    CandidateSource.REMOTE_TV_CATALOG: "TV series catalog",
    CandidateSource.REMOTE_DOCUMENTARY_CATALOG: "Documentary series catalog",
    CandidateSource.REMOTE_DOCUMENTARY_TITLE: "Documentary titles",
    CandidateSource.REMOTE_MOVIE_TITLE: "Movie titles",
}


@dataclass(frozen=True)
class SeriesRecord:
    """A series as known to the series catalog."""

    id: str
    name: str
    genres: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TitleRecord:
    """A title search hit from the title catalog."""

    id: str
    name: str
    year: Optional[str] = None
    type_tag: str = ""


@dataclass(frozen=True)
class TitleDetail:
    genres: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Episode:
    number: int
    name: str


@dataclass(frozen=True)
class SeriesPayload:
    record: SeriesRecord


@dataclass(frozen=True)
class TitlePayload:
    record: TitleRecord


@dataclass(frozen=True)
class LocalPayload:
    name: str


CandidatePayload = Union[SeriesPayload, TitlePayload, LocalPayload]


@dataclass(frozen=True)
class ScoredCandidate:
    """A proposed identity for the imported file, with its match distance."""

    display_name: str
    score: int
    source: CandidateSource
    payload: CandidatePayload

    @property
    def kind(self) -> MediaKind:
        return self.source.kind
