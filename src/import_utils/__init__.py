"""
Import utilities package for the NAS media importer.

This package contains the identification side of an import: filename
classification, library and catalog matching, ranking, selection and
destination path formatting.
"""

from .classifier import Classification, ClassificationMiss, classify, classify_all
from .formatter import FieldParseError, PathResolutionError, PathResolver, UnknownEpisodeError
from .metadata import CatalogLookupError, LookupCache, MetadataResolver, apply_genre_filter
from .models import CandidateSource, MediaKind, ScoredCandidate
from .omdb_client import OMDbClient, OMDbError
from .ranker import CandidateRanker, Ranking
from .selection import (
    AutomaticSelection,
    InteractiveSelection,
    NoCandidatesError,
    SelectionAbortedError,
    SelectionInputError,
    SelectionPolicy,
)
from .tmdb_client import TMDbClient, TMDbError

__all__ = [
    "Classification",
    "ClassificationMiss",
    "classify",
    "classify_all",
    "FieldParseError",
    "PathResolutionError",
    "PathResolver",
    "UnknownEpisodeError",
    "CatalogLookupError",
    "LookupCache",
    "MetadataResolver",
    "apply_genre_filter",
    "CandidateSource",
    "MediaKind",
    "ScoredCandidate",
    "OMDbClient",
    "OMDbError",
    "CandidateRanker",
    "Ranking",
    "AutomaticSelection",
    "InteractiveSelection",
    "NoCandidatesError",
    "SelectionAbortedError",
    "SelectionInputError",
    "SelectionPolicy",
    "TMDbClient",
    "TMDbError",
]
