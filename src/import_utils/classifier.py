"""
Filename classifier for TV shows, documentaries and movies.

Each media kind owns an ordered cascade of patterns, tried from the most to
the least specific. The first pattern that matches wins and its named
groups become the file's field set (name, year, season, episode, other,
ext). Fields a pattern does not capture are absent, not empty.

Pattern order is load-bearing:

- A year-less pattern placed before its year-bearing twin would swallow the
  year into ``name``, so years are never expressed as an optional group in
  front of the fixed-width season/episode markers. Each shape gets its own
  pattern instead, year first.
- The bare ``name.ext`` fallback matches nearly anything and therefore
  always comes last.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Pattern, Tuple

from .models import FieldSet, MediaKind

logger = logging.getLogger(__name__)

_SEP = r"[.\-_+\s]"
_TAIL = rf"{_SEP}*(?P<other>.*?){_SEP}*\.(?P<ext>[^.]+)$"
_PART = r"(?i:part|pt|episode|ep)"


class ClassificationMiss(Exception):
    """No pattern of a media kind matched the filename."""

    pass


@dataclass(frozen=True)
class FilenamePattern:
    name: str
    regex: Pattern[str]

    def match(self, filename: str) -> Optional[FieldSet]:
        match = self.regex.match(filename)
        if not match:
            return None
        return {key: value for key, value in match.groupdict().items() if value is not None}


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one filename as one media kind."""

    kind: MediaKind
    pattern: str
    fields: FieldSet


def _pattern(name: str, regex: str) -> FilenamePattern:
    return FilenamePattern(name, re.compile(regex))


YEAR_SEASON_EPISODE = _pattern(
    "year_season_episode",
    rf"^(?P<name>.+?){_SEP}+(?P<year>\d{{4}}){_SEP}+[sS](?P<season>\d+).*?[eE](?P<episode>\d+){_TAIL}",
)
SEASON_EPISODE = _pattern(
    "season_episode",
    rf"^(?P<name>.+?){_SEP}+[sS](?P<season>\d+).*?[eE](?P<episode>\d+){_TAIL}",
)
YEAR_NUMERIC_EPISODE = _pattern(
    "year_numeric_episode",
    rf"^(?P<name>.+?){_SEP}+(?P<year>\d{{4}}){_SEP}+(?P<season>\d+)[xX](?P<episode>\d+){_TAIL}",
)
NUMERIC_EPISODE = _pattern(
    "numeric_episode",
    rf"^(?P<name>.+?){_SEP}+(?P<season>\d+)[xX](?P<episode>\d+){_TAIL}",
)
YEAR_PART = _pattern(
    "year_part",
    rf"^(?P<name>.+?){_SEP}+(?P<year>\d{{4}}){_SEP}+(?:.*?{_SEP}+)??{_PART}{_SEP}*(?P<episode>\d+){_TAIL}",
)
PART = _pattern(
    "part",
    rf"^(?P<name>.+?){_SEP}+{_PART}{_SEP}*(?P<episode>\d+){_TAIL}",
)
# Greedy name: with several year-like tokens the last one is the release year
MOVIE_YEAR = _pattern(
    "movie_year",
    rf"^(?P<name>.*[^.\-_+\s]){_SEP}+\(?(?P<year>(?:19|20)\d{{2}})\)?(?={_SEP}|$){_TAIL}",
)
BARE_NAME = _pattern(
    "bare_name",
    rf"^(?P<name>.+?){_SEP}*\.(?P<ext>[^.]+)$",
)

TV_PATTERNS = (YEAR_SEASON_EPISODE, SEASON_EPISODE, YEAR_NUMERIC_EPISODE, NUMERIC_EPISODE)

PATTERNS: Dict[MediaKind, Tuple[FilenamePattern, ...]] = {
    MediaKind.TV_SHOW: TV_PATTERNS,
    MediaKind.DOCUMENTARY: TV_PATTERNS + (YEAR_PART, PART, BARE_NAME),
    MediaKind.MOVIE: (MOVIE_YEAR, BARE_NAME),
}


### Public functions ###
def classify(filename: str, kind: MediaKind) -> Classification:
    """
    Classify a bare filename as the given media kind.

    Raises:
        ClassificationMiss: If none of the kind's patterns match
    """
    for pattern in PATTERNS[kind]:
        fields = pattern.match(filename)
        if fields is not None:
            logger.debug(f"{kind.value} pattern '{pattern.name}' matched {filename}: {fields}")
            return Classification(kind, pattern.name, fields)

    raise ClassificationMiss(f"Not a {kind.value}: {filename}")


def classify_all(filepath: Path) -> Dict[MediaKind, Classification]:
    """Classify a file against every media kind, omitting kinds that do not match."""
    filename = filepath.name
    results = {}

    for kind in MediaKind:
        try:
            results[kind] = classify(filename, kind)
        except ClassificationMiss as e:
            logger.debug(str(e))

    return results
