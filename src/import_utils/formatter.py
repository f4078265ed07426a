"""
Destination path formatting for the media library.

This module turns the chosen candidate and the extracted filename fields
into the canonical library path:

    TV and series:  <root>/Series/Season 01/Series S01E02 - Episode.mkv
    Titles:         <root>/Name (Year).mkv
"""

import logging
from pathlib import Path
from typing import Optional

from common.config import ImporterConfig
from common.constants import MATROSKA_EXTENSION, PATH_SEPARATOR_SUBSTITUTE, RESERVED_CHARACTERS

from .metadata import MetadataResolver
from .models import FieldSet, LocalPayload, MediaKind, ScoredCandidate, SeriesPayload, SeriesRecord, TitlePayload
from .ranker import Ranking

logger = logging.getLogger(__name__)


class PathResolutionError(Exception):
    """The destination path for a candidate cannot be built."""

    pass


class FieldParseError(PathResolutionError):
    """A season, episode or year field is missing or not a number."""

    pass


class UnknownEpisodeError(PathResolutionError):
    """The catalog does not list the season or episode."""

    pass


### Internal helper functions ###
def _parse_number(fields: FieldSet, key: str) -> int:
    """Parse a numeric field as a non-negative integer."""
    text = fields.get(key)
    if text is None:
        raise FieldParseError(f"No {key} in filename")
    try:
        number = int(text)
    except ValueError:
        raise FieldParseError(f"{key.capitalize()} is not a number: '{text}'")
    if number < 0:
        raise FieldParseError(f"{key.capitalize()} is negative: '{text}'")
    return number


def _format_season_folder_name(season: int) -> str:
    """
    Format a season folder name.

    Example: "Season 01"
    """
    return f"Season {season:02d}"


def _format_episode_filename(series_title: str, season: int, episode: int, episode_title: str) -> str:
    """
    Format an episode filename.

    Format: "Series Title SXXEXX - Episode Title.mkv"
    The episode title segment is left out when there is no title.
    """
    filename = f"{series_title} S{season:02d}E{episode:02d}"
    if episode_title:
        filename += f" - {episode_title}"
    filename += MATROSKA_EXTENSION

    logger.debug(f"Formatted episode filename: {filename}")
    return filename


def _format_title_filename(title: str, year: Optional[str]) -> str:
    """
    Format a movie or documentary filename.

    Example: "Batman Begins (2005).mkv"
    """
    if year:
        return f"{title} ({year}){MATROSKA_EXTENSION}"
    return f"{title}{MATROSKA_EXTENSION}"


class PathResolver:
    """Computes the library destination of a chosen candidate."""

    def __init__(self, config: ImporterConfig, resolver: MetadataResolver):
        self.config = config
        self.resolver = resolver

    def sanitize(self, text: str) -> str:
        """
        Make a name usable as a single path component.

        "/" becomes a look-alike character so names such as "AC/DC" keep
        their meaning, and reserved characters are stripped when configured.
        """
        clean = " ".join(text.split()).replace("/", PATH_SEPARATOR_SUBSTITUTE)
        if self.config.strip_reserved_characters:
            clean = "".join(char for char in clean if char not in RESERVED_CHARACTERS)
            clean = " ".join(clean.split())
        if not clean or clean in {".", ".."}:
            raise PathResolutionError(f"Name is empty after cleaning: '{text}'")
        return clean

    def resolve(self, candidate: ScoredCandidate, ranking: Ranking) -> Path:
        """
        Build the destination path for a candidate.

        Raises:
            FieldParseError: If a needed number cannot be parsed
            UnknownEpisodeError: If the catalog lacks the season or episode
            PathResolutionError: If the candidate cannot be placed in its kind
        """
        fields = ranking.fields_for(candidate.kind)

        if candidate.kind is MediaKind.TV_SHOW:
            path = self._tv_path(candidate, fields)
        elif candidate.kind is MediaKind.DOCUMENTARY:
            path = self._documentary_path(candidate, fields)
        else:
            path = self._movie_path(candidate)

        logger.debug(f"Resolved destination: {path}")
        return path

    def _tv_path(self, candidate: ScoredCandidate, fields: FieldSet) -> Path:
        root = self.config.tv_root
        match candidate.payload:
            case SeriesPayload(record=record):
                return self._series_episode_path(root, record, fields)
            case LocalPayload(name=name):
                return self._episode_path(root, name, fields, "")
            case TitlePayload():
                raise PathResolutionError("A TV show must be a series or an existing library entry")

    def _documentary_path(self, candidate: ScoredCandidate, fields: FieldSet) -> Path:
        root = self.config.documentary_root
        match candidate.payload:
            case SeriesPayload(record=record):
                return self._series_episode_path(root, record, fields)
            case TitlePayload(record=record):
                return root / _format_title_filename(self.sanitize(record.name), record.year)
            case LocalPayload(name=name):
                if "season" in fields and "episode" in fields:
                    return self._episode_path(root, name, fields, "")
                if "year" in fields:
                    year = _parse_number(fields, "year")
                    return root / _format_title_filename(self.sanitize(name), str(year))
                return root / _format_title_filename(self.sanitize(name), None)

    def _movie_path(self, candidate: ScoredCandidate) -> Path:
        match candidate.payload:
            case TitlePayload(record=record):
                return self.config.movie_root / _format_title_filename(self.sanitize(record.name), record.year)
            case SeriesPayload() | LocalPayload():
                raise PathResolutionError("A movie must be a title catalog entry")

    def _series_episode_path(self, root: Path, record: SeriesRecord, fields: FieldSet) -> Path:
        season = _parse_number(fields, "season")
        episode = _parse_number(fields, "episode")
        return self._episode_path(root, record.name, fields, self._episode_name(record, season, episode))

    def _episode_path(self, root: Path, series_name: str, fields: FieldSet, episode_name: str) -> Path:
        season = _parse_number(fields, "season")
        episode = _parse_number(fields, "episode")
        series = self.sanitize(series_name)
        episode_title = self.sanitize(episode_name) if episode_name.strip() else ""

        return (
            root
            / series
            / _format_season_folder_name(season)
            / _format_episode_filename(series, season, episode, episode_title)
        )

    def _episode_name(self, record: SeriesRecord, season: int, episode: int) -> str:
        """Look up an episode name in the series' season listing."""
        seasons = self.resolver.season_detail(record.id)

        if season not in seasons:
            raise UnknownEpisodeError(f"{record.name} has no season {season}")

        for entry in seasons[season]:
            if entry.number == episode:
                return entry.name

        raise UnknownEpisodeError(f"{record.name} season {season} has no episode {episode}")
