"""
Constants and configuration defaults for the NAS media importer.

This module holds the library layout defaults, the accepted video file
extensions, catalog endpoints and type tags, remux settings and logging
defaults shared by every stage of the import pipeline.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Library layout defaults, relative to the configured media root
MEDIA_ROOT = "/media"
TV_FOLDER = "TV"
DOCUMENTARY_FOLDER = "Documentaries"
MOVIE_FOLDER = "Movies"

# Ranking
VISIBLE_RESULTS = 5
MAX_EXTRA_SERIES = 10
MAX_TITLE_RESULTS = 10

# Accepted video file extensions
VIDEO_EXTENSIONS = {".mkv", ".mp4", ".avi", ".mov", ".m4v", ".webm", ".wmv", ".ts", ".mpg"}

# Destination container
MATROSKA_EXTENSION = ".mkv"
PARTIAL_SUFFIX = ".part"

# Filename sanitizing
PATH_SEPARATOR_SUBSTITUTE = "∕"  # DIVISION SLASH, looks like "/"
RESERVED_CHARACTERS = '<>:"\\|?*'

# Genre filters used by the ranker
DOCUMENTARY_GENRE = "documentary"
NOT_DOCUMENTARY_GENRE = "!documentary"

# Title catalog type tags accepted for movies ("" is a plain feature film)
MOVIE_TYPE_TAGS = frozenset({"", "Video", "TV Movie"})
SERIES_TYPE_TAGS = frozenset({"TV Series", "TV Mini-Series"})

# OMDb reports its own type names; map them onto IMDb-style tags
OMDB_TYPE_TAGS = {
    "movie": "",
    "series": "TV Series",
    "episode": "TV Episode",
    "game": "Video Game",
}

# TMDb API configuration
TMDB_API_KEY = os.getenv("TMDB_API_KEY")
TMDB_BASE_URL = "https://api.themoviedb.org/3"

# OMDb API configuration
OMDB_API_KEY = os.getenv("OMDB_API_KEY")
OMDB_BASE_URL = "https://www.omdbapi.com/"

# Remux settings (stream copy only, never re-encode)
REMUX_TOOL = "ffmpeg"
PRIMARY_REMUX_SETTINGS = {
    "input": {},
    "output": {"c": "copy", "map": "0", "format": "matroska"},
}
SECONDARY_REMUX_SETTINGS = {
    "input": {"fflags": "+genpts"},
    "output": {"c": "copy", "map": "0", "format": "matroska"},
}

# Logging configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_DIR = "./.logs"
LOGGER_NAME = "nasimporter"
