"""
Importer configuration loading.

The importer is configured by a small JSON file. Every key is optional;
missing library roots fall back to folders below ``media_root`` and missing
API keys fall back to the environment (see ``common.constants``).
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DOCUMENTARY_FOLDER,
    LOG_DIR,
    MEDIA_ROOT,
    MOVIE_FOLDER,
    OMDB_API_KEY,
    REMUX_TOOL,
    TMDB_API_KEY,
    TV_FOLDER,
    VISIBLE_RESULTS,
)

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "media_root",
    "tv_root",
    "documentary_root",
    "movie_root",
    "primary_remux_tool",
    "secondary_remux_tool",
    "visible_results",
    "strip_reserved_characters",
    "tmdb_api_key",
    "omdb_api_key",
    "log_dir",
}


class ConfigError(Exception):
    """Exception for missing or invalid configuration."""

    pass


@dataclass(frozen=True)
class ImporterConfig:
    """Resolved, read-only importer settings."""

    tv_root: Path
    documentary_root: Path
    movie_root: Path
    primary_remux_tool: str = REMUX_TOOL
    secondary_remux_tool: str = REMUX_TOOL
    visible_results: int = VISIBLE_RESULTS
    strip_reserved_characters: bool = True
    tmdb_api_key: Optional[str] = None
    omdb_api_key: Optional[str] = None
    log_dir: Path = Path(LOG_DIR)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImporterConfig":
        """Build a config from parsed JSON, applying defaults."""
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        media_root = Path(data.get("media_root", MEDIA_ROOT))

        visible_results = data.get("visible_results", VISIBLE_RESULTS)
        if not isinstance(visible_results, int) or isinstance(visible_results, bool) or visible_results < 1:
            raise ConfigError(f"visible_results must be a positive integer, got {visible_results!r}")

        strip_reserved = data.get("strip_reserved_characters", True)
        if not isinstance(strip_reserved, bool):
            raise ConfigError(f"strip_reserved_characters must be true or false, got {strip_reserved!r}")

        return cls(
            tv_root=Path(data.get("tv_root", media_root / TV_FOLDER)),
            documentary_root=Path(data.get("documentary_root", media_root / DOCUMENTARY_FOLDER)),
            movie_root=Path(data.get("movie_root", media_root / MOVIE_FOLDER)),
            primary_remux_tool=str(data.get("primary_remux_tool", REMUX_TOOL)),
            secondary_remux_tool=str(data.get("secondary_remux_tool", REMUX_TOOL)),
            visible_results=visible_results,
            strip_reserved_characters=strip_reserved,
            tmdb_api_key=data.get("tmdb_api_key") or TMDB_API_KEY,
            omdb_api_key=data.get("omdb_api_key") or OMDB_API_KEY,
            log_dir=Path(data.get("log_dir", LOG_DIR)),
        )


def load_config(config_path: Optional[Path]) -> ImporterConfig:
    """
    Load the importer configuration.

    Args:
        config_path: JSON file to read, or None to use defaults only

    Returns:
        The resolved ImporterConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if config_path is None:
        logger.debug("No config file given, using defaults")
        return ImporterConfig.from_dict({})

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to read config file {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    logger.debug(f"Loaded config from {config_path}")
    return ImporterConfig.from_dict(data)
