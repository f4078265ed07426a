"""
TMDb API client used as the series catalog.

This module provides a clean interface to The Movie Database API for
series searches, IMDb id lookups and season/episode listings, handling
request errors and translating responses into series records.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from common.constants import TMDB_API_KEY, TMDB_BASE_URL

from .models import Episode, SeriesRecord

logger = logging.getLogger(__name__)


class TMDbError(Exception):
    """Base exception for TMDb API errors."""

    pass


class TMDbAPIError(TMDbError):
    """Exception for API request failures."""

    pass


class TMDbClient:
    """Client for interacting with The Movie Database API."""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        """Initialize the TMDb client with an API key."""
        self.api_key = api_key or TMDB_API_KEY
        if not self.api_key:
            raise TMDbError("TMDb API key is required. Set TMDB_API_KEY or tmdb_api_key in the config file.")

        self.session = session or requests.Session()
        self.session.params = {"api_key": self.api_key}
        self._genres: Optional[Dict[int, str]] = None

    def _make_request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a request to the TMDb API and handle errors."""
        url = f"{TMDB_BASE_URL}/{endpoint.lstrip('/')}"

        try:
            logger.debug(f"TMDb API request: {url}")
            if params:
                logger.debug(f"Request params: {params}")

            response = self.session.get(url, params=params, timeout=30)
            response.raise_for_status()

            data = response.json()

            if "success" in data and not data["success"]:
                raise TMDbAPIError(f"TMDb API error: {data.get('status_message', 'Unknown error')}")

            if "results" in data:
                logger.debug(f"TMDb response: {len(data['results'])} results found")

            return data

        except requests.exceptions.RequestException as e:
            raise TMDbAPIError(f"Request failed: {e}")
        except ValueError as e:
            raise TMDbAPIError(f"Invalid JSON response: {e}")

    def _genre_names(self) -> Dict[int, str]:
        """Map TV genre ids to names, fetched once per client."""
        if self._genres is None:
            data = self._make_request("genre/tv/list")
            self._genres = {genre["id"]: genre["name"] for genre in data.get("genres", [])}
        return self._genres

    def _to_series(self, result: Dict[str, Any]) -> SeriesRecord:
        genre_names = self._genre_names()
        genres = [genre_names[genre_id] for genre_id in result.get("genre_ids", []) if genre_id in genre_names]
        return SeriesRecord(id=str(result["id"]), name=result.get("name", ""), genres=genres)

    def search_by_title(self, title: str, limit: int) -> List[SeriesRecord]:
        """Search for TV series by title, returning at most ``limit`` records."""
        logger.info(f"Searching TMDb for series: '{title}'")
        data = self._make_request("search/tv", {"query": title})
        results = data.get("results", [])[:limit]

        if not results:
            logger.debug(f"No TMDb series results found for: '{title}'")

        return [self._to_series(result) for result in results]

    def lookup_by_external_id(self, external_id: str) -> Optional[SeriesRecord]:
        """Find the series for an IMDb id, or None if TMDb does not know it."""
        logger.debug(f"Looking up TMDb series for external id: {external_id}")
        data = self._make_request(f"find/{external_id}", {"external_source": "imdb_id"})
        results = data.get("tv_results", [])
        if not results:
            return None
        return self._to_series(results[0])

    def fetch_season_detail(self, series_id: str) -> Dict[int, List[Episode]]:
        """Fetch every season of a series with its episode numbers and names."""
        logger.debug(f"Getting season details for series ID: {series_id}")
        details = self._make_request(f"tv/{series_id}")

        seasons = {}
        for season in details.get("seasons", []):
            season_number = season["season_number"]
            season_data = self._make_request(f"tv/{series_id}/season/{season_number}")
            seasons[season_number] = [
                Episode(number=episode["episode_number"], name=episode.get("name") or "")
                for episode in season_data.get("episodes", [])
            ]

        return seasons
