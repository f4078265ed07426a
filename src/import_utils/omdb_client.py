"""
OMDb API client used as the title catalog.

OMDb exposes IMDb titles: a string search returning typed hits, and a
detail lookup by IMDb id carrying the genre list the search lacks.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from common.constants import OMDB_API_KEY, OMDB_BASE_URL, OMDB_TYPE_TAGS

from .models import TitleDetail, TitleRecord

logger = logging.getLogger(__name__)


class OMDbError(Exception):
    """Exception for OMDb API failures."""

    pass


def _first_year(year: Optional[str]) -> Optional[str]:
    """OMDb years can be ranges like "2005–2013"; keep the first year."""
    if not year or year == "N/A":
        return None
    return year.split("–")[0].split("-")[0].strip() or None


class OMDbClient:
    """Interface to the Open Movie Database API"""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key or OMDB_API_KEY
        if not self.api_key:
            raise OMDbError("OMDb API key is required. Set OMDB_API_KEY or omdb_api_key in the config file.")

        self.base_url = OMDB_BASE_URL
        self.session = session or requests.Session()

    def _query_api(self, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """Make an API request; None means OMDb found nothing."""
        try:
            response = self.session.get(self.base_url, params={"apikey": self.api_key, **params}, timeout=30)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise OMDbError(f"Request failed: {e}")
        except ValueError as e:
            raise OMDbError(f"Invalid JSON response: {e}")

        if data.get("Response") == "False":
            error = data.get("Error", "Unknown error")
            if "not found" in error.lower():
                logger.debug(f"No OMDb results for {params}: {error}")
                return None
            raise OMDbError(f"OMDb API error: {error}")

        return data

    def search_by_title(self, title: str) -> List[TitleRecord]:
        """Search titles of any type by string."""
        logger.info(f"Searching OMDb for title: '{title}'")
        data = self._query_api({"s": title})
        if data is None:
            return []

        records = []
        for item in data.get("Search", []):
            records.append(
                TitleRecord(
                    id=item["imdbID"],
                    name=item.get("Title", ""),
                    year=_first_year(item.get("Year")),
                    type_tag=OMDB_TYPE_TAGS.get(item.get("Type", "").lower(), item.get("Type", "")),
                )
            )

        logger.debug(f"OMDb returned {len(records)} title results")
        return records

    def fetch_detail(self, title_id: str) -> TitleDetail:
        """Fetch the detail record of a title for its genres."""
        logger.debug(f"Getting OMDb details for ID: {title_id}")
        data = self._query_api({"i": title_id})
        if data is None:
            raise OMDbError(f"Title not found: {title_id}")

        genres = []
        if data.get("Genre") and data["Genre"] != "N/A":
            genres = [genre.strip() for genre in data["Genre"].split(",")]

        return TitleDetail(genres=genres)
