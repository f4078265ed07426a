"""Tests for the TMDb and OMDb clients against a mocked HTTP session."""

from unittest.mock import MagicMock

import pytest
import requests

from import_utils.models import Episode, SeriesRecord, TitleRecord
from import_utils.omdb_client import OMDbClient, OMDbError
from import_utils.tmdb_client import TMDbAPIError, TMDbClient, TMDbError


def _response(data):
    response = MagicMock()
    response.json.return_value = data
    return response


def _session(routes):
    """Session whose GET answers by URL suffix"""
    session = MagicMock()

    def get(url, params=None, timeout=None):
        for suffix, data in routes.items():
            if url.endswith(suffix):
                return _response(data)
        raise AssertionError(f"unexpected request {url}")

    session.get.side_effect = get
    return session


GENRES = {"genres": [{"id": 18, "name": "Drama"}, {"id": 99, "name": "Documentary"}]}


class TestTMDbClient:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr("import_utils.tmdb_client.TMDB_API_KEY", None)

        with pytest.raises(TMDbError):
            TMDbClient(None, session=MagicMock())

    def test_search_maps_genres_and_limits(self):
        session = _session(
            {
                "genre/tv/list": GENRES,
                "search/tv": {
                    "results": [
                        {"id": 1438, "name": "The Wire", "genre_ids": [18, 80]},
                        {"id": 2, "name": "The Wire Files", "genre_ids": [99]},
                    ]
                },
            }
        )
        client = TMDbClient("key", session=session)

        records = client.search_by_title("the wire", limit=1)

        assert records == [SeriesRecord("1438", "The Wire", ["Drama"])]
        assert session.params == {"api_key": "key"}

    def test_requests_use_a_timeout(self):
        session = _session({"genre/tv/list": GENRES, "search/tv": {"results": []}})

        TMDbClient("key", session=session).search_by_title("x", 5)

        assert session.get.call_args.kwargs["timeout"] == 30

    def test_lookup_by_external_id(self):
        session = _session({"genre/tv/list": GENRES, "find/tt0306414": {"tv_results": [{"id": 1438, "name": "The Wire"}]}})

        record = TMDbClient("key", session=session).lookup_by_external_id("tt0306414")

        assert record == SeriesRecord("1438", "The Wire", [])
        assert session.get.call_args_list[0].kwargs["params"] == {"external_source": "imdb_id"}

    def test_lookup_by_external_id_unknown(self):
        session = _session({"find/tt1": {"tv_results": [], "movie_results": [{"id": 5}]}})

        assert TMDbClient("key", session=session).lookup_by_external_id("tt1") is None

    def test_fetch_season_detail(self):
        session = _session(
            {
                "tv/1438": {"seasons": [{"season_number": 0}, {"season_number": 1}]},
                "tv/1438/season/0": {"episodes": [{"episode_number": 1, "name": "Special"}]},
                "tv/1438/season/1": {
                    "episodes": [{"episode_number": 1, "name": "The Target"}, {"episode_number": 2, "name": None}]
                },
            }
        )

        seasons = TMDbClient("key", session=session).fetch_season_detail("1438")

        assert seasons == {0: [Episode(1, "Special")], 1: [Episode(1, "The Target"), Episode(2, "")]}

    def test_request_failure(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectTimeout("timed out")

        with pytest.raises(TMDbAPIError):
            TMDbClient("key", session=session).search_by_title("x", 5)

    def test_error_payload(self):
        session = _session({"search/tv": {"success": False, "status_message": "Invalid API key"}})

        with pytest.raises(TMDbAPIError, match="Invalid API key"):
            TMDbClient("key", session=session).search_by_title("x", 5)


class TestOMDbClient:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr("import_utils.omdb_client.OMDB_API_KEY", None)

        with pytest.raises(OMDbError):
            OMDbClient(None, session=MagicMock())

    def test_search_maps_types_and_years(self):
        session = MagicMock()
        session.get.return_value = _response(
            {
                "Response": "True",
                "Search": [
                    {"imdbID": "tt0306414", "Title": "The Wire", "Year": "2002–2008", "Type": "series"},
                    {"imdbID": "tt1", "Title": "Wire", "Year": "2010", "Type": "movie"},
                    {"imdbID": "tt2", "Title": "Wire Game", "Year": "N/A", "Type": "game"},
                ],
            }
        )

        records = OMDbClient("key", session=session).search_by_title("the wire")

        assert records == [
            TitleRecord("tt0306414", "The Wire", "2002", "TV Series"),
            TitleRecord("tt1", "Wire", "2010", ""),
            TitleRecord("tt2", "Wire Game", None, "Video Game"),
        ]
        assert session.get.call_args.kwargs["params"] == {"apikey": "key", "s": "the wire"}

    def test_not_found_is_empty(self):
        session = MagicMock()
        session.get.return_value = _response({"Response": "False", "Error": "Movie not found!"})

        assert OMDbClient("key", session=session).search_by_title("zzz") == []

    def test_api_error_raises(self):
        session = MagicMock()
        session.get.return_value = _response({"Response": "False", "Error": "Invalid API key!"})

        with pytest.raises(OMDbError, match="Invalid API key"):
            OMDbClient("key", session=session).search_by_title("x")

    def test_fetch_detail_genres(self):
        session = MagicMock()
        session.get.return_value = _response({"Response": "True", "Genre": "Documentary, History"})

        assert OMDbClient("key", session=session).fetch_detail("tt1").genres == ["Documentary", "History"]

    def test_fetch_detail_unknown_id(self):
        session = MagicMock()
        session.get.return_value = _response({"Response": "False", "Error": "Incorrect IMDb ID."})

        with pytest.raises(OMDbError):
            OMDbClient("key", session=session).fetch_detail("bad")

    def test_request_failure(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ReadTimeout("timed out")

        with pytest.raises(OMDbError):
            OMDbClient("key", session=session).search_by_title("x")
