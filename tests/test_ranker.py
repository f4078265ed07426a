"""Tests for candidate ranking across kinds and sources."""

from pathlib import Path
from unittest.mock import MagicMock

from conftest import make_ranking
from import_utils.classifier import classify_all
from import_utils.metadata import MetadataResolver
from import_utils.models import (
    CandidateSource,
    LocalPayload,
    MediaKind,
    ScoredCandidate,
    SeriesRecord,
    TitleRecord,
)
from import_utils.ranker import CandidateRanker


def _resolver(series=None, titles=None):
    resolver = MagicMock(spec=MetadataResolver)
    resolver.find_series.return_value = list(series or [])
    resolver.find_titles.return_value = list(titles or [])
    return resolver


def _library(tv=(), documentaries=(), movies=()):
    return {
        MediaKind.TV_SHOW: list(tv),
        MediaKind.DOCUMENTARY: list(documentaries),
        MediaKind.MOVIE: list(movies),
    }


class TestRank:
    def test_local_entry_beats_catalog_on_equal_score(self):
        resolver = _resolver(series=[SeriesRecord("1", "The Wire", ["Drama"])])
        ranker = CandidateRanker(resolver, _library(tv=["The Wire"]), visible_results=5)

        ranking = ranker.rank(classify_all(Path("the.wire.s01e02.mkv")))

        best = ranking.candidates[0]
        assert best.score == 0
        assert best.source is CandidateSource.LOCAL_TV
        assert best.payload == LocalPayload("The Wire")

    def test_order_does_not_depend_on_library_order(self):
        classifications = classify_all(Path("the.wire.s01e02.mkv"))
        first = CandidateRanker(_resolver(), _library(tv=["The Wire", "The Wirx"]), 5).rank(classifications)
        second = CandidateRanker(_resolver(), _library(tv=["The Wirx", "The Wire"]), 5).rank(classifications)

        assert [c.display_name for c in first.candidates] == [c.display_name for c in second.candidates]

    def test_sorted_by_score_then_source(self):
        resolver = _resolver(
            series=[SeriesRecord("1", "Show", [])],
            titles=[TitleRecord("tt1", "Shows", None, "")],
        )
        ranker = CandidateRanker(resolver, _library(tv=["Shoe"], documentaries=["Show"]), visible_results=5)

        ranking = ranker.rank(classify_all(Path("show.s01e01.mkv")))

        keys = [(c.score, c.source) for c in ranking.candidates]
        assert keys == sorted(keys)
        assert ranking.candidates[0].source is CandidateSource.LOCAL_DOCUMENTARY

    def test_tv_and_documentary_use_opposite_genre_filters(self):
        resolver = _resolver()
        ranker = CandidateRanker(resolver, _library(), visible_results=5)

        ranker.rank(classify_all(Path("planet.earth.s01e02.mkv")))

        filters = [call.args[1] for call in resolver.find_series.call_args_list]
        assert filters == ["!documentary", "documentary"]

    def test_documentary_series_needs_season_and_episode(self):
        resolver = _resolver()
        ranker = CandidateRanker(resolver, _library(), visible_results=5)

        ranker.rank(classify_all(Path("Cosmos.2014.Part.3.mkv")))

        resolver.find_series.assert_not_called()
        resolver.find_titles.assert_any_call("Cosmos", None, "documentary")

    def test_movie_titles_restricted_to_movie_types(self):
        resolver = _resolver(titles=[TitleRecord("tt1", "Inception", "2010", "")])
        ranker = CandidateRanker(resolver, _library(), visible_results=5)

        ranking = ranker.rank({MediaKind.MOVIE: classify_all(Path("Inception.2010.mkv"))[MediaKind.MOVIE]})

        resolver.find_titles.assert_called_once_with("Inception", frozenset({"", "Video", "TV Movie"}), "")
        assert ranking.candidates[0].display_name == "Inception (2010)"
        assert ranking.candidates[0].score == 0

    def test_no_classifications_gives_empty_ranking(self):
        assert len(CandidateRanker(_resolver(), _library(), 5).rank({})) == 0


class TestSections:
    def test_visible_rows_keep_global_numbers(self):
        candidates = [
            ScoredCandidate("A", 0, CandidateSource.LOCAL_TV, LocalPayload("A")),
            ScoredCandidate("B", 1, CandidateSource.REMOTE_MOVIE_TITLE, LocalPayload("B")),
            ScoredCandidate("C", 2, CandidateSource.LOCAL_TV, LocalPayload("C")),
            ScoredCandidate("D", 3, CandidateSource.LOCAL_TV, LocalPayload("D")),
        ]
        ranking = make_ranking(candidates, visible_results=2)

        sections = ranking.sections()

        assert [source for source, _ in sections] == [CandidateSource.LOCAL_TV, CandidateSource.REMOTE_MOVIE_TITLE]
        assert [(i, c.display_name) for i, c in sections[0][1]] == [(1, "A"), (3, "C")]
        assert [(i, c.display_name) for i, c in sections[1][1]] == [(2, "B")]
