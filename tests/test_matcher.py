"""Tests for token normalization and library matching."""

from import_utils.matcher import edit_distance, rank_local_entries
from import_utils.tokens import comparable, join_tokens, tokenize


class TestTokens:
    def test_tokenize_splits_on_separator_runs(self):
        assert tokenize("show-_- .name+2009") == ["show", "name", "2009"]

    def test_tokenize_empty(self):
        assert tokenize(" .-_+ ") == []

    def test_join_tokens(self):
        assert join_tokens("the.wire-_ ") == "the wire"

    def test_comparable_lowercases(self):
        assert comparable("The.Wire") == "the wire"


class TestEditDistance:
    def test_case_and_separators_are_ignored(self):
        assert edit_distance("Show Title", "show title") == 0
        assert edit_distance("The.Wire", "the wire") == 0

    def test_distance_counts_edits(self):
        assert edit_distance("The Wire", "The Wirr") == 1


class TestRankLocalEntries:
    def test_closest_entry_first(self):
        ranked = rank_local_entries(["The Office", "The Wire", "Wired"], "the.wire")

        assert ranked[0] == ("The Wire", 0)
        assert [entry for entry, _ in ranked[1:]] == sorted(
            ["The Office", "Wired"], key=lambda entry: edit_distance(entry, "the wire")
        )

    def test_every_entry_is_scored(self):
        assert len(rank_local_entries(["a", "b", "c"], "x")) == 3

    def test_ties_keep_input_order(self):
        assert rank_local_entries(["abc", "abd"], "abx") == [("abc", 1), ("abd", 1)]

    def test_empty_library(self):
        assert rank_local_entries([], "anything") == []
