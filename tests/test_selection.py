"""Tests for automatic and interactive candidate selection."""

from io import StringIO

import pytest
from rich.console import Console

from conftest import make_ranking
from import_utils.models import CandidateSource, LocalPayload, ScoredCandidate
from import_utils.selection import (
    AutomaticSelection,
    InteractiveSelection,
    NoCandidatesError,
    SelectionAbortedError,
    SelectionInputError,
    parse_selection,
)


def _candidates():
    return [
        ScoredCandidate("The Wire", 0, CandidateSource.LOCAL_TV, LocalPayload("The Wire")),
        ScoredCandidate("The Wired", 1, CandidateSource.LOCAL_TV, LocalPayload("The Wired")),
        ScoredCandidate("Wire", 4, CandidateSource.LOCAL_DOCUMENTARY, LocalPayload("Wire")),
    ]


class TestParseSelection:
    def test_one_based(self):
        assert parse_selection("1", 3) == 0
        assert parse_selection(" 3 ", 3) == 2

    @pytest.mark.parametrize("text", ["0", "4", "-1", "abc", ""])
    def test_rejects_out_of_range_and_garbage(self, text):
        with pytest.raises(SelectionInputError):
            parse_selection(text, 3)


class TestAutomaticSelection:
    def test_takes_best(self):
        assert AutomaticSelection().select(make_ranking(_candidates())).display_name == "The Wire"

    def test_empty_ranking(self):
        with pytest.raises(NoCandidatesError):
            AutomaticSelection().select(make_ranking([]))


class TestInteractiveSelection:
    def test_reprompts_until_valid(self):
        answers = iter(["abc", "0", "5", "2"])
        prompts = []

        def ask(prompt):
            prompts.append(prompt)
            return next(answers)

        output = StringIO()
        policy = InteractiveSelection(console=Console(file=output, width=120), ask=ask)

        choice = policy.select(make_ranking(_candidates()))

        assert choice.display_name == "The Wired"
        assert len(prompts) == 4
        assert prompts[0] == "Select a match [1-3]"
        assert output.getvalue().count("Invalid selection:") == 3

    def test_renders_one_table_per_source(self):
        output = StringIO()
        policy = InteractiveSelection(console=Console(file=output, width=120), ask=lambda prompt: "1")

        policy.select(make_ranking(_candidates()))

        rendered = output.getvalue()
        assert "Existing TV shows" in rendered
        assert "Existing documentaries" in rendered
        assert "The Wired" in rendered

    def test_empty_ranking_never_prompts(self):
        def ask(prompt):
            raise AssertionError("should not prompt")

        with pytest.raises(NoCandidatesError):
            InteractiveSelection(console=Console(file=StringIO()), ask=ask).select(make_ranking([]))

    @pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
    def test_closed_prompt_aborts_selection(self, error):
        def ask(prompt):
            raise error

        policy = InteractiveSelection(console=Console(file=StringIO()), ask=ask)

        with pytest.raises(SelectionAbortedError, match=error.__name__):
            policy.select(make_ranking(_candidates()))
