"""
Selection policies turning a ranking into one chosen candidate.

The ranking core only calls ``SelectionPolicy.select``; whether a person
is asked or the best match is taken is decided by the policy injected at
startup.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from .models import ScoredCandidate
from .ranker import Ranking

logger = logging.getLogger(__name__)


class SelectionInputError(ValueError):
    """The entered selection is not a number in range."""

    pass


class NoCandidatesError(Exception):
    """There is nothing to select from."""

    pass


class SelectionAbortedError(Exception):
    """The user closed the prompt (EOF or Ctrl-C) instead of choosing."""

    pass


def parse_selection(text: str, count: int) -> int:
    """
    Parse a 1-based selection into a 0-based index.

    Raises:
        SelectionInputError: If the text is not an integer in [1, count]
    """
    try:
        number = int(text.strip())
    except ValueError:
        raise SelectionInputError(f"'{text}' is not a number")

    if not 1 <= number <= count:
        raise SelectionInputError(f"{number} is not between 1 and {count}")

    return number - 1


class SelectionPolicy(ABC):
    """Chooses one candidate from a ranking."""

    def select(self, ranking: Ranking) -> ScoredCandidate:
        if not ranking.candidates:
            raise NoCandidatesError("No candidates found")
        return self._choose(ranking)

    @abstractmethod
    def _choose(self, ranking: Ranking) -> ScoredCandidate:
        ...


class AutomaticSelection(SelectionPolicy):
    """Always takes the best-scored candidate."""

    def _choose(self, ranking: Ranking) -> ScoredCandidate:
        choice = ranking.candidates[0]
        logger.info(f"Automatically selected: {choice.display_name} ({choice.source.label}, score {choice.score})")
        return choice


class InteractiveSelection(SelectionPolicy):
    """Shows the ranking as tables and asks for a number until a valid one is given."""

    def __init__(self, console: Optional[Console] = None, ask: Optional[Callable[[str], str]] = None):
        self.console = console or Console()
        self.ask = ask or (lambda prompt: Prompt.ask(prompt, console=self.console))

    def render(self, ranking: Ranking) -> None:
        for source, rows in ranking.sections():
            table = Table(title=source.label, show_header=True, header_style="bold magenta")
            table.add_column("#", justify="right")
            table.add_column("Name")
            table.add_column("Score", justify="right")
            for index, candidate in rows:
                table.add_row(str(index), candidate.display_name, str(candidate.score))
            self.console.print(table)

    def _choose(self, ranking: Ranking) -> ScoredCandidate:
        self.render(ranking)
        count = len(ranking.candidates)

        while True:
            try:
                answer = self.ask(f"Select a match [1-{count}]")
            except (EOFError, KeyboardInterrupt) as e:
                self.console.print()
                raise SelectionAbortedError(f"Selection aborted ({type(e).__name__})")
            try:
                return ranking.candidates[parse_selection(answer, count)]
            except SelectionInputError as e:
                self.console.print(f"[bold red]Invalid selection:[/] {e}")
