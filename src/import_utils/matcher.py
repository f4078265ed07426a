"""
Fuzzy matching of extracted titles against the existing library.

Scores are Levenshtein edit distances between token-normalized, lower-cased
strings: 0 means the word sequences are identical.
"""

import logging
from typing import Iterable, List, Tuple

from rapidfuzz.distance import Levenshtein

from .tokens import comparable

logger = logging.getLogger(__name__)


def edit_distance(left: str, right: str) -> int:
    """Edit distance between two names after normalization."""
    return Levenshtein.distance(comparable(left), comparable(right))


def rank_local_entries(entries: Iterable[str], title: str) -> List[Tuple[str, int]]:
    """
    Rank library entry names by distance to the extracted title.

    Args:
        entries: Immediate child names of a library root
        title: Title extracted from the imported filename

    Returns:
        (entry, distance) pairs, closest first
    """
    target = comparable(title)
    scored = [(entry, Levenshtein.distance(comparable(entry), target)) for entry in entries]
    scored.sort(key=lambda item: item[1])

    if scored:
        logger.debug(f"Closest library entry for '{title}': {scored[0][0]} ({scored[0][1]})")

    return scored
