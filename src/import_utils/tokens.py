"""
Word token extraction for names pulled from filenames and catalogs.

Both sides of every comparison go through the same normalization so that
separator and punctuation differences never change a score.
"""

import re
from typing import List

# Any run of period, hyphen, underscore, plus or whitespace
SEPARATOR_CHARS = r".\-_+\s"
_WORD_REGEX = re.compile(rf"[^{SEPARATOR_CHARS}]+")


def tokenize(text: str) -> List[str]:
    """Split text into its non-empty word tokens."""
    return _WORD_REGEX.findall(text)


def join_tokens(text: str) -> str:
    """
    Rejoin the tokens of a name with single spaces.

    Example: "the.wire-_ " -> "the wire"
    """
    return " ".join(tokenize(text))


def comparable(text: str) -> str:
    """Normalized, lower-cased form used for edit distance scoring."""
    return join_tokens(text).lower()
