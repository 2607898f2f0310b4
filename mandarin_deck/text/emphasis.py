"""
Emphasis rendering.

Users mark words to highlight by wrapping them in ``*``. Odd occurrences
open a span and even ones close it; an odd total leaves the last span open.
"""

from typing import Iterable

from ..models import Token

EMPHASIS_DELIMITER = "*"


class EmphasisToggle:
    """Alternates between the opening and closing markup."""

    OPEN = "<span class=starred>"
    CLOSE = "</span>"

    def __init__(self) -> None:
        self.is_open = False

    def next(self) -> str:
        markup = self.CLOSE if self.is_open else self.OPEN
        self.is_open = not self.is_open
        return markup


def _render_pieces(pieces: Iterable[str]) -> str:
    toggle = EmphasisToggle()
    return "".join(toggle.next() if piece == EMPHASIS_DELIMITER else piece for piece in pieces)


def render(tokens: Iterable[Token]) -> str:
    """Token texts with every delimiter token replaced by span markup."""
    return _render_pieces(token.text for token in tokens)


def render_plain(tokens: Iterable[Token]) -> str:
    """Token texts with delimiter tokens dropped."""
    return "".join(token.text for token in tokens if token.text != EMPHASIS_DELIMITER)


def render_reading(text: str) -> str:
    """Apply the span markup to a reading, character by character."""
    return _render_pieces(text)


def strip_delimiters(text: str) -> str:
    return text.replace(EMPHASIS_DELIMITER, "")


def count_delimiters(text: str) -> int:
    return text.count(EMPHASIS_DELIMITER)


def has_balanced_emphasis(text: str) -> bool:
    return count_delimiters(text) % 2 == 0
