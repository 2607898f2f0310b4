"""
Split mixed-script input into word tokens.

Recognised dictionary words become one token each; every character between
them (punctuation, ``*`` markers, Latin text) becomes its own token with no
entries. Joining the token texts always gives back the input.
"""

from typing import List

from loguru import logger

from ..dictionary import CedictDictionary
from ..models import MandarinSentence, Token


def tokenize(raw: str, dictionary: CedictDictionary) -> List[Token]:
    """
    Partition ``raw`` into tokens.

    Args:
        raw: Input text
        dictionary: Segmenter and entry index

    Returns:
        Tokens whose texts concatenate to ``raw``
    """
    tokens: List[Token] = []
    cursor = 0
    for word in dictionary.segment(raw):
        position = raw.find(word, cursor)
        if position < 0:
            logger.warning(f"Segmented word {word!r} not found after position {cursor} in {raw!r}")
            continue
        tokens.extend(Token(char) for char in raw[cursor:position])
        tokens.append(Token(word, tuple(dictionary.lookup(word))))
        cursor = position + len(word)
    tokens.extend(Token(char) for char in raw[cursor:])
    return tokens


def tokenize_sentence(raw: str, dictionary: CedictDictionary) -> MandarinSentence:
    return MandarinSentence(raw_text=raw, tokens=tuple(tokenize(raw, dictionary)))
