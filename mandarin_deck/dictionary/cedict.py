"""
CC-CEDICT dictionary index.

Loads the CC-CEDICT text export into memory and answers three questions:

* ``lookup(text)``: which entries have ``text`` as a headword
* ``segment(text)``: which dictionary words occur in ``text``, in order
* ``classify_script(text)``: is ``text`` Mandarin at all

Entries are frozen and owned by the index. Callers keep references to the
same objects and never copy them.
"""

import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import jieba
from loguru import logger

from ..config import MandarinScript
from ..exceptions import DictionaryError

CEDICT_LINE_RE = re.compile(
    r"^(?P<trad>\S+)\s+(?P<simp>\S+)\s+\[(?P<pinyin>[^\]]+)\]\s+/(?P<defs>.+)/\s*$"
)

# Frequency given to CC-CEDICT headwords that jieba's own lexicon lacks.
CEDICT_WORD_FREQ = 100

# CJK Unified Ideographs and their extensions, plus compatibility ideographs.
CJK_RANGES = (
    (0x3400, 0x4DBF),
    (0x4E00, 0x9FFF),
    (0xF900, 0xFAFF),
    (0x20000, 0x2A6DF),
    (0x2A700, 0x2EBEF),
    (0x30000, 0x3134F),
)


class Script(Enum):
    """Result of script classification."""
    MANDARIN = "zh"
    OTHER = "other"


def is_cjk(char: str) -> bool:
    """True for a single CJK ideograph (including 〇)."""
    if char == "〇":
        return True
    code = ord(char)
    return any(start <= code <= end for start, end in CJK_RANGES)


def classify_script(text: str) -> Script:
    """
    Classify ``text`` as Mandarin or something else.

    Mandarin means at least one CJK ideograph and no Latin letters.
    """
    stripped = text.strip()
    if any("a" <= char.lower() <= "z" for char in stripped):
        return Script.OTHER
    if any(is_cjk(char) for char in stripped):
        return Script.MANDARIN
    return Script.OTHER


@dataclass(frozen=True)
class CedictEntry:
    """One CC-CEDICT line."""
    traditional: str
    simplified: str
    pinyin_numbers: str
    english: Tuple[str, ...]

    def headword(self, script: MandarinScript) -> str:
        if script is MandarinScript.SIMPLIFIED:
            return self.simplified
        return self.traditional

    @property
    def syllables(self) -> List[str]:
        return self.pinyin_numbers.split()


def parse_cedict_line(line: str) -> Optional[CedictEntry]:
    """Parse one line of the CC-CEDICT export; comments and junk give None."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    match = CEDICT_LINE_RE.match(line)
    if not match:
        return None
    glosses = tuple(gloss.strip() for gloss in match.group("defs").split("/") if gloss.strip())
    return CedictEntry(
        traditional=match.group("trad"),
        simplified=match.group("simp"),
        pinyin_numbers=match.group("pinyin").strip(),
        english=glosses,
    )


class CedictDictionary:
    """
    In-memory CC-CEDICT index keyed by both traditional and simplified headwords.

    Usage:
        dictionary = CedictDictionary.load("cedict_ts.u8")
        entries = dictionary.lookup("你好")
        words = dictionary.segment("你好，世界")
    """

    def __init__(self, entries: Iterable[CedictEntry]) -> None:
        self._index: Dict[str, List[CedictEntry]] = defaultdict(list)
        for entry in entries:
            self._index[entry.traditional].append(entry)
            if entry.simplified != entry.traditional:
                self._index[entry.simplified].append(entry)
        self._max_word_length = max((len(word) for word in self._index), default=1)
        self._tokenizer: Optional[jieba.Tokenizer] = None
        self._tokenizer_lock = Lock()

    @classmethod
    def load(cls, path: Union[str, Path]) -> "CedictDictionary":
        """
        Load a CC-CEDICT text file.

        Raises:
            DictionaryError: If the file is missing, unreadable or has no entries
        """
        path = Path(path)
        if not path.exists():
            raise DictionaryError(
                f"CC-CEDICT file not found: {path}. Run 'mandarin-deck download-dictionary' first."
            )
        try:
            with open(path, "r", encoding="utf-8") as f:
                entries = [entry for entry in map(parse_cedict_line, f) if entry is not None]
        except (OSError, UnicodeDecodeError) as e:
            raise DictionaryError(f"Could not read CC-CEDICT file {path}: {e}") from e
        if not entries:
            raise DictionaryError(f"No dictionary entries found in {path}")
        logger.debug(f"Loaded {len(entries)} CC-CEDICT entries from {path}")
        return cls(entries)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, word: str) -> bool:
        return word in self._index

    def lookup(self, text: str) -> List[CedictEntry]:
        """Entries whose traditional or simplified headword is exactly ``text``."""
        return list(self._index.get(text, ()))

    def query(self, text: str) -> List[CedictEntry]:
        """
        Entries for ``text``, falling back to its parts.

        When ``text`` is not a headword, the first entry of every segmented word
        is returned in reading order.
        """
        entries = self.lookup(text)
        if entries:
            return entries
        parts = []
        for word in self.segment(text):
            matches = self._index.get(word)
            if matches:
                parts.append(matches[0])
        return parts

    def segment(self, text: str) -> List[str]:
        """
        Ordered Mandarin words found in ``text``.

        jieba proposes the cut; pieces that are not headwords are split again by
        longest dictionary match, and unknown ideographs come back one by one.
        Non-Mandarin characters are skipped.
        """
        words: List[str] = []
        for piece in self._get_tokenizer().cut(text, HMM=False):
            if piece in self._index:
                words.append(piece)
            else:
                words.extend(self._longest_matches(piece))
        return words

    def _longest_matches(self, piece: str) -> Iterator[str]:
        position = 0
        while position < len(piece):
            end = min(len(piece), position + self._max_word_length)
            while end > position + 1 and piece[position:end] not in self._index:
                end -= 1
            candidate = piece[position:end]
            if candidate in self._index or is_cjk(candidate):
                yield candidate
            position = end

    def _get_tokenizer(self) -> jieba.Tokenizer:
        """Build the jieba tokenizer once, teaching it every CC-CEDICT headword."""
        with self._tokenizer_lock:
            if self._tokenizer is None:
                tokenizer = jieba.Tokenizer()
                tokenizer.initialize()
                added = 0
                for word in self._index:
                    if len(word) > 1 and not tokenizer.FREQ.get(word):
                        tokenizer.add_word(word, freq=CEDICT_WORD_FREQ)
                        added += 1
                logger.debug(f"Added {added} CC-CEDICT words to the segmenter")
                self._tokenizer = tokenizer
            return self._tokenizer
