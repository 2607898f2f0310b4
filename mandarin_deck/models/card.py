"""Data models for tokens, sentences and cards."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import genanki

from ..dictionary import CedictEntry


@dataclass(frozen=True)
class Token:
    """
    One piece of a tokenized input string.

    ``entries is None`` marks a non-Mandarin character (punctuation, emphasis
    marker, Latin text). An empty tuple marks a recognised segment that has
    no dictionary entry.
    """
    text: str
    entries: Optional[Tuple[CedictEntry, ...]] = None

    @property
    def is_mandarin(self) -> bool:
        return self.entries is not None

    @property
    def has_entries(self) -> bool:
        return bool(self.entries)

    def build_definition(self) -> str:
        """All glosses of all entries, joined with ``, ``."""
        if not self.entries:
            return ""
        return ", ".join(gloss for entry in self.entries for gloss in entry.english)


@dataclass(frozen=True)
class MandarinSentence:
    raw_text: str
    tokens: Tuple[Token, ...]

    @property
    def has_mandarin(self) -> bool:
        return any(token.has_entries for token in self.tokens)


@dataclass(frozen=True)
class SimilarWord:
    """A related word suggested for a word card."""
    word: str
    translation: str
    reading: str = ""

    def build_string(self) -> str:
        return f"{self.word}, {self.reading}, {self.translation}"


@dataclass(frozen=True)
class AudioFile:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def note_field(self) -> str:
        return f"[sound:{self.name}]"


@dataclass(frozen=True)
class WordCard:
    timestamp: str
    hanzi: str
    definition: str
    audio: AudioFile
    reading: str
    similar_words: Tuple[SimilarWord, ...] = ()

    def similar_words_field(self) -> str:
        return "<br>".join(word.build_string() for word in self.similar_words)

    def fields(self) -> List[str]:
        return [
            self.timestamp,
            self.hanzi,
            self.definition,
            self.audio.note_field(),
            self.reading,
            self.similar_words_field(),
        ]

    def to_note(self, model: genanki.Model) -> genanki.Note:
        return genanki.Note(model=model, fields=self.fields())


@dataclass(frozen=True)
class SentenceCard:
    timestamp: str
    hanzi: str
    meaning: str
    audio: AudioFile
    reading: str

    def fields(self) -> List[str]:
        return [
            self.timestamp,
            self.hanzi,
            self.meaning,
            self.audio.note_field(),
            self.reading,
        ]

    def to_note(self, model: genanki.Model) -> genanki.Note:
        return genanki.Note(model=model, fields=self.fields())
