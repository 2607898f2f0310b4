"""Text parsing utilities for consistent text processing across the application."""

import re
import unicodedata


class TextParser:
    """Centralized text clean-up for input fields and SSML payloads."""

    WHITESPACE_PATTERN = re.compile(r'\s+')

    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """
        Normalize text to NFC form for consistent Unicode handling.

        Prevents a tone-marked vowel arriving either as one codepoint or as a
        base letter plus combining mark.
        """
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))

    @classmethod
    def clean_field(cls, text: str) -> str:
        """Trim surrounding whitespace and NFC-normalize a CSV field."""
        return cls.normalize_unicode(str(text)).strip()

    @classmethod
    def collapse_whitespace(cls, text: str) -> str:
        return cls.WHITESPACE_PATTERN.sub(' ', text).strip()
