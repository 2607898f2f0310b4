"""Script and reading variants for Mandarin cards."""

from enum import Enum


class MandarinScript(Enum):
    """Which character set the cards are written in."""
    TRADITIONAL = "Traditional"
    SIMPLIFIED = "Simplified"

    @property
    def display_name(self) -> str:
        return SCRIPT_CONFIG[self]["display_name"]

    @property
    def language(self) -> str:
        """Translator language code, e.g. ``zh-Hant``."""
        return SCRIPT_CONFIG[self]["language"]

    @property
    def from_script(self) -> str:
        """Translator script code, e.g. ``Hant``."""
        return SCRIPT_CONFIG[self]["from_script"]

    def __str__(self) -> str:
        return self.display_name


class MandarinReading(Enum):
    """Which phonetic notation is shown on the cards."""
    ZHUYIN = "Zhuyin"
    PINYIN = "Pinyin"


SCRIPT_CONFIG = {
    MandarinScript.TRADITIONAL: {
        "display_name": "Traditional Chinese",
        "language": "zh-Hant",
        "from_script": "Hant",
    },
    MandarinScript.SIMPLIFIED: {
        "display_name": "Simplified Chinese",
        "language": "zh-Hans",
        "from_script": "Hans",
    },
}
