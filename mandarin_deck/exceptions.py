"""Exception hierarchy for the deck builder."""


class MandarinDeckError(Exception):
    """Base class for every error raised by mandarin_deck."""


class ConfigError(MandarinDeckError):
    """Configuration is missing or malformed. Fatal before any work starts."""


class DictionaryError(MandarinDeckError):
    """The CC-CEDICT file is missing or unreadable."""


class ServiceError(MandarinDeckError):
    """A remote service answered with a non-success status or an unusable payload."""

    def __init__(self, service: str, status: int, body: str = "") -> None:
        self.service = service
        self.status = status
        self.body = body
        super().__init__(f"{service} returned HTTP {status}: {body[:200]}")


class PinyinParseError(MandarinDeckError):
    """A pinyin stream could not be split into valid syllables."""

    def __init__(self, text: str, position: int) -> None:
        self.text = text
        self.position = position
        super().__init__(f"Cannot parse pinyin at position {position}: {text!r}")


class MissingReadingError(MandarinDeckError):
    """A recognised word token carries no reading. This is a defect, not a skip."""


class PackageWriteError(MandarinDeckError):
    """The output package could not be written."""
