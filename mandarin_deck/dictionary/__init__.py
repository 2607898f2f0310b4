"""CC-CEDICT lookup, segmentation and script classification."""

from .cedict import (
    CedictDictionary,
    CedictEntry,
    Script,
    classify_script,
    is_cjk,
    parse_cedict_line,
)
from .download import CEDICT_URL, download_cedict

__all__ = [
    'CEDICT_URL',
    'CedictDictionary',
    'CedictEntry',
    'Script',
    'classify_script',
    'download_cedict',
    'is_cjk',
    'parse_cedict_line',
]
