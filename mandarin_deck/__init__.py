"""Mandarin Deck - Anki flashcards from Mandarin vocabulary lists"""

__version__ = "1.0.0"

from .config import Config, load_config
from .deck import CardFactory, MandarinDeckBuilder
from .dictionary import CedictDictionary
from .templates import CardTemplates

__all__ = [
    'CardFactory',
    'CardTemplates',
    'CedictDictionary',
    'Config',
    'MandarinDeckBuilder',
    'load_config',
]
