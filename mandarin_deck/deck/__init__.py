"""Deck building module."""

from .builder import MandarinDeckBuilder, ThreadSafeStats
from .cards import CardFactory

__all__ = ['CardFactory', 'MandarinDeckBuilder', 'ThreadSafeStats']
