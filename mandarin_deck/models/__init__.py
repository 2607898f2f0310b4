"""Data models."""

from .card import AudioFile, MandarinSentence, SentenceCard, SimilarWord, Token, WordCard

__all__ = ['AudioFile', 'MandarinSentence', 'SentenceCard', 'SimilarWord', 'Token', 'WordCard']
