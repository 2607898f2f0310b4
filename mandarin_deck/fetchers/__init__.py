"""Speech fetchers."""

from .audio import AzureSpeechFetcher, EdgeSpeechFetcher, build_ssml
from .base import BaseFetcher
from .factory import FetcherFactory

__all__ = ['AzureSpeechFetcher', 'BaseFetcher', 'EdgeSpeechFetcher', 'FetcherFactory', 'build_ssml']
