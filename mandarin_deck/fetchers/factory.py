"""
Fetcher Factory - picks the speech back end from configuration.

Usage:
    @FetcherFactory.register(SpeechProvider.AZURE)
    def _azure(session, config):
        ...

    fetcher = FetcherFactory.create(config, session)
"""

from typing import Callable, Dict, List

import aiohttp

from ..config import Config, SpeechProvider
from ..exceptions import ConfigError
from .audio import AzureSpeechFetcher, EdgeSpeechFetcher
from .base import BaseFetcher

FetcherBuilder = Callable[[aiohttp.ClientSession, Config], BaseFetcher]


class FetcherFactory:
    """Registry of speech fetcher builders keyed by provider."""

    _registry: Dict[SpeechProvider, FetcherBuilder] = {}

    @classmethod
    def register(cls, provider: SpeechProvider):
        """Decorator registering a builder for ``provider``."""
        def decorator(builder: FetcherBuilder) -> FetcherBuilder:
            cls._registry[provider] = builder
            return builder
        return decorator

    @classmethod
    def create(cls, config: Config, session: aiohttp.ClientSession) -> BaseFetcher:
        """
        Create the fetcher for ``config.azure.speech.provider``.

        Raises:
            ConfigError: If no builder is registered for the provider
        """
        provider = config.azure.speech.provider
        builder = cls._registry.get(provider)
        if builder is None:
            raise ConfigError(
                f"Unknown speech provider: {provider.value}. Available: {cls.get_available_providers()}"
            )
        return builder(session, config)

    @classmethod
    def get_available_providers(cls) -> List[str]:
        return [provider.value for provider in cls._registry]


@FetcherFactory.register(SpeechProvider.AZURE)
def _azure_fetcher(session: aiohttp.ClientSession, config: Config) -> BaseFetcher:
    return AzureSpeechFetcher(session, config.azure, config.runtime)


@FetcherFactory.register(SpeechProvider.EDGE)
def _edge_fetcher(session: aiohttp.ClientSession, config: Config) -> BaseFetcher:
    return EdgeSpeechFetcher(config.azure.speech.voice_name, config.runtime)
