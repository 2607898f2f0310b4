"""
AI Service - LLM integration for related-word suggestions.

Provides one abstraction over several LLM providers (OpenAI-compatible chat
completions, Anthropic messages, local Ollama). Every provider returns the
raw completion text; ``AIService`` turns it into ``SimilarWord`` rows.
"""

import csv
import io
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import aiohttp
from loguru import logger

from ..config import AIConfig, AIProvider, MandarinScript, RuntimeConfig
from ..dictionary import Script, classify_script
from ..models import SimilarWord
from ..utils.parsing import TextParser
from .base import ServiceClient


class BaseAIProvider(ServiceClient, ABC):
    """Abstract base class for AI providers."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: AIConfig,
        runtime: Optional[RuntimeConfig] = None,
    ) -> None:
        super().__init__(session, runtime)
        self.config = config

    @abstractmethod
    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Generate completion for the given prompt."""


class OpenAIProvider(BaseAIProvider):
    """OpenAI API provider (also works with compatible APIs)."""

    SERVICE_NAME = "OpenAI"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        base_url = self.config.base_url or self.DEFAULT_BASE_URL

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        if self.config.organisation:
            headers["OpenAI-Organization"] = self.config.organisation

        payload = {
            "model": self.config.model,
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        data = await self._request_json("POST", f"{base_url}/chat/completions", headers=headers, json=payload)
        return self._dig(data, "choices", 0, "message", "content")


class AnthropicProvider(BaseAIProvider):
    """Anthropic Claude API provider."""

    SERVICE_NAME = "Anthropic"
    DEFAULT_BASE_URL = "https://api.anthropic.com/v1"

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        base_url = self.config.base_url or self.DEFAULT_BASE_URL

        headers = {
            "x-api-key": self.config.api_key or "",
            "anthropic-version": "2023-06-01",
            "Content-Type": "application/json",
        }

        payload = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt

        data = await self._request_json("POST", f"{base_url}/messages", headers=headers, json=payload)
        return self._dig(data, "content", 0, "text")


class OllamaProvider(BaseAIProvider):
    """Ollama local model provider."""

    SERVICE_NAME = "Ollama"
    DEFAULT_BASE_URL = "http://localhost:11434"

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        base_url = self.config.base_url or self.DEFAULT_BASE_URL

        full_prompt = f"{system_prompt}\n\n{prompt}" if system_prompt else prompt

        payload = {
            "model": self.config.model,
            "prompt": full_prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
            },
        }

        data = await self._request_json("POST", f"{base_url}/api/generate", json=payload)
        return data.get("response", "") if isinstance(data, dict) else ""


PROVIDER_CLASSES: Dict[AIProvider, Type[BaseAIProvider]] = {
    AIProvider.OPENAI: OpenAIProvider,
    AIProvider.ANTHROPIC: AnthropicProvider,
    AIProvider.OLLAMA: OllamaProvider,
}


def parse_similar_words(message: str) -> List[SimilarWord]:
    """
    Parse a two-column CSV completion.

    Rows with fewer than two columns, or whose first column is not Mandarin
    (headers, commentary), are dropped.
    """
    similar_words = []
    for row in csv.reader(io.StringIO(message)):
        if len(row) < 2:
            continue
        word = TextParser.clean_field(row[0])
        if classify_script(word) is not Script.MANDARIN:
            continue
        translation = TextParser.collapse_whitespace(TextParser.clean_field(row[1]))
        similar_words.append(SimilarWord(word=word, translation=translation))
    return similar_words


class AIService:
    """
    High-level AI service for related-word suggestions.

    Usage:
        service = create_ai_service(session, config.ai, config.runtime)
        words = await service.similar_words("你好", MandarinScript.TRADITIONAL)
    """

    SYSTEM_PROMPT = "You are a Taiwanese Mandarin Study Assistant generating study material"

    PROMPT_TEMPLATE = (
        "Generate 5 words closely related to {word} which are used commonly in Taiwanese Mandarin. "
        "You should provide the words in {script_name} and the English Translation in CSV format with two columns."
    )

    def __init__(self, provider: BaseAIProvider) -> None:
        self.provider = provider

    async def suggest(self, word: str, script_name: str) -> str:
        """Raw completion listing words related to ``word``."""
        prompt = self.PROMPT_TEMPLATE.format(word=word, script_name=script_name)
        message = await self.provider.complete(prompt, system_prompt=self.SYSTEM_PROMPT)
        logger.trace(f"Related words for {word}: {message!r}")
        return message

    async def similar_words(self, word: str, script: MandarinScript) -> List[SimilarWord]:
        message = await self.suggest(word, script.display_name)
        words = parse_similar_words(message)
        logger.debug(f"Parsed {len(words)} related words for {word}")
        return words


def create_ai_service(
    session: aiohttp.ClientSession,
    config: AIConfig,
    runtime: Optional[RuntimeConfig] = None,
) -> AIService:
    """Build the service for the configured provider."""
    provider_class = PROVIDER_CLASSES.get(config.provider, OpenAIProvider)
    return AIService(provider_class(session, config, runtime))
