"""Remote collaborators and input loading."""

from .ai_service import (
    AIService,
    AnthropicProvider,
    BaseAIProvider,
    OllamaProvider,
    OpenAIProvider,
    create_ai_service,
    parse_similar_words,
)
from .base import ServiceClient
from .translator import AzureTranslator
from .vocabulary_service import VocabularyRow, VocabularyService

__all__ = [
    'AIService',
    'AnthropicProvider',
    'AzureTranslator',
    'BaseAIProvider',
    'OllamaProvider',
    'OpenAIProvider',
    'ServiceClient',
    'VocabularyRow',
    'VocabularyService',
    'create_ai_service',
    'parse_similar_words',
]
