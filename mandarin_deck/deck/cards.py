"""Word and sentence card pipelines."""

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple, Union

from loguru import logger

from ..config import Config
from ..fetchers import BaseFetcher
from ..models import MandarinSentence, SentenceCard, SimilarWord, Token, WordCard
from ..services import AIService, AzureTranslator
from ..text import PhoneticReconciler, has_balanced_emphasis, render, render_plain
from ..utils import next_timestamp


class CardFactory:
    """
    Builds one card per input row.

    Args:
        config: Application configuration
        reconciler: Reading builder
        translator: Translation service
        speech: Speech fetcher
        ai_service: Related-words service
        media_dir: Directory receiving audio files
    """

    def __init__(
        self,
        config: Config,
        reconciler: PhoneticReconciler,
        translator: AzureTranslator,
        speech: BaseFetcher,
        ai_service: AIService,
        media_dir: Union[str, Path],
    ) -> None:
        self.config = config
        self.reconciler = reconciler
        self.translator = translator
        self.speech = speech
        self.ai_service = ai_service
        self.media_dir = Path(media_dir)

    async def _definition(self, text: str, override: Optional[str], fallback: str = "") -> str:
        if override:
            return override
        if fallback:
            return fallback
        return await self.translator.translate(text)

    async def _similar_words(self, word: str) -> Tuple[SimilarWord, ...]:
        words = await self.ai_service.similar_words(word, self.config.mandarin.script)
        if not words:
            logger.warning(f"No related words found for {word}")
        return tuple(replace(similar, reading=self.reconciler.word_reading(similar.word)) for similar in words)

    async def build_word_card(self, token: Token, definition: Optional[str] = None) -> Optional[WordCard]:
        """
        Card for a single recognised word, or None when the word is unknown.

        Raises:
            MissingReadingError: If a known word has no reading
        """
        if not token.has_entries:
            logger.warning(f"Word {token.text!r} is not in the dictionary; skipping")
            return None

        reading = await self.reconciler.reconcile(token)
        definition, audio, similar_words = await asyncio.gather(
            self._definition(token.text, definition, token.build_definition()),
            self.speech.fetch(token.text, self.media_dir),
            self._similar_words(token.text),
        )
        logger.debug(f"Built word card for {token.text}: {reading} / {definition}")
        return WordCard(
            timestamp=next_timestamp(),
            hanzi=token.text,
            definition=definition,
            audio=audio,
            reading=reading,
            similar_words=similar_words,
        )

    async def build_sentence_card(
        self,
        sentence: MandarinSentence,
        definition: Optional[str] = None,
    ) -> Optional[SentenceCard]:
        """Card for a sentence, or None when no token is a known word."""
        if not sentence.has_mandarin:
            logger.warning(f"Sentence {sentence.raw_text!r} has no recognisable Mandarin; skipping")
            return None
        if not has_balanced_emphasis(sentence.raw_text):
            logger.warning(f"Sentence {sentence.raw_text!r} has an unclosed emphasis marker")

        plain = render_plain(sentence.tokens)
        hanzi = render(sentence.tokens)
        logger.debug(f"Built plain sentence: {plain}")
        logger.debug(f"Built sentence for note: {hanzi}")

        meaning, reading, audio = await asyncio.gather(
            self._definition(plain, definition),
            self.reconciler.reconcile(sentence),
            self.speech.fetch(plain, self.media_dir),
        )
        logger.debug(f"Built reading for note: {reading}")
        return SentenceCard(
            timestamp=next_timestamp(),
            hanzi=hanzi,
            meaning=meaning,
            audio=audio,
            reading=reading,
        )
