"""Main Mandarin deck builder."""

import asyncio
import tempfile
import time
from collections import Counter
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple, Union

import aiohttp
import genanki
from loguru import logger

from ..config import Config
from ..dictionary import CedictDictionary
from ..exceptions import PackageWriteError
from ..fetchers import FetcherFactory
from ..models import MandarinSentence, SentenceCard, Token, WordCard
from ..services import AzureTranslator, VocabularyRow, VocabularyService, create_ai_service
from ..templates import CardTemplates
from ..text import ManualCorrector, PhoneticReconciler, tokenize
from ..text.phonetics import CorrectionCallback, prompt_for_correction
from ..utils import ensure_dir, get_file_size_mb
from .cards import CardFactory

Card = Union[WordCard, SentenceCard]

WORD = "word"
SENTENCE = "sentence"


class ThreadSafeStats:
    """Statistics counter shared by all row tasks."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._start_time = time.time()
        self._failed_rows: List[str] = []

    def increment(self, key: str, value: int = 1) -> None:
        with self._lock:
            self._counters[key] += value

    def get(self, key: str, default: Any = 0) -> Any:
        with self._lock:
            return self._counters.get(key, default)

    def add_failed_row(self, text: str) -> None:
        with self._lock:
            self._failed_rows.append(text)

    def get_all(self) -> Dict[str, Any]:
        with self._lock:
            return {
                **dict(self._counters),
                'start_time': self._start_time,
                'failed_rows': self._failed_rows.copy(),
            }


class MandarinDeckBuilder:
    """
    Turns a vocabulary CSV into one Anki package.

    Every row becomes one task; tasks run concurrently up to
    ``runtime.concurrency`` and a failing row never stops the others. The
    deck itself is only touched after all tasks have finished.

    Usage:
        builder = MandarinDeckBuilder(config, dictionary)
        try:
            await builder.build("input.csv")
            builder.export("output.apkg")
        finally:
            builder.cleanup()
    """

    def __init__(
        self,
        config: Config,
        dictionary: CedictDictionary,
        correction_callback: CorrectionCallback = prompt_for_correction,
    ) -> None:
        self.config = config
        self.dictionary = dictionary
        self.corrector = ManualCorrector(correction_callback)
        self.stats = ThreadSafeStats()

        self.deck = genanki.Deck(
            config.model.deck_id,
            config.model.deck_name,
            description=config.model.deck_description,
        )
        self.word_model, self.sentence_model = self._create_models()

        self._tempdir = tempfile.TemporaryDirectory(prefix="mandarin-deck-")
        self.media_dir = Path(self._tempdir.name)
        self.media_files: List[str] = []
        self.semaphore = asyncio.Semaphore(config.runtime.concurrency)

    def _create_models(self) -> Tuple[genanki.Model, genanki.Model]:
        return (
            CardTemplates.word_model(self.config.model),
            CardTemplates.sentence_model(self.config.model),
        )

    def create_factory(self, session: aiohttp.ClientSession) -> CardFactory:
        """Wire the card pipelines to live services sharing ``session``."""
        translator = AzureTranslator(session, self.config.azure, self.config.runtime)
        reconciler = PhoneticReconciler(self.config, self.dictionary, translator, self.corrector)
        return CardFactory(
            config=self.config,
            reconciler=reconciler,
            translator=translator,
            speech=FetcherFactory.create(self.config, session),
            ai_service=create_ai_service(session, self.config.ai, self.config.runtime),
            media_dir=self.media_dir,
        )

    def classify_row(self, text: str) -> Tuple[Optional[str], List[Token]]:
        """
        Tokenize ``text`` and decide which card it becomes.

        Returns:
            ``(WORD | SENTENCE | None, tokens)``
        """
        tokens = tokenize(text, self.dictionary)
        if len(tokens) == 1:
            return WORD, tokens
        if len(tokens) >= 2:
            return SENTENCE, tokens
        return None, tokens

    async def process_row(self, row: VocabularyRow, factory: CardFactory) -> Optional[Card]:
        """Build the card for one row; failures are logged and give None."""
        async with self.semaphore:
            try:
                kind, tokens = self.classify_row(row.hanzi)
                if kind == WORD:
                    logger.info(f"Found Word: {row.hanzi}")
                    card = await factory.build_word_card(tokens[0], row.definition)
                elif kind == SENTENCE:
                    logger.info(f"Found Sentence: {row.hanzi}")
                    sentence = MandarinSentence(raw_text=row.hanzi, tokens=tuple(tokens))
                    card = await factory.build_sentence_card(sentence, row.definition)
                else:
                    card = None

                if card is None:
                    self.stats.increment('rows_skipped')
                else:
                    self.stats.increment(f'{kind}_cards')
                return card

            except Exception:
                self.stats.increment('rows_failed')
                self.stats.add_failed_row(row.hanzi[:50])
                logger.exception(f"Row {row.index + 1} ({row.hanzi}) failed")
                return None

    async def build(self, csv_file: str, factory: Optional[CardFactory] = None) -> int:
        """
        Build cards for every row of ``csv_file`` and add them to the deck.

        Args:
            csv_file: Path to the vocabulary CSV
            factory: Card pipelines to use (live services when omitted)

        Returns:
            Number of notes added

        Raises:
            MandarinDeckError: If the CSV is missing or unreadable
        """
        rows = VocabularyService.load_from_csv(csv_file).rows()
        logger.info(f"Loaded {len(rows)} rows from {csv_file}")
        self.stats.increment('rows_total', len(rows))

        if factory is None:
            async with aiohttp.ClientSession() as session:
                factory = self.create_factory(session)
                try:
                    results = await self._run(rows, factory)
                finally:
                    await factory.speech.close()
        else:
            results = await self._run(rows, factory)

        added = 0
        for card in results:
            if card is None:
                continue
            model = self.word_model if isinstance(card, WordCard) else self.sentence_model
            self.deck.add_note(card.to_note(model))
            self.media_files.append(str(card.audio.path))
            added += 1
        logger.info(f"Added {added} notes to {self.config.model.deck_name}")
        return added

    async def _run(self, rows: List[VocabularyRow], factory: CardFactory) -> List[Optional[Card]]:
        tasks = [self.process_row(row, factory) for row in rows]
        results = await asyncio.gather(*tasks, return_exceptions=True)
        cards: List[Optional[Card]] = []
        for row, result in zip(rows, results):
            if isinstance(result, BaseException):
                logger.error(f"Row {row.index + 1} ({row.hanzi}) was aborted: {result!r}")
                self.stats.increment('rows_failed')
                cards.append(None)
            else:
                cards.append(result)
        return cards

    def export(self, output_file: str) -> None:
        """
        Write the deck and its audio to an ``.apkg`` file.

        Raises:
            PackageWriteError: If the package cannot be written
        """
        package = genanki.Package(self.deck)
        package.media_files = [path for path in self.media_files if Path(path).exists()]
        try:
            ensure_dir(Path(output_file).resolve().parent)
            package.write_to_file(output_file)
        except OSError as e:
            raise PackageWriteError(f"Could not write {output_file}: {e}") from e
        self._print_statistics(output_file)

    def _print_statistics(self, filename: str) -> None:
        stats = self.stats.get_all()
        elapsed = time.time() - stats.get('start_time', time.time())
        minutes, seconds = divmod(int(elapsed), 60)
        failed_rows = stats.get('failed_rows', [])

        logger.info("=" * 60)
        logger.info("BUILD STATISTICS")
        logger.info("=" * 60)
        logger.info(f"Rows read:       {stats.get('rows_total', 0)}")
        logger.info(f"Word cards:      {stats.get(f'{WORD}_cards', 0)}")
        logger.info(f"Sentence cards:  {stats.get(f'{SENTENCE}_cards', 0)}")
        logger.info(f"Rows skipped:    {stats.get('rows_skipped', 0)}")
        logger.info(f"Execution time:  {minutes}m {seconds}s")
        logger.info(f"Output file:     {get_file_size_mb(filename):.1f} MB -> {filename}")
        if failed_rows:
            logger.warning(f"Rows failed:     {len(failed_rows)}")
            logger.warning(f"Failed rows:     {', '.join(failed_rows[:10])}{'...' if len(failed_rows) > 10 else ''}")
        logger.info("=" * 60)

    def cleanup(self) -> None:
        """Remove the temporary media directory."""
        self._tempdir.cleanup()
