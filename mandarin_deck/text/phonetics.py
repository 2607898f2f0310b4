"""
Pinyin and zhuyin readings.

Word cards take their reading from the CC-CEDICT entries of the single
token. Sentence cards take tone-marked pinyin from the transliteration
service and, for zhuyin output, run it through ``PinyinStreamParser``.

When the parser cannot split the service's pinyin into syllables, the
candidate is shown to the operator through an injected correction callback.
The corrected text is converted once more; a second failure propagates.
"""

import asyncio
import unicodedata
from typing import Callable, Dict, List, Optional, Sequence, Union

from dragonmapper import transcriptions
from loguru import logger
from rich.console import Console

from ..config import Config, MandarinReading
from ..dictionary import CedictDictionary, CedictEntry
from ..exceptions import MissingReadingError, PinyinParseError
from ..models import MandarinSentence, Token
from .emphasis import count_delimiters, render_reading, strip_delimiters

CorrectionCallback = Callable[[str], str]

# Combining acute, grave, caron and macron. The diaeresis of ü is not a tone.
TONE_MARKS = frozenset("\u0301\u0300\u030c\u0304")
MAX_SYLLABLE_LENGTH = 6
APOSTROPHES = "'’"

_console = Console(stderr=True)


def _tone_mark_count(syllable: str) -> int:
    return sum(1 for char in unicodedata.normalize("NFD", syllable) if char in TONE_MARKS)


def _normalize_numbered(syllable: str) -> str:
    """CC-CEDICT writes ü as ``u:``."""
    return syllable.replace("u:", "ü").replace("U:", "Ü")


def _is_pinyin_letter(char: str) -> bool:
    base = unicodedata.normalize("NFD", char)[0]
    return ("a" <= base.lower() <= "z") or char in APOSTROPHES


def is_pinyin_syllable(candidate: str) -> bool:
    """True when ``candidate`` is one valid pinyin syllable with at most one tone mark."""
    if not candidate or _tone_mark_count(candidate) > 1:
        return False
    try:
        transcriptions.pinyin_syllable_to_zhuyin(candidate)
    except (ValueError, KeyError, IndexError):
        return False
    return True


class PinyinStreamParser:
    """
    Converts a stream of tone-marked pinyin to zhuyin.

    Letter runs are split into syllables (longest match first, backtracking
    on dead ends) and concatenated. Anything else, including the ``,``
    separators between words, is copied through.
    """

    def __init__(self, max_syllable_length: int = MAX_SYLLABLE_LENGTH) -> None:
        self.max_syllable_length = max_syllable_length

    def split_syllables(self, run: str) -> Optional[List[str]]:
        """Split a letter run into pinyin syllables, or None if impossible."""
        memo: Dict[int, Optional[List[str]]] = {}

        def split_from(start: int) -> Optional[List[str]]:
            if start == len(run):
                return []
            if start in memo:
                return memo[start]
            memo[start] = None
            longest = min(len(run), start + self.max_syllable_length)
            for end in range(longest, start, -1):
                candidate = run[start:end]
                if not is_pinyin_syllable(candidate):
                    continue
                rest = split_from(end)
                if rest is not None:
                    memo[start] = [candidate] + rest
                    break
            return memo[start]

        return split_from(0)

    def _convert_run(self, text: str, start: int, end: int) -> str:
        syllables: List[str] = []
        offset = start
        for part in _split_apostrophes(text[start:end]):
            if part:
                split = self.split_syllables(part)
                if split is None:
                    raise PinyinParseError(text, offset)
                syllables.extend(split)
            offset += len(part) + 1
        return "".join(transcriptions.pinyin_syllable_to_zhuyin(syllable) for syllable in syllables)

    def to_zhuyin(self, pinyin: str) -> str:
        """
        Convert a whole reading.

        Raises:
            PinyinParseError: If a letter run cannot be split into syllables
        """
        text = unicodedata.normalize("NFC", pinyin)
        output: List[str] = []
        position = 0
        while position < len(text):
            if not _is_pinyin_letter(text[position]):
                output.append(text[position])
                position += 1
                continue
            end = position
            while end < len(text) and _is_pinyin_letter(text[end]):
                end += 1
            output.append(self._convert_run(text, position, end))
            position = end
        return "".join(output)


def _split_apostrophes(run: str) -> List[str]:
    for apostrophe in APOSTROPHES[1:]:
        run = run.replace(apostrophe, APOSTROPHES[0])
    return run.split(APOSTROPHES[0])


def normalize_separators(pinyin: str) -> str:
    """Spaces become ``,`` and ``，,`` collapses to ``，``."""
    return pinyin.replace(" ", ",").replace("，,", "，")


def convert_pinyin_to_zhuyin(pinyin: str, parser: Optional[PinyinStreamParser] = None) -> str:
    return (parser or PinyinStreamParser()).to_zhuyin(normalize_separators(pinyin))


def entry_reading(entry: CedictEntry, reading: MandarinReading) -> str:
    """
    Reading of one dictionary entry.

    Zhuyin syllables are joined with ``,``, pinyin syllables with a space.
    Syllables with no equivalent are passed through unchanged.
    """
    converted = []
    for syllable in entry.syllables:
        syllable = _normalize_numbered(syllable)
        try:
            if reading is MandarinReading.ZHUYIN:
                converted.append(transcriptions.pinyin_syllable_to_zhuyin(syllable))
            else:
                converted.append(transcriptions.numbered_syllable_to_accented(syllable))
        except (ValueError, KeyError, IndexError):
            converted.append(syllable)
    separator = "," if reading is MandarinReading.ZHUYIN else " "
    return separator.join(converted)


def join_readings(readings: Sequence[str], reading: MandarinReading) -> str:
    return ("," if reading is MandarinReading.ZHUYIN else ", ").join(readings)


def prompt_for_correction(candidate: str) -> str:
    """Ask the operator on the terminal for a corrected pinyin string."""
    _console.print(f"[bold yellow]Could not parse pinyin:[/bold yellow] {candidate}")
    answer = _console.input("[bold]Corrected pinyin (blank keeps it):[/bold] ")
    return answer.strip() or candidate


class ManualCorrector:
    """
    Serializes calls to a blocking correction callback.

    Only one prompt is on screen at a time; the callback runs in a worker
    thread so the event loop keeps serving other rows.
    """

    def __init__(self, callback: CorrectionCallback = prompt_for_correction) -> None:
        self.callback = callback
        self._lock = asyncio.Lock()

    async def correct(self, candidate: str) -> str:
        async with self._lock:
            logger.warning(f"Asking for a manual pinyin correction of {candidate!r}")
            corrected = await asyncio.to_thread(self.callback, candidate)
        logger.info(f"Pinyin corrected to {corrected!r}")
        return corrected


class PhoneticReconciler:
    """
    Builds readings in the configured notation.

    Args:
        config: Application configuration
        dictionary: Entry index for related-word lookups
        transliterator: Object with ``async transliterate(text, from_script, language)``
        corrector: Manual correction gate for unparseable pinyin
    """

    def __init__(
        self,
        config: Config,
        dictionary: CedictDictionary,
        transliterator=None,
        corrector: Optional[ManualCorrector] = None,
    ) -> None:
        self.config = config
        self.reading = config.mandarin.reading
        self.dictionary = dictionary
        self.transliterator = transliterator
        self.corrector = corrector or ManualCorrector()
        self.parser = PinyinStreamParser()

    def token_reading(self, token: Token) -> Optional[str]:
        """Reading of every entry of ``token``, or None when it has none."""
        if not token.entries:
            return None
        return join_readings([entry_reading(entry, self.reading) for entry in token.entries], self.reading)

    def word_reading(self, word: str) -> str:
        """
        Reading of a related word.

        A first match covering the whole word wins; otherwise the readings of
        all matches are joined. Unknown words give an empty reading.
        """
        matches = self.dictionary.query(word)
        if not matches:
            return ""
        first = matches[0]
        if len(first.traditional) == len(word):
            return entry_reading(first, self.reading)
        separator = "," if self.reading is MandarinReading.ZHUYIN else " "
        return separator.join(entry_reading(entry, self.reading) for entry in matches)

    async def pinyin_to_zhuyin(self, pinyin: str) -> str:
        """Convert service pinyin, asking the operator once on failure."""
        try:
            return convert_pinyin_to_zhuyin(pinyin, self.parser)
        except PinyinParseError as e:
            logger.warning(str(e))
            corrected = await self.corrector.correct(pinyin)
            return convert_pinyin_to_zhuyin(corrected, self.parser)

    async def sentence_reading(self, sentence: MandarinSentence) -> str:
        """
        Reading of the raw sentence, delimiters included, with span markup.

        When the service drops or adds ``*`` characters, the reading is
        returned without markup.
        """
        if self.transliterator is None:
            raise MissingReadingError("No transliteration service configured for sentence readings")
        script = self.config.mandarin.script
        pinyin = await self.transliterator.transliterate(
            sentence.raw_text, from_script=script.from_script, language=script.language
        )
        logger.debug(f"Pinyin reading from transliteration: {pinyin}")

        reading = pinyin
        if self.reading is MandarinReading.ZHUYIN:
            reading = await self.pinyin_to_zhuyin(pinyin)
            logger.debug(f"Zhuyin reading from pinyin: {reading}")

        if count_delimiters(reading) != count_delimiters(sentence.raw_text):
            logger.warning(
                f"Transliteration of {sentence.raw_text!r} changed the emphasis markers; showing the reading unmarked"
            )
            return strip_delimiters(reading)
        return render_reading(reading)

    async def reconcile(self, item: Union[Token, MandarinSentence]) -> str:
        """
        Reading for a token or a sentence.

        Raises:
            MissingReadingError: If a token has no dictionary reading
        """
        if isinstance(item, MandarinSentence):
            return await self.sentence_reading(item)
        reading = self.token_reading(item)
        if reading is None:
            raise MissingReadingError(f"No reading for token {item.text!r}")
        return reading
