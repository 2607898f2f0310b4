from pathlib import Path
from typing import Dict, List, Optional

import pytest

from mandarin_deck.config import Config, load_config
from mandarin_deck.dictionary import CedictDictionary
from mandarin_deck.fetchers import BaseFetcher
from mandarin_deck.models import SimilarWord

FIXTURES = Path(__file__).parent / "fixtures"
CEDICT_SAMPLE = FIXTURES / "cedict_sample.u8"

BASE_ENV = {
    "GENANKI_AZURE__REGION": "eastasia",
    "GENANKI_AZURE__TRANSLATOR__KEY": "translator-key",
    "GENANKI_AZURE__SPEECH__KEY": "speech-key",
    "GENANKI_AI__KEY": "ai-key",
    "GENANKI_RUNTIME__RETRIES": "2",
    "GENANKI_RUNTIME__MAX_DELAY": "0",
    "GENANKI_RUNTIME__TIMEOUT": "5",
}


def make_config(**overrides: str) -> Config:
    return load_config(environ={**BASE_ENV, **overrides})


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture
def pinyin_config() -> Config:
    return make_config(GENANKI_MANDARIN__READING="pinyin")


@pytest.fixture(scope="session")
def dictionary() -> CedictDictionary:
    return CedictDictionary.load(CEDICT_SAMPLE)


class StubTranslator:
    def __init__(self, readings: Optional[Dict[str, str]] = None, fail: bool = False):
        self.readings = readings or {}
        self.fail = fail
        self.translated: List[str] = []

    async def translate(self, text: str, to_language: str = "en") -> str:
        if self.fail:
            raise RuntimeError("translator down")
        self.translated.append(text)
        return f"translated: {text}"

    async def transliterate(self, text, from_script="Hant", to_script="Latn", language="zh-Hant"):
        return self.readings[text]


class StubSpeech(BaseFetcher):
    def __init__(self):
        self.spoken: List[str] = []

    async def synthesize(self, text: str) -> bytes:
        self.spoken.append(text)
        return b"ID3fake-mp3"


class StubAIService:
    def __init__(self, suggestions: Optional[Dict[str, List[SimilarWord]]] = None):
        self.suggestions = suggestions or {}

    async def similar_words(self, word, script):
        return list(self.suggestions.get(word, []))


@pytest.fixture
def translator() -> StubTranslator:
    return StubTranslator({
        "你今天看起來很*時尚*": "nǐ jīntiān kànqǐlái hěn *shíshàng*",
        "你好，學生": "nǐ hǎo， xuéshēng",
    })


@pytest.fixture
def speech() -> StubSpeech:
    return StubSpeech()


@pytest.fixture
def ai_service() -> StubAIService:
    return StubAIService({"你好": [SimilarWord("你", "you"), SimilarWord("魑魅", "demons")]})
