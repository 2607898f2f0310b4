import gzip
import re

import aiohttp
import pytest
from aioresponses import aioresponses

from mandarin_deck.config import MandarinScript
from mandarin_deck.dictionary import CedictDictionary, download_cedict
from mandarin_deck.exceptions import ServiceError
from mandarin_deck.fetchers import AzureSpeechFetcher, FetcherFactory, EdgeSpeechFetcher, build_ssml
from mandarin_deck.services import AzureTranslator, create_ai_service, parse_similar_words
from tests.conftest import make_config

TRANSLATE_URL = re.compile(r"^https://api\.cognitive\.microsofttranslator\.com/translate\?.*$")
TRANSLITERATE_URL = re.compile(r"^https://api\.cognitive\.microsofttranslator\.com/transliterate\?.*$")
LANGUAGES_URL = re.compile(r"^https://api\.cognitive\.microsofttranslator\.com/languages\?.*$")
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


@pytest.fixture
async def session():
    async with aiohttp.ClientSession() as session:
        yield session


def _sent_kwargs(mocked, method, url_pattern):
    for (sent_method, url), calls in mocked.requests.items():
        if sent_method == method and url_pattern.match(str(url)):
            return calls[0].kwargs
    raise AssertionError(f"no {method} request matched {url_pattern.pattern}")


async def test_translate(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)

    with aioresponses() as mocked:
        mocked.post(TRANSLATE_URL, payload=[{"translations": [{"text": "Hello", "to": "en"}]}])
        result = await translator.translate("你好")

        kwargs = _sent_kwargs(mocked, "POST", TRANSLATE_URL)

    assert result == "Hello"
    assert kwargs["json"] == [{"text": "你好"}]
    assert kwargs["headers"]["Ocp-Apim-Subscription-Key"] == "translator-key"
    assert kwargs["headers"]["Ocp-Apim-Subscription-Region"] == "eastasia"
    assert kwargs["params"]["to"] == "en"


async def test_transliterate(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)

    with aioresponses() as mocked:
        mocked.post(TRANSLITERATE_URL, payload=[{"text": "nǐ hǎo", "script": "Latn"}])
        result = await translator.transliterate("你好", from_script="Hant", language="zh-Hant")

        params = _sent_kwargs(mocked, "POST", TRANSLITERATE_URL)["params"]

    assert result == "nǐ hǎo"
    assert params["fromScript"] == "Hant"
    assert params["toScript"] == "Latn"
    assert params["language"] == "zh-Hant"


async def test_non_success_status_is_retried(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)

    with aioresponses() as mocked:
        mocked.post(TRANSLATE_URL, status=429, body="slow down")
        mocked.post(TRANSLATE_URL, payload=[{"translations": [{"text": "Hello"}]}])

        assert await translator.translate("你好") == "Hello"


async def test_retries_are_bounded(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)

    with aioresponses() as mocked:
        mocked.post(TRANSLATE_URL, status=500, body="boom", repeat=True)

        with pytest.raises(ServiceError) as excinfo:
            await translator.translate("你好")

    assert excinfo.value.status == 500
    assert excinfo.value.service == "Azure Translator"


async def test_unexpected_payload_shape(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)

    with aioresponses() as mocked:
        mocked.post(TRANSLATE_URL, payload={"error": "nope"})

        with pytest.raises(ServiceError):
            await translator.translate("你好")


async def test_transliteration_scripts(config, session):
    translator = AzureTranslator(session, config.azure, config.runtime)
    payload = {"transliteration": {"zh-Hant": {"name": "Chinese Traditional", "scripts": [
        {"code": "Hant", "name": "Traditional", "toScripts": [{"code": "Latn"}, {"code": "Hans"}]},
    ]}}}

    with aioresponses() as mocked:
        mocked.get(LANGUAGES_URL, payload=payload)
        scripts = await translator.transliteration_scripts("zh-Hant")

    assert scripts == [{"code": "Hant", "name": "Traditional", "to": "Latn, Hans"}]


async def test_azure_speech_writes_audio(config, session, tmp_path):
    fetcher = AzureSpeechFetcher(session, config.azure, config.runtime)
    url = "https://eastasia.tts.speech.microsoft.com/cognitiveservices/v1"

    with aioresponses() as mocked:
        mocked.post(url, body=b"ID3audio")
        audio = await fetcher.fetch("你好", tmp_path)

        kwargs = _sent_kwargs(mocked, "POST", re.compile(re.escape(url)))

    assert audio.path.read_bytes() == b"ID3audio"
    assert audio.note_field() == f"[sound:{audio.path.name}]"
    assert kwargs["headers"]["X-Microsoft-OutputFormat"] == "audio-48khz-192kbitrate-mono-mp3"
    assert "zh-TW-YunJheNeural" in kwargs["data"].decode("utf-8")


async def test_list_voices_filters_by_locale(config, session):
    fetcher = AzureSpeechFetcher(session, config.azure, config.runtime)
    url = "https://eastasia.tts.speech.microsoft.com/cognitiveservices/voices/list"
    voices = [
        {"ShortName": "zh-TW-HsiaoChenNeural", "Locale": "zh-TW"},
        {"ShortName": "en-US-JennyNeural", "Locale": "en-US"},
    ]

    with aioresponses() as mocked:
        mocked.get(url, payload=voices)
        result = await fetcher.list_voices("zh-tw")

    assert [voice["ShortName"] for voice in result] == ["zh-TW-HsiaoChenNeural"]


def test_ssml_escapes_text():
    ssml = build_ssml("<你&好>", "zh-TW-YunJheNeural", "zh-TW")

    assert "&lt;你&amp;好&gt;" in ssml
    assert "name=\"zh-TW-YunJheNeural\"" in ssml


async def test_factory_picks_configured_provider(session):
    azure = FetcherFactory.create(make_config(), session)
    edge = FetcherFactory.create(make_config(GENANKI_AZURE__SPEECH__PROVIDER="edge"), session)

    assert isinstance(azure, AzureSpeechFetcher)
    assert isinstance(edge, EdgeSpeechFetcher)
    assert edge.voice == "zh-TW-YunJheNeural"


async def test_openai_similar_words(session):
    config = make_config(GENANKI_AI__ORGANISATION="org-123")
    service = create_ai_service(session, config.ai, config.runtime)
    content = "Word,Translation\n你,you\n您好,\"hello, polite\"\nSure! Here you go."

    with aioresponses() as mocked:
        mocked.post(OPENAI_URL, payload={"choices": [{"message": {"content": content}}]})
        words = await service.similar_words("你好", MandarinScript.TRADITIONAL)

        kwargs = _sent_kwargs(mocked, "POST", re.compile(re.escape(OPENAI_URL)))

    assert [(word.word, word.translation) for word in words] == [("你", "you"), ("您好", "hello, polite")]
    assert kwargs["headers"]["OpenAI-Organization"] == "org-123"
    assert kwargs["headers"]["Authorization"] == "Bearer ai-key"
    prompt = kwargs["json"]["messages"][1]["content"]
    assert "你好" in prompt
    assert "Traditional Chinese" in prompt


def test_parse_similar_words_drops_non_mandarin_rows():
    words = parse_similar_words("1. 你\nhello,world\n學生 , student \n時尚")

    assert [(word.word, word.translation) for word in words] == [("學生", "student")]


async def test_download_cedict(session, tmp_path):
    url = "https://example.test/cedict.txt.gz"
    text = "你好 你好 [ni3 hao3] /hello/hi/\n"

    with aioresponses() as mocked:
        mocked.get(url, body=gzip.compress(text.encode("utf-8")))
        path = await download_cedict(tmp_path / "cedict_ts.u8", session, url=url)

    assert CedictDictionary.load(path).lookup("你好")[0].english == ("hello", "hi")


async def test_download_cedict_error_status(session, tmp_path):
    url = "https://example.test/cedict.txt.gz"

    with aioresponses() as mocked:
        mocked.get(url, status=503, body="maintenance")

        with pytest.raises(ServiceError):
            await download_cedict(tmp_path / "cedict_ts.u8", session, url=url)
