"""Audio fetchers - speech synthesis via Azure Speech REST or Edge TTS."""

from typing import Dict, List, Optional
from xml.sax.saxutils import escape, quoteattr

import aiohttp
import edge_tts
from edge_tts.exceptions import EdgeTTSException
from loguru import logger

from ..config import AzureConfig, RuntimeConfig
from ..exceptions import ServiceError
from ..services.base import ServiceClient
from ..utils.retry import retry_policy
from .base import BaseFetcher

OUTPUT_FORMAT = "audio-48khz-192kbitrate-mono-mp3"


def build_ssml(text: str, voice: str, locale: str) -> str:
    """Single-voice SSML document for ``text``."""
    return (
        f"<speak version='1.0' xml:lang={quoteattr(locale)}>"
        f"<voice xml:lang={quoteattr(locale)} name={quoteattr(voice)}>{escape(text)}</voice>"
        f"</speak>"
    )


class AzureSpeechFetcher(ServiceClient, BaseFetcher):
    """Azure Cognitive Services text-to-speech over REST."""

    SERVICE_NAME = "Azure Speech"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        azure: AzureConfig,
        runtime: Optional[RuntimeConfig] = None,
    ) -> None:
        super().__init__(session, runtime)
        self.azure = azure
        self.voice = azure.speech.voice_name
        self.locale = azure.speech.locale

    @property
    def base_url(self) -> str:
        return f"https://{self.azure.region}.tts.speech.microsoft.com/cognitiveservices"

    async def synthesize(self, text: str) -> bytes:
        headers = {
            "Ocp-Apim-Subscription-Key": self.azure.speech.key,
            "X-Microsoft-OutputFormat": OUTPUT_FORMAT,
            "Content-Type": "application/ssml+xml",
            "User-Agent": "mandarin-deck",
        }
        ssml = build_ssml(text, self.voice, self.locale)
        return await self._request_bytes("POST", f"{self.base_url}/v1", headers=headers, data=ssml.encode("utf-8"))

    async def list_voices(self, locale: Optional[str] = None) -> List[Dict[str, str]]:
        """Voices offered in the configured region, optionally filtered by locale."""
        headers = {"Ocp-Apim-Subscription-Key": self.azure.speech.key}
        voices = await self._request_json("GET", f"{self.base_url}/voices/list", headers=headers)
        if locale:
            voices = [voice for voice in voices if voice.get("Locale", "").lower() == locale.lower()]
        return voices


class EdgeSpeechFetcher(BaseFetcher):
    """Keyless speech synthesis through the Edge read-aloud service."""

    def __init__(self, voice: str, runtime: Optional[RuntimeConfig] = None) -> None:
        self.voice = voice
        self.runtime = runtime or RuntimeConfig()

    async def _stream(self, text: str) -> bytes:
        chunks = []
        try:
            communicate = edge_tts.Communicate(text, self.voice)
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    chunks.append(chunk["data"])
        except EdgeTTSException as e:
            raise ServiceError("Edge TTS", 0, str(e)) from e
        if not chunks:
            raise ServiceError("Edge TTS", 0, f"no audio received for {text!r}")
        return b"".join(chunks)

    async def synthesize(self, text: str) -> bytes:
        async for attempt in retry_policy(self.runtime.retries, self.runtime.max_delay):
            with attempt:
                audio = await self._stream(text)
        logger.trace(f"Edge TTS answered with {len(audio)} bytes")
        return audio
