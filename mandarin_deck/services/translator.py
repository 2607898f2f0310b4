"""Azure Translator v3 client: translation and transliteration."""

from typing import Dict, List, Optional

import aiohttp

from ..config import AzureConfig, RuntimeConfig
from .base import ServiceClient

TRANSLATOR_ENDPOINT = "https://api.cognitive.microsofttranslator.com"
API_VERSION = "3.0"


class AzureTranslator(ServiceClient):
    """
    Translates Mandarin to English and transliterates it to pinyin.

    Usage:
        translator = AzureTranslator(session, config.azure, config.runtime)
        meaning = await translator.translate("你好")
        pinyin = await translator.transliterate("你好", from_script="Hant", language="zh-Hant")
    """

    SERVICE_NAME = "Azure Translator"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        azure: AzureConfig,
        runtime: Optional[RuntimeConfig] = None,
        endpoint: str = TRANSLATOR_ENDPOINT,
    ) -> None:
        super().__init__(session, runtime)
        self.azure = azure
        self.endpoint = endpoint.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Ocp-Apim-Subscription-Key": self.azure.translator_key,
            "Ocp-Apim-Subscription-Region": self.azure.region,
            "Content-Type": "application/json; charset=UTF-8",
        }

    async def translate(self, text: str, to_language: str = "en") -> str:
        """Translate ``text`` into ``to_language``."""
        data = await self._request_json(
            "POST",
            f"{self.endpoint}/translate",
            params={"api-version": API_VERSION, "to": to_language},
            headers=self._headers(),
            json=[{"text": text}],
        )
        return self._dig(data, 0, "translations", 0, "text")

    async def transliterate(
        self,
        text: str,
        from_script: str = "Hant",
        to_script: str = "Latn",
        language: str = "zh-Hant",
    ) -> str:
        """
        Transliterate ``text`` between scripts.

        Args:
            text: Input text
            from_script: Source script code (``Hant`` or ``Hans``)
            to_script: Target script code (``Latn`` gives tone-marked pinyin)
            language: Language code of ``text``

        Returns:
            The transliterated text
        """
        data = await self._request_json(
            "POST",
            f"{self.endpoint}/transliterate",
            params={
                "api-version": API_VERSION,
                "language": language,
                "fromScript": from_script,
                "toScript": to_script,
            },
            headers=self._headers(),
            json=[{"text": text}],
        )
        return self._dig(data, 0, "text")

    async def transliteration_scripts(self, language: str) -> List[Dict[str, str]]:
        """
        Scripts Azure can transliterate ``language`` between.

        Returns:
            One dict per source script: ``code``, ``name`` and comma-separated ``to`` codes
        """
        data = await self._request_json(
            "GET",
            f"{self.endpoint}/languages",
            params={"api-version": API_VERSION, "scope": "transliteration"},
            headers={"Accept-Language": "en"},
        )
        entry = self._dig(data, "transliteration").get(language)
        if entry is None:
            return []
        return [
            {
                "code": script.get("code", ""),
                "name": script.get("name", ""),
                "to": ", ".join(target.get("code", "") for target in script.get("toScripts", [])),
            }
            for script in entry.get("scripts", [])
        ]
