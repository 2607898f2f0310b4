"""Base fetcher class."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from loguru import logger

from ..models import AudioFile
from ..utils.paths import MediaPathGenerator


class BaseFetcher(ABC):
    """
    Abstract base class for speech fetchers.

    Subclasses implement ``synthesize``; ``fetch`` claims a media file name
    and writes the audio into it.
    """

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """
        Synthesize speech.

        Args:
            text: Text to speak

        Returns:
            MP3 bytes
        """

    async def fetch(self, text: str, media_dir: Union[str, Path]) -> AudioFile:
        """Synthesize ``text`` into a fresh file in ``media_dir``."""
        audio = await self.synthesize(text)
        path = MediaPathGenerator.reserve_audio_path(media_dir, text)
        path.write_bytes(audio)
        logger.debug(f"Wrote {len(audio)} bytes of audio for {text!r} to {path.name}")
        return AudioFile(path)

    async def close(self) -> None:
        """Close any open resources."""

    async def __aenter__(self) -> "BaseFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
