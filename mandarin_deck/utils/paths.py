"""
Media path generation - single source of truth for audio file naming.

Names are derived from the spoken text plus a short random salt, and each
path is claimed with an exclusive create so concurrent rows never share a file.
"""

import random
import string
import urllib.parse
from pathlib import Path
from typing import Optional, Union

from ..exceptions import MandarinDeckError


class MediaPathGenerator:
    """Generates collision-free audio file paths inside one media directory."""

    AUDIO_EXT = ".mp3"
    PREFIX_LENGTH = 10
    SALT_LENGTH = 5
    MAX_ATTEMPTS = 20

    SALT_ALPHABET = string.ascii_letters + string.digits

    @classmethod
    def random_salt(cls) -> str:
        return "".join(random.choices(cls.SALT_ALPHABET, k=cls.SALT_LENGTH))

    @classmethod
    def audio_name(cls, text: str, salt: Optional[str] = None) -> str:
        """
        Build an audio file name.

        The URL-encoded text is cut to ``PREFIX_LENGTH`` characters and padded
        with ``-`` when shorter, then the salt and extension are appended.

        Args:
            text: Text the audio speaks
            salt: Fixed salt (random when omitted)

        Returns:
            File name like "%E4%BD%A0%AbC12.mp3"
        """
        encoded = urllib.parse.quote(text, safe="")
        prefix = f"{encoded[:cls.PREFIX_LENGTH]:-<{cls.PREFIX_LENGTH}}"
        return f"{prefix}{salt or cls.random_salt()}{cls.AUDIO_EXT}"

    @classmethod
    def reserve_audio_path(cls, media_dir: Union[str, Path], text: str) -> Path:
        """
        Claim a fresh audio path in ``media_dir``.

        The file is created empty so no other task can take the same name.

        Raises:
            MandarinDeckError: If no free name was found
        """
        media_dir = Path(media_dir)
        media_dir.mkdir(parents=True, exist_ok=True)
        for _ in range(cls.MAX_ATTEMPTS):
            path = media_dir / cls.audio_name(text)
            try:
                with open(path, "xb"):
                    pass
            except FileExistsError:
                continue
            return path
        raise MandarinDeckError(f"Could not find a free audio file name for {text!r}")
