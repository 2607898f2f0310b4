"""Fetch the CC-CEDICT export from MDBG."""

import gzip
from pathlib import Path
from typing import Union

import aiohttp
from loguru import logger

from ..exceptions import DictionaryError, ServiceError
from ..utils import ensure_dir

CEDICT_URL = "https://www.mdbg.net/chinese/export/cedict/cedict_1_0_ts_utf-8_mdbg.txt.gz"


async def download_cedict(
    path: Union[str, Path],
    session: aiohttp.ClientSession,
    url: str = CEDICT_URL,
) -> Path:
    """
    Download and unpack CC-CEDICT to ``path``.

    Args:
        path: Destination of the unpacked ``.u8`` text file
        session: Shared HTTP session
        url: Gzipped export to fetch

    Returns:
        The written path

    Raises:
        ServiceError: If MDBG answers with a non-success status
        DictionaryError: If the payload is not valid gzip or cannot be written
    """
    path = Path(path)
    logger.info(f"Downloading CC-CEDICT from {url}")
    async with session.get(url) as response:
        if response.status >= 300:
            raise ServiceError("MDBG", response.status, await response.text())
        payload = await response.read()

    try:
        text = gzip.decompress(payload)
    except (OSError, EOFError) as e:
        raise DictionaryError(f"CC-CEDICT download is not a valid gzip file: {e}") from e

    try:
        ensure_dir(path.parent)
        path.write_bytes(text)
    except OSError as e:
        raise DictionaryError(f"Could not write {path}: {e}") from e

    logger.info(f"Saved CC-CEDICT to {path} ({len(text) / (1024 * 1024):.1f} MB)")
    return path
