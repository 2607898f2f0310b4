"""Shared HTTP plumbing for the remote collaborators."""

import json
from typing import Any, Optional

import aiohttp
from loguru import logger

from ..config import RuntimeConfig
from ..exceptions import ServiceError
from ..utils.retry import retry_policy


class ServiceClient:
    """
    Base class for REST clients.

    Every request runs under the retry policy; non-2xx answers raise
    ``ServiceError`` so the policy can retry them.

    Args:
        session: Shared aiohttp session
        runtime: Retry and timeout settings
    """

    SERVICE_NAME = "service"

    def __init__(self, session: aiohttp.ClientSession, runtime: Optional[RuntimeConfig] = None) -> None:
        self.session = session
        self.runtime = runtime or RuntimeConfig()
        self._timeout = aiohttp.ClientTimeout(total=self.runtime.timeout)

    async def _send(self, method: str, url: str, **kwargs: Any) -> bytes:
        logger.trace(f"{self.SERVICE_NAME} {method} {url} {kwargs.get('json') or kwargs.get('data') or ''}")
        async with self.session.request(method, url, timeout=self._timeout, **kwargs) as response:
            body = await response.read()
            if not 200 <= response.status < 300:
                raise ServiceError(self.SERVICE_NAME, response.status, body.decode("utf-8", "replace"))
            return body

    async def _request_bytes(self, method: str, url: str, **kwargs: Any) -> bytes:
        async for attempt in retry_policy(self.runtime.retries, self.runtime.max_delay):
            with attempt:
                body = await self._send(method, url, **kwargs)
        logger.trace(f"{self.SERVICE_NAME} answered with {len(body)} bytes")
        return body

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        body = await self._request_bytes(method, url, **kwargs)
        try:
            data = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ServiceError(self.SERVICE_NAME, 200, f"invalid JSON: {e}") from e
        logger.trace(f"{self.SERVICE_NAME} response: {data}")
        return data

    def _dig(self, data: Any, *path: Any) -> Any:
        """Index into a JSON payload, turning a bad shape into ``ServiceError``."""
        node = data
        try:
            for key in path:
                node = node[key]
        except (KeyError, IndexError, TypeError) as e:
            raise ServiceError(self.SERVICE_NAME, 200, f"unexpected response shape: {data!r}") from e
        return node
