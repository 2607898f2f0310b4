"""Retry policy shared by every network call."""

import asyncio

import aiohttp
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from ..exceptions import ServiceError

RETRYABLE_EXCEPTIONS = (ServiceError, aiohttp.ClientError, asyncio.TimeoutError)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(f"Attempt {retry_state.attempt_number} failed ({error}); retrying in {delay:.1f}s")


def retry_policy(attempts: int, max_delay: float) -> AsyncRetrying:
    """
    Exponential backoff with full jitter, capped at ``max_delay`` seconds.

    Any non-success status (``ServiceError``) or transport failure is retried.
    The last error is re-raised once ``attempts`` are used up.

    Usage:
        async for attempt in retry_policy(5, 120):
            with attempt:
                result = await call()
    """
    return AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_random_exponential(multiplier=1, max=max_delay),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        before_sleep=_log_retry,
        reraise=True,
    )
