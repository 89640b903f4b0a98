"""
Retry policy for store calls (tenacity).
"""
from __future__ import annotations

import asyncio
import logging

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from bgg_honors.config import STORE_BACKOFF, STORE_MAX_RETRIES
from bgg_honors.repositories.game_repository import TransientStoreError

logger = logging.getLogger(__name__)


def store_retrying(attempts: int = STORE_MAX_RETRIES, backoff: float = STORE_BACKOFF) -> AsyncRetrying:
    """
    Only TransientStoreError is retried; after the last attempt the original
    exception is re-raised so callers see the store error, not RetryError.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=backoff, min=0, max=max(backoff * 8, 0)),
        retry=retry_if_exception_type(TransientStoreError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


async def call_with_retry(func, *args, attempts: int = STORE_MAX_RETRIES, backoff: float = STORE_BACKOFF):
    """Run a blocking store call in a worker thread under the retry policy."""
    async for attempt in store_retrying(attempts, backoff):
        with attempt:
            return await asyncio.to_thread(func, *args)
