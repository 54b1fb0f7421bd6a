# resolve360/utils/retry.py
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from .errors import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

def is_transient_store_error(exc: BaseException) -> bool:
    return isinstance(exc, StoreError) and exc.is_transient

async def retry_transient(
    operation: Callable[[], Awaitable[T]],
    retries: int = 3,
    base_delay: float = 2.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``operation``, retrying up to ``retries`` times on transient store errors.
    Retry n waits base_delay * n seconds first (linear backoff). Any other
    error is raised straight away; the last transient error is raised once
    the retries run out.
    """
    retries = max(0, retries)
    retrying = AsyncRetrying(
        retry=retry_if_exception(is_transient_store_error),
        stop=stop_after_attempt(retries + 1),
        wait=wait_incrementing(start=base_delay, increment=base_delay),
        before_sleep=before_sleep_log(logger, logging.INFO),
        sleep=sleep,
        reraise=True,
    )
    try:
        return await retrying(operation)
    except StoreError as e:
        if e.is_transient:
            logger.warning(f"Giving up after {retries + 1} attempts: {e}")
        raise
