"""
Retry with exponential backoff for transient upstream failures.
"""

import asyncio
import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Transport errors, 429 and 5xx are worth retrying; other 4xx are not."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return isinstance(exc, (httpx.TransportError, asyncio.TimeoutError))


def retry_with_backoff(
    max_retries: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
):
    """
    Decorator for retrying async httpx calls with exponential backoff.

    Args:
        max_retries: Retry attempts after the first call (default settings.HTTP_MAX_RETRIES)
        base_delay: Initial delay in seconds (default settings.HTTP_RETRY_BASE_DELAY_SEC)
        max_delay: Maximum delay cap
        exponential_base: Multiplier for exponential backoff

    Defaults are read at call time so tests can zero them through settings.

    Usage:
        @retry_with_backoff()
        async def _get(self, url):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            retries = settings.HTTP_MAX_RETRIES if max_retries is None else max_retries
            delay_0 = settings.HTTP_RETRY_BASE_DELAY_SEC if base_delay is None else base_delay

            for attempt in range(retries + 1):
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    if not is_retryable(exc):
                        raise
                    if attempt >= retries:
                        logger.warning(
                            "%s: All %d attempts failed: %s",
                            func.__name__,
                            retries + 1,
                            exc,
                        )
                        raise
                    delay = min(delay_0 * (exponential_base ** attempt), max_delay)
                    logger.debug(
                        "%s: Attempt %d/%d failed (%s), retrying in %.1fs",
                        func.__name__,
                        attempt + 1,
                        retries + 1,
                        type(exc).__name__,
                        delay,
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
