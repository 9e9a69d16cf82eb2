"""
Retry helpers for provider calls.

Providers are called exactly once by default (``adapter_max_attempts = 1``);
raising the setting turns on exponential backoff for transient failures.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import httpx

from common.config import config
from common.logging import get_logger
from common.openai_errors import AIProviderError

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def calculate_backoff_delay(attempt: int, base_delay: float) -> float:
    """Calculate exponential backoff delay with jitter."""

    delay = base_delay * (2 ** (attempt - 1))
    jitter = delay * 0.2 * (2 * random.random() - 1)  # +/-20%
    return max(delay + jitter, 0.0)


def is_retryable_error(error: Exception) -> bool:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, AIProviderError):
        return error.retryable
    return False


def with_retry(operation_name: str, max_attempts: int | None = None, base_delay: float | None = None):
    """
    Decorator adding retry with exponential backoff to async provider calls.

    Retries on transport errors, 429/5xx responses and retryable AI provider
    errors. Limits default to the configured adapter policy, read at
    call time.

    Example:
        @with_retry("Hunter")
        async def _get(self, path, params):
            ...
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempts = max(1, max_attempts if max_attempts is not None else config.adapter_max_attempts)
            delay_base = base_delay if base_delay is not None else config.adapter_retry_delay

            for attempt in range(1, attempts + 1):
                try:
                    if attempt > 1:
                        logger.debug(f"[{operation_name}] Attempt {attempt}/{attempts}")
                    return await func(*args, **kwargs)
                except Exception as e:
                    if attempt >= attempts or not is_retryable_error(e):
                        raise
                    delay = calculate_backoff_delay(attempt, delay_base)
                    logger.warning(
                        f"[{operation_name}] {type(e).__name__} (attempt {attempt}/{attempts}). "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError(f"[{operation_name}] Exhausted all {attempts} attempts")

        return wrapper

    return decorator
