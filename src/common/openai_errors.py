"""
Error translation for AI completions.

Both analyzers go through the OpenAI SDK (Claude via Anthropic's compatible
endpoint), so every provider failure arrives as an ``openai`` exception and is
turned into a single ``AIProviderError`` here.
"""

from collections.abc import Generator
from contextlib import contextmanager

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from common.logging import get_logger

logger = get_logger(__name__)


class AIProviderError(RuntimeError):
    """An AI provider call failed; ``retryable`` marks throttling and outages."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


def describe_openai_error(e: APIError, provider: str) -> tuple[str, bool]:
    """Return a readable message for an SDK exception and whether a retry may help."""
    if isinstance(e, AuthenticationError | PermissionDeniedError):
        return f"{provider} rejected the API key: {e.message}", False
    if isinstance(e, RateLimitError):
        return f"{provider} rate limit exceeded: {e.message}", True
    if isinstance(e, APITimeoutError):
        return f"{provider} request timed out", True
    if isinstance(e, APIConnectionError):
        return f"Cannot reach {provider}: {e.message}", True
    if isinstance(e, APIStatusError):
        return f"{provider} returned HTTP {e.status_code}: {e.message}", e.status_code >= 500
    return f"{provider} API error: {e.message}", False


@contextmanager
def handle_openai_errors(operation_name: str, provider: str = "AI provider") -> Generator[None, None, None]:
    """
    Wrap an SDK call so failures surface as ``AIProviderError``.

    Usage:
        with handle_openai_errors("Claude", provider="Anthropic"):
            completion = await client.chat.completions.create(...)
    """
    try:
        yield
    except APIError as e:
        message, retryable = describe_openai_error(e, provider)
        logger.error(f"[{operation_name}] {message}")
        raise AIProviderError(message, retryable=retryable) from e
