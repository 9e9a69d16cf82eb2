import httpx
import pytest
from openai import APIConnectionError, AuthenticationError, InternalServerError, RateLimitError

from common.openai_errors import AIProviderError, handle_openai_errors

REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/chat/completions")


def status_error(cls, status: int):
    return cls("upstream said no", response=httpx.Response(status, request=REQUEST), body=None)


@pytest.mark.parametrize(
    "error, retryable, fragment",
    [
        (status_error(RateLimitError, 429), True, "rate limit exceeded"),
        (status_error(InternalServerError, 503), True, "HTTP 503"),
        (status_error(AuthenticationError, 401), False, "rejected the API key"),
        (APIConnectionError(request=REQUEST), True, "Cannot reach Anthropic"),
    ],
)
def test_sdk_errors_become_provider_errors(error, retryable, fragment):
    with pytest.raises(AIProviderError) as exc_info:
        with handle_openai_errors("Claude", provider="Anthropic"):
            raise error

    assert exc_info.value.retryable is retryable
    assert fragment in str(exc_info.value)
    assert exc_info.value.__cause__ is error


def test_other_errors_pass_through():
    with pytest.raises(KeyError):
        with handle_openai_errors("Claude"):
            raise KeyError("choices")
