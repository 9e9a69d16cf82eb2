"""
Cached AsyncOpenAI clients for the AI analyzers.

Both analyzers speak the OpenAI chat-completions protocol; the primary points
the SDK at Anthropic's OpenAI-compatible endpoint.

Example:
  from services.ai.client_factory import AIClientService

  client = AIClientService.get_client(api_key, base_url="https://api.anthropic.com/v1/")
"""

from openai import AsyncOpenAI

from common.config import config
from common.logging import get_logger

logger = get_logger(__name__)


class AIClientService:
    _clients: dict[tuple[str | None, str], AsyncOpenAI] = {}

    @classmethod
    def get_client(cls, api_key: str, base_url: str | None = None) -> AsyncOpenAI:
        """Get a client for an endpoint + key pair (cached)"""
        if not api_key:
            raise ValueError("An API key is required to create an AI client")

        cache_key = (base_url, api_key)
        if cache_key not in cls._clients:
            logger.debug(f"Creating AI client for {base_url or 'api.openai.com'}")
            cls._clients[cache_key] = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=config.http_timeout,
                max_retries=0,
            )

        return cls._clients[cache_key]

    @classmethod
    def clear_cache(cls) -> None:
        cls._clients.clear()
