from typing import Any, NoReturn

import httpx
from pydantic import SecretStr

from common.config import config, is_configured
from common.logging import get_logger
from common.retry import with_retry

logger = get_logger(__name__)

USER_AGENT = "LeadScraper/1.0"


class ProviderError(Exception):
    """A provider request failed (HTTP status, transport or payload)."""


class ProviderClient:
    """
    Shared plumbing for the third-party provider clients.

    Subclasses set ``provider`` and decide how credentials travel (header or query
    string). ``transport`` lets tests plug in an ``httpx.MockTransport``.
    """

    provider = "provider"

    def __init__(
        self,
        api_key: SecretStr | str | None,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else config.http_timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return is_configured(self.api_key)

    def default_headers(self) -> dict[str, str]:
        return {"User-Agent": USER_AGENT, "Accept": "application/json"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self.default_headers(),
            timeout=self.timeout,
            transport=self.transport,
        )

    @with_retry("HTTP GET")
    async def _get_request(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request to the provider and return parsed JSON."""
        async with self._client() as client:
            response = await client.get(f"{self.base_url}/{endpoint.lstrip('/')}", params=params)
            return self._parse(response, endpoint)

    @with_retry("HTTP POST")
    async def _post_request(self, endpoint: str, payload: dict[str, Any]) -> Any:
        """Make a POST request to the provider and return parsed JSON."""
        async with self._client() as client:
            response = await client.post(f"{self.base_url}/{endpoint.lstrip('/')}", json=payload)
            return self._parse(response, endpoint)

    def _parse(self, response: httpx.Response, endpoint: str) -> Any:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (429, 500, 502, 503, 504):
                # Retryable; with_retry decides whether to try again
                raise
            self._handle_http_error(e, endpoint)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"{self.provider} returned invalid JSON for {endpoint}") from e

    def _handle_http_error(self, e: httpx.HTTPStatusError, operation: str) -> NoReturn:
        try:
            error_detail = e.response.json()
        except ValueError:
            error_detail = e.response.text
        raise ProviderError(
            f"{self.provider} failed {operation}, status: {e.response.status_code}: {error_detail}"
        ) from e
