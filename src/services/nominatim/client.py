import httpx
from pydantic import BaseModel

from common.config import config
from common.logging import get_logger
from services.base_client import ProviderClient, ProviderError

logger = get_logger(__name__)

MAX_RESULTS = 5


class GeocodeResult(BaseModel):
    display_name: str
    lat: float
    lon: float
    type: str | None = None
    importance: float | None = None


class NominatimClient(ProviderClient):
    """Forward geocoding against OpenStreetMap Nominatim (no key, but a User-Agent is mandatory)."""

    provider = "Nominatim"

    def __init__(self, base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(api_key=None, base_url=base_url or config.nominatim_base_url, transport=transport)

    @property
    def configured(self) -> bool:
        return True

    def default_headers(self) -> dict[str, str]:
        return {**super().default_headers(), "User-Agent": config.nominatim_user_agent}

    async def geocode(self, query: str) -> list[GeocodeResult]:
        logger.info(f"[{self.provider}] Geocoding: {query}")
        try:
            data = await self._get_request("search", {"format": "json", "q": query, "limit": MAX_RESULTS})
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to geocode location: {e}") from e

        return [
            GeocodeResult(
                display_name=item.get("display_name", ""),
                lat=float(item["lat"]),
                lon=float(item["lon"]),
                type=item.get("type"),
                importance=item.get("importance"),
            )
            for item in data or []
            if item.get("lat") is not None and item.get("lon") is not None
        ]
