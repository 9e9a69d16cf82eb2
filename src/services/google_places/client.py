import asyncio
from typing import Any

import httpx
from pydantic import SecretStr

from common.config import config
from common.errors import ConfigurationError, DiscoveryError
from common.logging import get_logger
from enrichments.geometry import area_center, search_radius
from models.area import LatLng, SearchArea
from models.lead import Lead
from services.base_client import ProviderClient, ProviderError
from services.google_places.schemas import DETAIL_FIELDS, OK_STATUSES, PlaceAddress, PlaceDetails

logger = get_logger(__name__)

MAX_PAGES = 3  # provider hard cap (~60 results)
GENERIC_QUERIES = {"all", "any"}
GENERIC_QUERY_TERM = "business"


def build_search_query(
    query: str,
    location: str | None = None,
    postal_code: str | None = None,
    country: str | None = None,
) -> str:
    """Combine business type, location, postal code and country into one query text."""
    effective_query = GENERIC_QUERY_TERM if query.strip().lower() in GENERIC_QUERIES else query.strip()
    text = f"{effective_query} in {location}" if location else effective_query
    if postal_code:
        text += f" {postal_code}"
    if country:
        text += f" {country}"
    return text


class GooglePlacesClient(ProviderClient):
    """
    Places text search + details, with the provider's pagination rules.

    Example:
        client = GooglePlacesClient()
        leads = await client.search("plumbers", "Austin, TX", max_results=20)
    """

    provider = "Google Places"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        page_token_delay: float | None = None,
        detail_request_delay: float | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.google_places_api_key,
            base_url=base_url or config.google_places_base_url,
            transport=transport,
        )
        self.page_token_delay = page_token_delay if page_token_delay is not None else config.page_token_delay
        self.detail_request_delay = (
            detail_request_delay if detail_request_delay is not None else config.detail_request_delay
        )

    def require_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError(self.provider, "google_places_api_key")

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict:
        return await self._get_request(endpoint, {**params, "key": self.api_key})

    # Text search with pagination

    async def search(
        self,
        query: str,
        location: str | None = None,
        area: SearchArea | None = None,
        postal_code: str | None = None,
        country: str | None = None,
        max_results: int = 10,
    ) -> list[Lead]:
        """
        Search places and return normalized leads for the first ``max_results`` candidates.

        Raises:
            ConfigurationError: no API key.
            DiscoveryError: the provider failed before any page was collected.
        """
        self.require_configured()

        search_query = build_search_query(query, location, postal_code, country)
        params: dict[str, Any] = {"query": search_query}

        center = area_center(area) if area is not None else None
        if center:
            params["location"] = f"{center.lat},{center.lng}"
            params["radius"] = search_radius(area)
            logger.info(f"[Places] Location bias {params['location']} radius {params['radius']}m")

        logger.info(f"[Places] Searching: '{search_query}', max_results: {max_results}")

        places = await self._collect_pages(params, max_results)
        if not places:
            logger.info("[Places] No results found")
            return []

        candidates = places[:max_results]
        logger.info(f"[Places] Fetching details for {len(candidates)} of {len(places)} places")

        leads: list[Lead] = []
        for index, place in enumerate(candidates):
            if index > 0:
                await asyncio.sleep(self.detail_request_delay)

            place_id = place.get("place_id")
            if not place_id:
                continue
            try:
                details = await self.place_details(place_id)
            except Exception as e:
                logger.error(f"[Places] Details failed for {place_id}: {type(e).__name__}: {e}")
                continue

            if details:
                lead = details.to_lead()
                leads.append(lead)
                logger.debug(f"[Places] Found: {lead.company_name} - {lead.phone}")

        logger.info(f"[Places] Retrieved {len(leads)} businesses")
        return leads

    async def _collect_pages(self, params: dict[str, Any], max_results: int) -> list[dict]:
        places: list[dict] = []
        next_page_token: str | None = None

        for page in range(1, MAX_PAGES + 1):
            if next_page_token:
                # Continuation tokens are not valid immediately after issue
                await asyncio.sleep(self.page_token_delay)
                request_params = {"pagetoken": next_page_token}
            else:
                request_params = params

            try:
                data = await self._get("place/textsearch/json", request_params)
                status = data.get("status")
                if status not in OK_STATUSES:
                    raise ProviderError(f"Google Places API error: {status} {data.get('error_message', '')}".strip())
            except (ProviderError, httpx.HTTPError) as e:
                if places:
                    logger.warning(f"[Places] Page {page} failed ({e}); returning {len(places)} results")
                    break
                raise DiscoveryError(f"Failed to fetch data from Google Places API: {e}") from e

            results = data.get("results") or []
            if not results:
                break

            places.extend(results)
            logger.debug(f"[Places] Page {page}: {len(results)} results, {len(places)} total")

            next_page_token = data.get("next_page_token")
            if len(places) >= max_results or not next_page_token:
                break

        return places

    # Single lookups

    async def place_details(self, place_id: str) -> PlaceDetails | None:
        data = await self._get("place/details/json", {"place_id": place_id, "fields": DETAIL_FIELDS})
        if data.get("status") != "OK":
            logger.warning(f"[Places] Details status {data.get('status')} for {place_id}")
            return None
        return PlaceDetails.from_dict(place_id, data.get("result") or {})

    async def find_place_by_phone(self, phone: str) -> str | None:
        """Place id of the business registered under a phone number."""
        data = await self._get(
            "place/findplacefromtext/json",
            {"input": phone, "inputtype": "phonenumber", "fields": "place_id"},
        )
        candidates = data.get("candidates") or []
        if data.get("status") == "OK" and candidates:
            return candidates[0].get("place_id")
        return None

    async def text_search(self, query: str) -> list[dict]:
        """Single page of raw text-search results."""
        data = await self._get("place/textsearch/json", {"query": query})
        if data.get("status") != "OK":
            return []
        return data.get("results") or []

    async def reverse_geocode(self, point: LatLng) -> str | None:
        """Human-readable location for a coordinate, or None."""
        if not self.configured:
            logger.warning("[Geocode] Google API key not available for reverse geocoding")
            return None

        try:
            data = await self._get("geocode/json", {"latlng": f"{point.lat},{point.lng}"})
        except Exception as e:
            logger.error(f"[Geocode] Reverse geocoding failed: {e}")
            return None

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            return None

        first = results[0]
        address = PlaceAddress.from_components(first.get("address_components") or [])
        return address.location_label() or first.get("formatted_address")
