import re
from typing import Any

import httpx
from pydantic import SecretStr

from common.config import config
from common.errors import ConfigurationError
from common.logging import get_logger
from enrichments.geography import to_country_code
from models.lead import Lead, has_value
from services.base_client import ProviderClient, ProviderError
from services.yelp.schemas import MATCH_CONFIDENCE, YelpBusiness, YelpMatch, business_to_lead

logger = get_logger(__name__)

MAX_SEARCH_RADIUS_M = 40_000
MAX_SEARCH_LIMIT = 50


def build_match_params(lead: Lead) -> dict[str, str] | None:
    """
    Match parameters for a lead, or None when the request would be under-specified.

    A name alone is not enough: one of street address, city + state or phone
    must be present.
    """
    if not has_value(lead.company_name):
        return None

    params: dict[str, str] = {"name": lead.company_name}
    if has_value(lead.address):
        params["address1"] = lead.address.split(",")[0].strip()
    if has_value(lead.city):
        params["city"] = lead.city
    if has_value(lead.state):
        params["state"] = lead.state
    if has_value(lead.zipcode):
        params["zip_code"] = lead.zipcode
    if has_value(lead.country):
        country_code = to_country_code(lead.country)
        if country_code:
            params["country"] = country_code
    if has_value(lead.phone):
        phone = re.sub(r"[^\d+]", "", lead.phone)
        if phone:
            params["phone"] = phone

    if not (params.get("address1") or (params.get("city") and params.get("state")) or params.get("phone")):
        return None
    return params


class YelpClient(ProviderClient):
    provider = "Yelp"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.yelp_api_key,
            base_url=base_url or config.yelp_base_url,
            transport=transport,
        )

    def default_headers(self) -> dict[str, str]:
        return {**super().default_headers(), "Authorization": f"Bearer {self.api_key}"}

    async def business_details(self, yelp_id: str) -> YelpBusiness | None:
        try:
            data = await self._get_request(f"businesses/{yelp_id}")
        except Exception as e:
            logger.error(f"[{self.provider}] Details failed for {yelp_id}: {type(e).__name__}: {e}")
            return None
        return YelpBusiness.from_dict(data)

    async def match(self, lead: Lead) -> YelpMatch | None:
        if not self.configured:
            logger.info(f"[{self.provider}] API key not configured, skipping verification")
            return None

        params = build_match_params(lead)
        if params is None:
            logger.info(f"[{self.provider}] Insufficient data for match: {lead.company_name}")
            return None

        logger.info(f"[{self.provider}] Matching business: {lead.company_name}")
        try:
            data = await self._get_request("businesses/matches", params)
        except Exception as e:
            logger.error(f"[{self.provider}] Match failed: {type(e).__name__}: {e}")
            return None

        businesses = data.get("businesses") if isinstance(data, dict) else None
        if not businesses:
            logger.info(f"[{self.provider}] No match found for {lead.company_name}")
            return YelpMatch(verified=False, confidence=0)

        matched = businesses[0]
        yelp_id = matched.get("id")
        logger.info(f"[{self.provider}] Match found: {matched.get('name')} (ID: {yelp_id})")

        return YelpMatch(
            verified=True,
            yelp_id=yelp_id,
            yelp_url=matched.get("url") or f"https://www.yelp.com/biz/{yelp_id}",
            business=await self.business_details(yelp_id),
            confidence=MATCH_CONFIDENCE,
        )

    async def search(
        self,
        term: str,
        location: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        radius: int = 5_000,
        limit: int = MAX_SEARCH_LIMIT,
    ) -> list[Lead]:
        """Business search by location text or coordinates."""
        if not self.configured:
            raise ConfigurationError(self.provider, "yelp_api_key")

        params: dict[str, Any] = {"term": term, "limit": min(limit, MAX_SEARCH_LIMIT)}
        if latitude is not None and longitude is not None:
            params.update(latitude=latitude, longitude=longitude, radius=min(radius, MAX_SEARCH_RADIUS_M))
        elif location:
            params["location"] = location
        else:
            raise ValueError("Either location or coordinates are required")

        logger.info(f"[{self.provider}] Searching '{term}' in {location or f'{latitude},{longitude}'}")
        try:
            data = await self._get_request("businesses/search", params)
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to search {self.provider}: {e}") from e

        leads = [business_to_lead(business) for business in data.get("businesses") or []]
        logger.info(f"[{self.provider}] Returned {len(leads)} businesses")
        return leads
