import asyncio
import math
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import SecretStr

from common.config import config
from common.errors import ConfigurationError
from common.logging import get_logger
from enrichments.normalize import extract_domain
from models.lead import Lead, has_value
from services.apollo.schemas import (
    MAX_PAGE_SIZE,
    OrganizationFilters,
    PeopleFilters,
    PersonMatch,
    organization_to_lead,
    person_to_lead,
)
from services.base_client import ProviderClient, ProviderError

logger = get_logger(__name__)


class ApolloClient(ProviderClient):
    """
    B2B organization/people search and single-person match.

    Search methods raise on failure (callers decide whether to fall back);
    ``match_person`` is an enrichment step and returns None instead.
    """

    provider = "Apollo"

    def __init__(
        self,
        api_key: SecretStr | str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        batch_delay: float | None = None,
    ):
        super().__init__(
            api_key=api_key if api_key is not None else config.apollo_api_key,
            base_url=base_url or config.apollo_base_url,
            transport=transport,
        )
        self.batch_delay = batch_delay if batch_delay is not None else config.batch_delay

    def default_headers(self) -> dict[str, str]:
        return {
            **super().default_headers(),
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
            "X-Api-Key": self.api_key,
        }

    def require_configured(self) -> None:
        if not self.configured:
            raise ConfigurationError(self.provider, "apollo_api_key")

    async def _paginate(
        self,
        endpoint: str,
        result_key: str,
        body: dict[str, Any],
        target_count: int,
        mapper: Callable[[dict], Lead],
    ) -> list[Lead]:
        page_size = min(MAX_PAGE_SIZE, target_count)
        pages_needed = math.ceil(target_count / page_size)
        logger.info(f"[{self.provider}] Target {target_count} results, {pages_needed} page(s) of {page_size}")

        results: list[Lead] = []
        for page in range(1, pages_needed + 1):
            data = await self._post_request(endpoint, {**body, "page": page, "per_page": page_size})
            page_results = [mapper(item) for item in data.get(result_key) or []]
            results.extend(page_results)
            logger.debug(f"[{self.provider}] Page {page}/{pages_needed}: {len(page_results)} results")

            if len(page_results) < page_size:
                break  # provider exhausted
            if len(results) >= target_count:
                break
            if page < pages_needed:
                await asyncio.sleep(self.batch_delay)

        return results[:target_count]

    async def search_organizations(self, filters: OrganizationFilters) -> list[Lead]:
        """
        Organization search, auto-paginated up to ``filters.target_count``.

        An exact company-name search that finds nothing is retried once with the
        same name as a keyword.
        """
        self.require_configured()
        target_count = filters.target_count or filters.per_page
        logger.info(f"[{self.provider}] Searching organizations: {filters.model_dump(exclude_defaults=True)}")

        try:
            results = await self._paginate(
                "mixed_companies/search",
                "organizations",
                filters.to_request_body(),
                target_count,
                organization_to_lead,
            )

            if not results and filters.company_name:
                logger.info(f"[{self.provider}] No results for name '{filters.company_name}', retrying as keyword")
                keyword_filters = filters.model_copy(update={"company_name": None, "keywords": [filters.company_name]})
                results = await self._paginate(
                    "mixed_companies/search",
                    "organizations",
                    keyword_filters.to_request_body(),
                    target_count,
                    organization_to_lead,
                )
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to search {self.provider} organizations: {e}") from e

        logger.info(f"[{self.provider}] Found {len(results)} organizations")
        return results

    async def search_people(self, filters: PeopleFilters) -> list[Lead]:
        self.require_configured()
        target_count = filters.target_count or filters.per_page
        logger.info(f"[{self.provider}] Searching people: {filters.model_dump(exclude_defaults=True)}")

        try:
            results = await self._paginate(
                "mixed_people/search",
                "contacts",
                filters.to_request_body(),
                target_count,
                person_to_lead,
            )
        except httpx.HTTPError as e:
            raise ProviderError(f"Failed to search {self.provider} people: {e}") from e

        logger.info(f"[{self.provider}] Found {len(results)} people")
        return results

    @staticmethod
    def build_match_request(lead: Lead) -> dict[str, str] | None:
        """Match request from the lead's identity fields, or None when no person signal exists."""
        body: dict[str, str] = {}

        if has_value(lead.email):
            body["email"] = lead.email
        elif has_value(lead.owner_name):
            parts = lead.owner_name.split()
            if len(parts) >= 2:
                body["first_name"] = parts[0]
                body["last_name"] = " ".join(parts[1:])
            else:
                body["name"] = lead.owner_name

        if has_value(lead.company_name):
            body["organization_name"] = lead.company_name
        domain = extract_domain(lead.website)
        if domain:
            body["domain"] = domain
        if has_value(lead.linkedin_url):
            body["linkedin_url"] = lead.linkedin_url

        if not any(key in body for key in ("email", "name", "first_name", "linkedin_url")):
            return None
        return body

    async def match_person(self, lead: Lead) -> PersonMatch | None:
        if not self.configured:
            logger.info(f"[{self.provider}] API key not configured, skipping enrichment")
            return None

        body = self.build_match_request(lead)
        if body is None:
            logger.info(f"[{self.provider}] Insufficient data for enrichment: {lead.company_name}")
            return None

        try:
            data = await self._post_request("people/match", body)
        except Exception as e:
            logger.error(f"[{self.provider}] Enrichment failed: {type(e).__name__}: {e}")
            return None

        person = data.get("person") if isinstance(data, dict) else None
        if not person:
            logger.info(f"[{self.provider}] No match found for {lead.company_name}")
            return None

        match = PersonMatch.from_dict(person)
        logger.info(f"[{self.provider}] Enrichment successful: {match.owner_name}")
        return match
