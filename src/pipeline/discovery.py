"""
Discovery operations: text search, area search and manual-entry enrichment.

Discovery produces candidate leads; enrichment of a single lead is delegated
to the EnrichmentOrchestrator.
"""

import asyncio
import re

from common.config import config
from common.errors import ConfigurationError, DiscoveryError, LeadValidationError
from common.logging import get_logger
from enrichments.geometry import area_center, format_coordinates, split_quota
from models.area import MultiPolygonArea, SearchArea
from models.discovery import (
    AreaDiscoveryRequest,
    AreaDiscoveryResult,
    DiscoverySource,
    DiscoveryStrategy,
    ManualEnrichmentResult,
    TextDiscoveryRequest,
)
from models.lead import AIMode, Lead, LeadOverrides, has_value
from pipeline.merge import merge_person_match
from pipeline.orchestrator import EnrichmentOrchestrator
from services.apollo.client import ApolloClient
from services.apollo.schemas import OrganizationFilters
from services.google_places.client import GooglePlacesClient

logger = get_logger(__name__)

GENERIC_ORGANIZATION_WORDS = re.compile(
    r"\b(companies|company|businesses|business|firms|firm|agencies|agency)\b", re.IGNORECASE
)

MANUAL_ADDRESS_CANDIDATES = 3
MANUAL_NAME_SEARCH_LIMIT = 5
MANUAL_DEFAULT_LOCATION = "United States"
UNKNOWN_BUSINESS = "Unknown Business"


def organization_filters_for_query(
    query: str,
    location: str,
    postal_code: str | None,
    target_count: int,
) -> OrganizationFilters:
    """
    Generic queries ("plumbing companies") become a keyword search with the generic
    words stripped; anything else is treated as an exact company name.
    """
    locations = [location]
    if postal_code:
        locations.append(postal_code)

    if GENERIC_ORGANIZATION_WORDS.search(query):
        keyword = " ".join(GENERIC_ORGANIZATION_WORDS.sub("", query.lower()).split())
        return OrganizationFilters(
            keywords=[keyword] if keyword else [], locations=locations, target_count=target_count
        )
    return OrganizationFilters(company_name=query, locations=locations, target_count=target_count)


def dedupe_by_place_id(leads: list[Lead]) -> list[Lead]:
    """Keep the first lead per place id; leads without one cannot collide and are kept."""
    seen: set[str] = set()
    unique: list[Lead] = []
    for lead in leads:
        if lead.place_id:
            if lead.place_id in seen:
                continue
            seen.add(lead.place_id)
        unique.append(lead)
    return unique


def pick_best_match(candidates: list[Lead], company_name: str | None) -> Lead:
    """Exact name match, else containment either way, else the first candidate."""
    if not has_value(company_name):
        return candidates[0]

    wanted = company_name.strip().lower()
    names = [(candidate, (candidate.company_name or "").strip().lower()) for candidate in candidates]

    exact = next((candidate for candidate, name in names if name == wanted), None)
    if exact:
        return exact
    partial = next((candidate for candidate, name in names if name and (wanted in name or name in wanted)), None)
    return partial or candidates[0]


def manual_search_location(fields: dict[str, str]) -> str:
    city, country, address = fields.get("city"), fields.get("country"), fields.get("address")
    if city and country:
        return f"{city}, {country}"
    if city:
        return city
    if address:
        parts = address.split(",")
        if len(parts) >= 2:
            return parts[-2].strip()
    return MANUAL_DEFAULT_LOCATION


class LeadDiscovery:
    """
    Produces candidate leads from a text query, a drawn area or a sparse manual record.

    Example:
        discovery = LeadDiscovery()
        leads = await discovery.discover_by_text(TextDiscoveryRequest(query="cafes", location="Austin, TX"))
    """

    def __init__(
        self,
        places: GooglePlacesClient | None = None,
        apollo: ApolloClient | None = None,
        orchestrator: EnrichmentOrchestrator | None = None,
        batch_delay: float | None = None,
    ):
        self.places = places or GooglePlacesClient()
        self.apollo = apollo or ApolloClient()
        self.orchestrator = orchestrator or EnrichmentOrchestrator(apollo=self.apollo)
        self.batch_delay = batch_delay if batch_delay is not None else config.batch_delay

    # Text discovery

    async def discover_by_text(self, request: TextDiscoveryRequest) -> list[Lead]:
        query = (request.query or "").strip()
        location = (request.location or "").strip()
        if not query or not location:
            raise LeadValidationError("Both query and location are required")

        logger.info(
            f"Starting text discovery: '{query}' in {location}"
            f"{f', zipcode: {request.zipcode}' if request.zipcode else ''}"
            f"{f', country: {request.country}' if request.country else ''}"
        )

        if request.source is DiscoverySource.ORGANIZATIONS:
            try:
                filters = organization_filters_for_query(query, location, request.zipcode, request.max_leads)
                return await self.apollo.search_organizations(filters)
            except Exception as e:
                logger.error(f"Organization search failed, falling back to places search: {e}")

        leads = await self.places.search(
            query,
            location,
            postal_code=request.zipcode,
            country=request.country,
            max_results=request.max_leads,
        )
        if request.enrich_with_apollo:
            leads = await self.enrich_with_organizations(leads)
        return leads

    # Area discovery

    async def _search_shape(
        self,
        query: str,
        shape: SearchArea,
        request: AreaDiscoveryRequest,
        max_results: int,
        detected_locations: list[str],
    ) -> list[Lead]:
        center = area_center(shape)
        location = await self.places.reverse_geocode(center) if center else None
        if location:
            detected_locations.append(location)
        elif center:
            location = format_coordinates(center)

        logger.info(f"Searching area around {location}, quota {max_results}")
        return await self.places.search(
            query,
            location,
            area=shape,
            postal_code=request.zipcode,
            country=request.country,
            max_results=max_results,
        )

    async def discover_by_area(self, request: AreaDiscoveryRequest) -> AreaDiscoveryResult:
        """
        Search a drawn area. Multi-polygons are searched one polygon at a time,
        each with its own center and an equal share of the requested total.
        """
        query = (request.query or "").strip()
        if not query or request.area is None:
            raise LeadValidationError("Both query and area are required")

        self.places.require_configured()

        area = request.area
        shapes: list[SearchArea] = area.split() if isinstance(area, MultiPolygonArea) else [area]
        quota = split_quota(request.max_leads, len(shapes))
        logger.info(f"Starting area discovery: '{query}' over {len(shapes)} shape(s), {quota} per shape")

        detected_locations: list[str] = []
        collected: list[Lead] = []
        for index, shape in enumerate(shapes):
            if index > 0:
                await asyncio.sleep(self.batch_delay)
            try:
                results = await self._search_shape(query, shape, request, quota, detected_locations)
            except DiscoveryError as e:
                if not collected:
                    raise
                logger.warning(f"Polygon {index + 1} search failed ({e}); keeping {len(collected)} results")
                continue
            logger.info(f"Polygon {index + 1}/{len(shapes)} returned {len(results)} results")
            collected.extend(results)

        unique = dedupe_by_place_id(collected)
        leads = unique[: request.max_leads]
        logger.info(f"Area discovery: {len(collected)} total, {len(unique)} unique, {len(leads)} returned")

        if request.enrich_with_apollo:
            leads = await self.enrich_with_organizations(leads)

        return AreaDiscoveryResult(
            leads=leads,
            detected_locations=detected_locations,
            polygons_searched=len(shapes),
            total_before_dedup=len(collected),
        )

    async def enrich_with_organizations(self, leads: list[Lead]) -> list[Lead]:
        """Organization match for every lead, concurrently."""

        async def enrich_one(lead: Lead) -> Lead:
            try:
                match = await self.apollo.match_person(lead)
            except Exception as e:
                logger.error(f"[Organization] Enrichment failed for {lead.company_name}: {e}")
                return lead
            return merge_person_match(lead, match) if match else lead

        enriched = list(await asyncio.gather(*(enrich_one(lead) for lead in leads)))
        logger.info(f"[Organization] Enriched {sum(lead.apollo_enriched for lead in enriched)}/{len(leads)} leads")
        return enriched

    # Manual enrichment

    async def _lookup_by_phone(self, phone: str) -> list[Lead]:
        try:
            place_id = await self.places.find_place_by_phone(phone)
            if not place_id:
                return []
            details = await self.places.place_details(place_id)
        except Exception as e:
            logger.warning(f"[Manual] Phone search failed: {e}")
            return []
        return [details.to_lead()] if details else []

    async def _lookup_by_address(self, address_query: str) -> list[Lead]:
        results = await self.places.text_search(f"business at {address_query}")
        leads: list[Lead] = []
        for index, place in enumerate(results[:MANUAL_ADDRESS_CANDIDATES]):
            if index > 0:
                await asyncio.sleep(self.places.detail_request_delay)
            place_id = place.get("place_id")
            details = await self.places.place_details(place_id) if place_id else None
            if details:
                leads.append(details.to_lead())
        return leads

    async def _discover_manual(self, fields: dict[str, str]) -> tuple[list[Lead], DiscoveryStrategy]:
        """Phone, then address, then company name; the first strategy with candidates wins."""
        self.places.require_configured()

        if fields.get("phone"):
            logger.info(f"[Manual] Searching by phone: {fields['phone']}")
            candidates = await self._lookup_by_phone(fields["phone"])
            if candidates:
                return candidates, DiscoveryStrategy.PHONE

        address, city, zipcode = fields.get("address"), fields.get("city"), fields.get("zipcode")
        if address or (city and zipcode):
            address_query = address or f"{city} {zipcode}"
            if fields.get("country"):
                address_query += f" {fields['country']}"
            logger.info(f"[Manual] Searching by address: {address_query}")
            candidates = await self._lookup_by_address(address_query)
            if candidates:
                return candidates, DiscoveryStrategy.ADDRESS

        if fields.get("company_name"):
            logger.info(f"[Manual] Searching by company name: {fields['company_name']}")
            candidates = await self.places.search(
                fields["company_name"],
                manual_search_location(fields),
                postal_code=zipcode,
                country=fields.get("country"),
                max_results=MANUAL_NAME_SEARCH_LIMIT,
            )
            if candidates:
                return candidates, DiscoveryStrategy.COMPANY_NAME

        return [], DiscoveryStrategy.NONE

    async def enrich_manual(self, manual: LeadOverrides) -> ManualEnrichmentResult:
        """
        Turn a sparse hand-typed record into a fully enriched lead.

        The typed values are passed to the orchestrator as overrides, so they win
        over everything discovery and the adapters find.
        """
        fields = manual.provided()
        if not fields:
            raise LeadValidationError("At least one field is required")

        logger.info(f"[Manual] Enriching manual lead: {fields}")

        candidates: list[Lead] = []
        strategy = DiscoveryStrategy.NONE
        try:
            candidates, strategy = await self._discover_manual(fields)
        except ConfigurationError as e:
            logger.warning(f"[Manual] {e}; using manual data only")
        except Exception as e:
            logger.warning(f"[Manual] Discovery failed, using manual data only: {type(e).__name__}: {e}")

        if candidates:
            lead = pick_best_match(candidates, fields.get("company_name"))
            logger.info(f"[Manual] Found match: {lead.company_name} (via {strategy.value})")
        else:
            logger.info("[Manual] No discovery results, using manual data only")
            lead = Lead(**fields)
            if not has_value(lead.company_name):
                lead.company_name = UNKNOWN_BUSINESS

        enrichment_source = f"Google Maps ({strategy.value}) + AI" if candidates else "Manual + AI"

        enriched = await self.orchestrator.enrich(lead, AIMode.BOTH, overrides=manual)
        enriched.enrichment_source = enrichment_source

        return ManualEnrichmentResult(
            lead=enriched,
            search_method=strategy,
            scraped_data_available=bool(candidates),
            enrichment_source=enrichment_source,
        )
