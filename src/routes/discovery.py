"""Lead discovery endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from common.logging import get_logger
from models.discovery import AreaDiscoveryRequest, DiscoverySource, GeocodeRequest, TextDiscoveryRequest
from models.responses import AreaDiscoveryResponse, TextDiscoveryResponse
from pipeline.discovery import LeadDiscovery
from routes.dependencies import get_discovery, get_geocoder, raise_http_error
from services.apollo.schemas import ORGANIZATIONS_SOURCE
from services.lead_repository import LeadRepository, get_lead_repository
from services.nominatim.client import NominatimClient

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["discovery"])


def _search_source(request: TextDiscoveryRequest, leads) -> str:
    if request.source is not DiscoverySource.ORGANIZATIONS:
        return "Google Places"
    if leads and all(lead.source == ORGANIZATIONS_SOURCE for lead in leads):
        return "Apollo Search"
    return "Google Places (Apollo fallback)" if leads else "Apollo Search"


@router.post("/scrape", response_model=TextDiscoveryResponse)
async def discover_by_text_endpoint(
    request: TextDiscoveryRequest,
    discovery: LeadDiscovery = Depends(get_discovery),
    repository: LeadRepository = Depends(get_lead_repository),
):
    """
    Discover leads from a business type + location query.

    Example request:
        ```json
        {"query": "coffee shops", "location": "Austin, TX", "maxLeads": 20}
        ```
    """
    try:
        leads = await discovery.discover_by_text(request)
    except Exception as e:
        raise_http_error(e, "Failed to scrape data")

    repository.save_many(leads)
    return TextDiscoveryResponse.of(
        leads,
        search_source=_search_source(request, leads),
        apollo_enriched=request.enrich_with_apollo,
        apollo_enriched_count=sum(lead.apollo_enriched for lead in leads),
        query=request.query,
        location=request.location,
        zipcode=request.zipcode,
        country=request.country,
    )


@router.post("/scrape-area", response_model=AreaDiscoveryResponse)
async def discover_by_area_endpoint(
    request: AreaDiscoveryRequest,
    discovery: LeadDiscovery = Depends(get_discovery),
    repository: LeadRepository = Depends(get_lead_repository),
):
    """Discover leads inside a drawn area (circle, rectangle, polygon, polyline or multipolygon)."""
    try:
        result = await discovery.discover_by_area(request)
    except Exception as e:
        raise_http_error(e, "Failed to scrape area data")

    repository.save_many(result.leads)
    return AreaDiscoveryResponse.of(
        result.leads,
        apollo_enriched=request.enrich_with_apollo,
        apollo_enriched_count=sum(lead.apollo_enriched for lead in result.leads),
        query=request.query,
        area=request.area,
        detected_locations=result.detected_locations,
        polygons_searched=result.polygons_searched,
        total_results_before_dedup=result.total_before_dedup,
        zipcode=request.zipcode,
        country=request.country,
    )


@router.post("/geocode")
async def geocode_endpoint(request: GeocodeRequest, geocoder: NominatimClient = Depends(get_geocoder)):
    """Forward-geocode a place name for the map search box."""
    if not request.query or not request.query.strip():
        raise HTTPException(
            status_code=400,
            detail={"error": "Search query is required", "message": "query must not be empty"},
        )

    try:
        results = await geocoder.geocode(request.query.strip())
    except Exception as e:
        raise_http_error(e, "Failed to geocode location")

    return {"results": [result.model_dump() for result in results]}
