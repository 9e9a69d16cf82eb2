"""Direct provider search endpoints and provider configuration status."""

from fastapi import APIRouter, Depends

from common.config import config, is_configured
from common.errors import ConfigurationError, LeadValidationError
from common.logging import get_logger
from models.discovery import EmailVerificationRequest, ReviewSearchRequest
from models.responses import AIStatusResponse, LeadListResponse, ProviderStatus
from routes.dependencies import get_apollo, get_hunter, get_yelp, raise_http_error
from services.apollo.client import ApolloClient
from services.apollo.schemas import OrganizationFilters, PeopleFilters
from services.base_client import ProviderError
from services.hunter.client import HunterClient
from services.hunter.schemas import EmailVerification
from services.yelp.client import YelpClient

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["providers"])

NO_AI_RECOMMENDATION = "Configure at least one AI API key in the .env file for enhanced lead verification"
READY = "All services ready"


@router.post("/apollo/organizations", response_model=LeadListResponse)
async def search_organizations_endpoint(filters: OrganizationFilters, apollo: ApolloClient = Depends(get_apollo)):
    try:
        leads = await apollo.search_organizations(filters)
    except Exception as e:
        raise_http_error(e, "Failed to search Apollo Organizations")
    return LeadListResponse.of(leads)


@router.post("/apollo/people", response_model=LeadListResponse)
async def search_people_endpoint(filters: PeopleFilters, apollo: ApolloClient = Depends(get_apollo)):
    try:
        leads = await apollo.search_people(filters)
    except Exception as e:
        raise_http_error(e, "Failed to search Apollo People")
    return LeadListResponse.of(leads)


@router.post("/hunter/verify-email", response_model=EmailVerification)
async def verify_email_endpoint(request: EmailVerificationRequest, hunter: HunterClient = Depends(get_hunter)):
    try:
        if not request.email or not request.email.strip():
            raise LeadValidationError("Email is required")
        if not hunter.configured:
            raise ConfigurationError(hunter.provider, "hunter_api_key")
        verification = await hunter.verify_email(request.email.strip())
        if verification is None:
            raise ProviderError(f"{hunter.provider} did not return a verification for {request.email}")
    except Exception as e:
        raise_http_error(e, "Failed to verify email")
    return verification


@router.post("/yelp/search", response_model=LeadListResponse)
async def search_reviews_endpoint(request: ReviewSearchRequest, yelp: YelpClient = Depends(get_yelp)):
    """Yelp business search around a place name or a coordinate pair."""
    has_coordinates = request.latitude is not None and request.longitude is not None
    try:
        if not request.term or not request.term.strip():
            raise LeadValidationError("Search term is required")
        if not request.location and not has_coordinates:
            raise LeadValidationError("Either location or latitude/longitude is required")
        leads = await yelp.search(
            request.term.strip(),
            location=request.location,
            latitude=request.latitude,
            longitude=request.longitude,
            radius=request.radius,
            limit=request.limit,
        )
    except Exception as e:
        raise_http_error(e, "Failed to search Yelp")
    return LeadListResponse.of(leads)


@router.get("/ai-status", response_model=AIStatusResponse)
async def ai_status_endpoint():
    """Which providers have usable credentials (values are never exposed)."""
    openai_ready = is_configured(config.openai_api_key)
    claude_ready = is_configured(config.anthropic_api_key)

    return AIStatusResponse(
        openai=ProviderStatus.of(openai_ready),
        claude=ProviderStatus.of(claude_ready),
        apollo=ProviderStatus.of(is_configured(config.apollo_api_key)),
        numverify=ProviderStatus.of(is_configured(config.numverify_api_key)),
        people_data_labs=ProviderStatus.of(is_configured(config.pdl_api_key)),
        hunter=ProviderStatus.of(is_configured(config.hunter_api_key)),
        yelp=ProviderStatus.of(is_configured(config.yelp_api_key)),
        google_places=ProviderStatus.of(is_configured(config.google_places_api_key)),
        recommendation=READY if (openai_ready or claude_ready) else NO_AI_RECOMMENDATION,
    )
