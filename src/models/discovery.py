"""Request/result models for discovery and manual enrichment."""

from enum import Enum

from pydantic import Field

from models.area import SearchArea
from models.lead import AIMode, CamelModel, Lead, LeadOverrides


class DiscoverySource(str, Enum):
    PLACES = "places"
    ORGANIZATIONS = "organizations"


class DiscoveryStrategy(str, Enum):
    """Which manual-entry lookup produced the candidate lead."""

    PHONE = "phone"
    ADDRESS = "address"
    COMPANY_NAME = "company_name"
    NONE = "unknown"


class TextDiscoveryRequest(CamelModel):
    query: str | None = None
    location: str | None = None
    zipcode: str | None = None
    country: str | None = None
    max_leads: int = Field(10, ge=1, le=500)
    source: DiscoverySource = DiscoverySource.PLACES
    enrich_with_apollo: bool = False


class AreaDiscoveryRequest(CamelModel):
    query: str | None = None
    area: SearchArea | None = None
    zipcode: str | None = None
    country: str | None = None
    max_leads: int = Field(10, ge=1, le=500)
    enrich_with_apollo: bool = False


class AreaDiscoveryResult(CamelModel):
    leads: list[Lead] = Field(default_factory=list)
    detected_locations: list[str] = Field(default_factory=list)
    polygons_searched: int = 1
    total_before_dedup: int = 0


class VerifyRequest(CamelModel):
    lead: Lead
    ai_provider: AIMode = AIMode.BOTH
    overrides: LeadOverrides | None = None


class OwnerSearchRequest(CamelModel):
    company_name: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None


class GeocodeRequest(CamelModel):
    query: str | None = None


class EmailVerificationRequest(CamelModel):
    email: str | None = None


class ReviewSearchRequest(CamelModel):
    term: str | None = None
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius: int = Field(5_000, ge=1)
    limit: int = Field(20, ge=1)


class ManualEnrichmentResult(CamelModel):
    lead: Lead
    search_method: DiscoveryStrategy = DiscoveryStrategy.NONE
    scraped_data_available: bool = False
    enrichment_source: str
