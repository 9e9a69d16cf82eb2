"""Response envelopes for the HTTP layer."""

from datetime import UTC, datetime

from pydantic import Field

from models.area import SearchArea
from models.lead import CamelModel, Lead


def _now() -> datetime:
    return datetime.now(UTC)


class LeadListResponse(CamelModel):
    success: bool = True
    results: list[Lead] = Field(default_factory=list)
    count: int = 0
    timestamp: datetime = Field(default_factory=_now)

    @classmethod
    def of(cls, leads: list[Lead], **extra) -> "LeadListResponse":
        return cls(results=leads, count=len(leads), **extra)


class TextDiscoveryResponse(LeadListResponse):
    search_source: str
    apollo_enriched: bool = False
    apollo_enriched_count: int = 0
    query: str | None = None
    location: str | None = None
    zipcode: str | None = None
    country: str | None = None


class AreaDiscoveryResponse(LeadListResponse):
    apollo_enriched: bool = False
    apollo_enriched_count: int = 0
    query: str | None = None
    area: SearchArea | None = None
    detected_locations: list[str] = Field(default_factory=list)
    polygons_searched: int = 1
    total_results_before_dedup: int = 0
    zipcode: str | None = None
    country: str | None = None


class StoredLeadsResponse(CamelModel):
    leads: list[Lead] = Field(default_factory=list)
    count: int = 0


class ProviderStatus(CamelModel):
    configured: bool
    status: str

    @classmethod
    def of(cls, configured: bool) -> "ProviderStatus":
        return cls(configured=configured, status="active" if configured else "not configured")


class AIStatusResponse(CamelModel):
    openai: ProviderStatus
    claude: ProviderStatus
    apollo: ProviderStatus
    numverify: ProviderStatus
    people_data_labs: ProviderStatus
    hunter: ProviderStatus
    yelp: ProviderStatus
    google_places: ProviderStatus
    recommendation: str
