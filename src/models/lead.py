import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NOT_AVAILABLE = "N/A"


def has_value(value: Any) -> bool:
    """True for a usable field value (not None, blank, or the N/A literal)."""
    if value is None:
        return False
    if isinstance(value, str):
        stripped = value.strip()
        return bool(stripped) and stripped != NOT_AVAILABLE
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def new_lead_id() -> str:
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AIMode(str, Enum):
    """Which AI analyzers the orchestrator invokes."""

    BOTH = "both"
    PRIMARY_ONLY = "primary"
    SECONDARY_ONLY = "secondary"

    @classmethod
    def _missing_(cls, value: object) -> "AIMode | None":
        # Provider names are accepted as well ("claude", "chatgpt")
        aliases = {"claude": cls.PRIMARY_ONLY, "chatgpt": cls.SECONDARY_ONLY, "openai": cls.SECONDARY_ONLY}
        return aliases.get(str(value).lower())

    @property
    def uses_primary(self) -> bool:
        return self in (AIMode.BOTH, AIMode.PRIMARY_ONLY)

    @property
    def uses_secondary(self) -> bool:
        return self in (AIMode.BOTH, AIMode.SECONDARY_ONLY)


class ConfidenceBasis(str, Enum):
    """Which analyses the final ai_confidence is derived from."""

    BOTH = "both"  # 100
    PRIMARY = "primary"  # 50
    SECONDARY = "secondary"  # 50
    MOCK = "mock"  # demo value, no AI contributed


class PhoneValidation(CamelModel):
    """Phone validation outcome. An invalid number is still a result, not a failure."""

    valid: bool
    number: str | None = None
    local_format: str | None = None
    international_format: str | None = None
    country_code: str | None = None
    country_name: str | None = None
    location: str | None = None
    carrier: str | None = None
    line_type: str | None = None


class SocialMedia(CamelModel):
    """Synthesized social profile guesses (not verified)."""

    linkedin: str | None = None
    facebook: str | None = None


class Lead(CamelModel):
    """A normalized business record produced by discovery and progressively enriched."""

    id: str = Field(default_factory=new_lead_id)

    # Core identity
    company_name: str | None = None
    phone: str | None = None
    address: str | None = None
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    industry: str | None = None
    website: str | None = None

    # Provenance / quality
    source: str | None = None
    place_id: str | None = None
    organization_id: str | None = None
    person_id: str | None = None
    rating: float | None = None
    review_count: int | None = None
    latitude: float | None = None
    longitude: float | None = None
    types: list[str] = Field(default_factory=list)

    # Enrichment outputs
    owner_name: str | None = None
    title: str | None = None
    email: str | None = None
    emails: list[dict] = Field(default_factory=list)
    contacts: list[dict] = Field(default_factory=list)
    phone_formatted: str | None = None
    phone_validation: PhoneValidation | None = None
    employee_count: str | None = None
    revenue: str | None = None
    founded_year: int | None = None
    technologies: list[str] = Field(default_factory=list)
    business_details: str | None = None
    social_media: SocialMedia | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None

    # Review site
    yelp_id: str | None = None
    yelp_url: str | None = None
    yelp_categories: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    hours: list[dict] = Field(default_factory=list)
    price: str | None = None
    image_url: str | None = None

    # Enrichment flags
    apollo_enriched: bool = False
    pdl_enriched: bool = False
    hunter_enriched: bool = False
    yelp_enriched: bool = False

    # AI verification
    ai_confidence: int | None = None
    ai_source: str | None = None
    confidence_basis: ConfidenceBasis | None = None
    primary_ai_confidence: int | None = None
    secondary_ai_confidence: int | None = None
    verified: bool = False
    enrichment_source: str | None = None

    @field_validator("employee_count", "revenue", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def __str__(self) -> str:
        return f"Lead(id='{self.id}', company_name='{self.company_name}', city='{self.city}', source='{self.source}')"


class LeadOverrides(CamelModel):
    """Hand-typed values from a human caller. Non-empty values win over every automated source."""

    company_name: str | None = None
    phone: str | None = None
    address: str | None = None
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    industry: str | None = None
    website: str | None = None
    owner_name: str | None = None
    email: str | None = None
    employee_count: str | None = None
    revenue: str | None = None
    business_details: str | None = None

    def provided(self) -> dict[str, str]:
        """Non-empty values, trimmed."""
        return {
            name: value.strip()
            for name, value in self.model_dump(by_alias=False).items()
            if isinstance(value, str) and value.strip()
        }

    def is_empty(self) -> bool:
        return not self.provided()
