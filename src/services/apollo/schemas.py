from typing import Any

from pydantic import Field, model_validator

from models.lead import NOT_AVAILABLE, CamelModel, Lead

ORGANIZATIONS_SOURCE = "Apollo Organizations"
PEOPLE_SOURCE = "Apollo People"
MATCH_SOURCE = "Apollo Enrichment"

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 25


def _first(*values: Any) -> Any:
    """First non-empty value, in order."""
    for value in values:
        if value not in (None, "", [], {}):
            return value
    return None


class OrganizationFilters(CamelModel):
    """Organization search filters. ``keywords`` and ``company_name`` are mutually exclusive."""

    keywords: list[str] = Field(default_factory=list)
    company_name: str | None = None
    locations: list[str] = Field(default_factory=list)
    employee_ranges: list[str] = Field(default_factory=list)
    revenue_min: int | None = None
    revenue_max: int | None = None
    technologies: list[str] = Field(default_factory=list)
    page: int = Field(1, ge=1)
    per_page: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    target_count: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def _keyword_or_name(self) -> "OrganizationFilters":
        if self.keywords and self.company_name:
            raise ValueError("keywords and company_name cannot be combined in one search")
        return self

    def to_request_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.locations:
            body["organization_locations"] = self.locations
        if self.employee_ranges:
            body["organization_num_employees_ranges"] = self.employee_ranges
        if self.revenue_min or self.revenue_max:
            body["revenue_range"] = {
                key: value for key, value in (("min", self.revenue_min), ("max", self.revenue_max)) if value
            }
        if self.technologies:
            body["currently_using_any_of_technology_uids"] = self.technologies
        if self.keywords:
            body["q_organization_keyword_tags"] = self.keywords
        if self.company_name:
            body["q_organization_name"] = self.company_name
        body["page"] = self.page
        body["per_page"] = self.per_page
        return body


class PeopleFilters(CamelModel):
    titles: list[str] = Field(default_factory=list)
    seniorities: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    organization_locations: list[str] = Field(default_factory=list)
    organization_ids: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    employee_ranges: list[str] = Field(default_factory=list)
    page: int = Field(1, ge=1)
    per_page: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    target_count: int | None = Field(None, ge=1)

    def to_request_body(self) -> dict[str, Any]:
        mapping = {
            "person_titles": self.titles,
            "person_seniorities": self.seniorities,
            "person_locations": self.locations,
            "organization_locations": self.organization_locations,
            "organization_ids": self.organization_ids,
            "q_organization_domains_list": self.domains,
            "organization_num_employees_ranges": self.employee_ranges,
        }
        body: dict[str, Any] = {key: value for key, value in mapping.items() if value}
        body["page"] = self.page
        body["per_page"] = self.per_page
        return body


def organization_to_lead(org: dict) -> Lead:
    return Lead(
        company_name=org.get("name"),
        phone=_first(org.get("phone"), (org.get("primary_phone") or {}).get("number")) or NOT_AVAILABLE,
        address=org.get("raw_address") or NOT_AVAILABLE,
        zipcode=org.get("postal_code") or NOT_AVAILABLE,
        city=org.get("city") or NOT_AVAILABLE,
        state=org.get("state") or "",
        country=org.get("country") or NOT_AVAILABLE,
        industry=org.get("industry") or "Business",
        website=org.get("website_url") or NOT_AVAILABLE,
        employee_count=org.get("estimated_num_employees") or NOT_AVAILABLE,
        revenue=org.get("annual_revenue_printed") or NOT_AVAILABLE,
        founded_year=org.get("founded_year"),
        technologies=org.get("technology_names") or [],
        organization_id=org.get("id"),
        linkedin_url=org.get("linkedin_url"),
        twitter_url=org.get("twitter_url"),
        facebook_url=org.get("facebook_url"),
        source=ORGANIZATIONS_SOURCE,
    )


def person_to_lead(person: dict) -> Lead:
    org = person.get("organization") or {}
    phone_numbers = person.get("phone_numbers") or []
    full_name = person.get("name") or " ".join(
        filter(None, [person.get("first_name"), person.get("last_name")])
    )
    return Lead(
        company_name=_first(person.get("organization_name"), org.get("name")) or NOT_AVAILABLE,
        owner_name=full_name or NOT_AVAILABLE,
        title=person.get("title") or NOT_AVAILABLE,
        phone=_first(
            person.get("sanitized_phone"),
            phone_numbers[0].get("sanitized_number") if phone_numbers else None,
        )
        or NOT_AVAILABLE,
        email=person.get("email") or NOT_AVAILABLE,
        address=org.get("raw_address") or NOT_AVAILABLE,
        city=_first(person.get("city"), org.get("city")) or NOT_AVAILABLE,
        state=_first(person.get("state"), org.get("state")) or NOT_AVAILABLE,
        country=_first(person.get("country"), org.get("country")) or NOT_AVAILABLE,
        industry=org.get("industry") or "Business",
        linkedin_url=person.get("linkedin_url"),
        person_id=_first(person.get("person_id"), person.get("id")),
        organization_id=person.get("organization_id"),
        source=PEOPLE_SOURCE,
    )


class PersonMatch(CamelModel):
    """A person match from the enrichment endpoint, flattened onto lead field names."""

    owner_name: str | None = None
    title: str | None = None
    email: str | None = None
    phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    employee_count: str | None = None
    revenue: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    linkedin_url: str | None = None
    twitter_url: str | None = None
    person_id: str | None = None
    organization_id: str | None = None
    confidence: int = 90
    source: str = MATCH_SOURCE

    @staticmethod
    def from_dict(person: dict) -> "PersonMatch":
        org = person.get("organization") or {}
        history = person.get("employment_history") or []
        employees = org.get("estimated_num_employees")
        return PersonMatch(
            owner_name=person.get("name"),
            title=person.get("title"),
            email=person.get("email"),
            phone=history[0].get("phone") if history else None,
            company_name=org.get("name"),
            industry=org.get("industry"),
            employee_count=str(employees) if employees is not None else None,
            revenue=org.get("annual_revenue_printed"),
            city=person.get("city"),
            state=person.get("state"),
            country=person.get("country"),
            linkedin_url=person.get("linkedin_url"),
            twitter_url=person.get("twitter_url"),
            person_id=person.get("id"),
            organization_id=person.get("organization_id"),
        )
