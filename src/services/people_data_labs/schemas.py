from pydantic import Field

from models.lead import CamelModel

OWNER_SEARCH_SOURCE = "People Data Labs Person Search"
OWNER_CONFIDENCE = 90

DECISION_MAKER_ROLES = ("owner", "ceo", "founder", "president", "partner", "managing_director")


def best_email(emails: list[dict] | None) -> str | None:
    """Professional address, else the current one, else the first listed."""
    if not emails:
        return None
    professional = next((e for e in emails if e.get("type") == "professional"), None)
    current = next((e for e in emails if e.get("current") is True), None)
    return (professional or {}).get("address") or (current or {}).get("address") or emails[0].get("address")


class OwnerContact(CamelModel):
    full_name: str | None = None
    title: str | None = None
    title_role: str | None = None
    email: str | None = None
    phone: str | None = None
    linkedin_url: str | None = None
    person_id: str | None = None

    @staticmethod
    def from_dict(person: dict) -> "OwnerContact":
        phones = person.get("phone_numbers") or []
        return OwnerContact(
            full_name=person.get("full_name"),
            title=person.get("job_title"),
            title_role=person.get("job_title_role"),
            email=best_email(person.get("emails")),
            phone=phones[0] if phones else None,
            linkedin_url=person.get("linkedin_url"),
            person_id=person.get("id"),
        )


class OwnerRecord(CamelModel):
    """Primary decision maker for a company plus every candidate found."""

    owner_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    title: str | None = None
    title_role: str | None = None
    email: str | None = None
    personal_emails: list[str] = Field(default_factory=list)
    professional_emails: list[str] = Field(default_factory=list)
    phone: str | None = None
    linkedin_url: str | None = None
    facebook_url: str | None = None
    twitter_url: str | None = None
    location: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    job_company_name: str | None = None
    job_company_website: str | None = None
    job_start_date: str | None = None
    person_id: str | None = None
    contacts: list[OwnerContact] = Field(default_factory=list)
    confidence: int = OWNER_CONFIDENCE
    source: str = OWNER_SEARCH_SOURCE

    @staticmethod
    def from_results(people: list[dict]) -> "OwnerRecord":
        primary = people[0]
        emails = primary.get("emails") or []
        phones = primary.get("phone_numbers") or []
        return OwnerRecord(
            owner_name=primary.get("full_name"),
            first_name=primary.get("first_name"),
            last_name=primary.get("last_name"),
            title=primary.get("job_title"),
            title_role=primary.get("job_title_role"),
            email=best_email(emails),
            personal_emails=[e["address"] for e in emails if e.get("type") == "personal" and e.get("address")],
            professional_emails=[
                e["address"] for e in emails if e.get("type") == "professional" and e.get("address")
            ],
            phone=phones[0] if phones else None,
            linkedin_url=primary.get("linkedin_url"),
            facebook_url=primary.get("facebook_url"),
            twitter_url=primary.get("twitter_url"),
            location=primary.get("location_name"),
            city=primary.get("location_locality"),
            state=primary.get("location_region"),
            country=primary.get("location_country"),
            job_company_name=primary.get("job_company_name"),
            job_company_website=primary.get("job_company_website"),
            job_start_date=primary.get("job_start_date"),
            person_id=primary.get("id"),
            contacts=[OwnerContact.from_dict(person) for person in people],
        )
