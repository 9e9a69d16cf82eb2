"""
Field-by-field merge rules for the enrichment pipeline.

Provider steps contribute only the fields they own, and a provider never blanks
a known value. The final AI merge resolves each field with a fixed precedence:

    human override > primary AI > secondary AI > prior automated value > "N/A"
"""

import random
from typing import Any

from models.lead import (
    NOT_AVAILABLE,
    ConfidenceBasis,
    Lead,
    LeadOverrides,
    PhoneValidation,
    SocialMedia,
    has_value,
)
from services.ai.analyzer import PRIMARY_LABEL, SECONDARY_LABEL
from services.ai.schemas import AIAnalysis
from services.apollo.schemas import PersonMatch
from services.hunter.schemas import DomainEmails
from services.people_data_labs.schemas import OwnerRecord
from services.yelp.schemas import YelpMatch

BOTH_AI_CONFIDENCE = 100
SINGLE_AI_CONFIDENCE = 50
MOCK_CONFIDENCE_RANGE = (80, 99)
MOCK_SOURCE = "Mock Data"
MOCK_DETAILS = "Mock verification - Configure API keys for real AI verification"

# Fields both AI analyzers answer
AI_FIELDS = ("owner_name", "industry", "employee_count", "revenue")

# Fields a human caller may pin
OVERRIDE_FIELDS = tuple(LeadOverrides.model_fields)


def _with_values(lead: Lead, values: dict[str, Any], **flags: Any) -> Lead:
    """Copy of the lead with every non-empty value applied (empty values never overwrite)."""
    update = {name: value for name, value in values.items() if has_value(value)}
    update.update(flags)
    return lead.model_copy(update=update)


# Provider steps


def merge_person_match(lead: Lead, match: PersonMatch) -> Lead:
    return _with_values(
        lead,
        {
            "owner_name": match.owner_name,
            "title": match.title,
            "email": match.email,
            "phone": match.phone,
            "company_name": match.company_name,
            "industry": match.industry,
            "employee_count": match.employee_count,
            "revenue": match.revenue,
            "city": match.city,
            "state": match.state,
            "country": match.country,
            "linkedin_url": match.linkedin_url,
            "twitter_url": match.twitter_url,
            "person_id": match.person_id,
            "organization_id": match.organization_id,
        },
        apollo_enriched=True,
    )


def merge_owner(lead: Lead, owner: OwnerRecord) -> Lead:
    # Person-level location and phone describe the owner, not the business
    return _with_values(
        lead,
        {
            "owner_name": owner.owner_name,
            "title": owner.title,
            "email": owner.email,
            "person_id": owner.person_id,
            "contacts": [contact.model_dump(by_alias=True) for contact in owner.contacts],
        },
        pdl_enriched=True,
    )


def merge_emails(lead: Lead, found: DomainEmails) -> Lead:
    """A mailbox position only becomes the title when the mailbox also names its owner."""
    return _with_values(
        lead,
        {
            "email": found.primary_email,
            "owner_name": found.owner_name,
            "title": found.owner_position if found.owner_name else None,
            "emails": [mailbox.model_dump(by_alias=True) for mailbox in found.emails],
        },
        hunter_enriched=True,
    )


def merge_phone_validation(lead: Lead, validation: PhoneValidation) -> Lead:
    """Attach the validation record; the raw phone field is never replaced."""
    update: dict[str, Any] = {"phone_validation": validation}
    if validation.valid and validation.international_format:
        update["phone_formatted"] = validation.international_format
    return lead.model_copy(update=update)


def merge_review_match(lead: Lead, match: YelpMatch) -> Lead:
    """Merge a review-site match. A confirmed no-match leaves the lead untouched."""
    if not match.verified:
        return lead

    business = match.business
    values: dict[str, Any] = {"yelp_id": match.yelp_id, "yelp_url": match.yelp_url}
    if business:
        values.update(
            rating=business.rating,
            review_count=business.review_count,
            yelp_categories=business.categories,
            photos=business.photos,
            hours=business.hours,
            price=business.price,
            image_url=business.image_url,
        )
    return _with_values(lead, values, yelp_enriched=True)


# Final AI merge


def resolve_field(*candidates: Any) -> Any:
    """First usable candidate in precedence order, else "N/A"."""
    for candidate in candidates:
        if has_value(candidate):
            return candidate.strip() if isinstance(candidate, str) else candidate
    return NOT_AVAILABLE


def _combined_details(primary: AIAnalysis | None, secondary: AIAnalysis | None) -> str | None:
    if primary and secondary:
        return (
            f"{PRIMARY_LABEL}: {primary.business_details or NOT_AVAILABLE}\n"
            f"{SECONDARY_LABEL}: {secondary.business_details or NOT_AVAILABLE}"
        )
    if primary:
        return primary.business_details
    if secondary:
        return secondary.business_details
    return None


def confidence_for(primary: AIAnalysis | None, secondary: AIAnalysis | None) -> tuple[int, ConfidenceBasis, str]:
    """Score, basis and source label derived from which analyzers answered."""
    if primary and secondary:
        return BOTH_AI_CONFIDENCE, ConfidenceBasis.BOTH, f"{PRIMARY_LABEL} + {SECONDARY_LABEL}"
    if primary:
        return SINGLE_AI_CONFIDENCE, ConfidenceBasis.PRIMARY, PRIMARY_LABEL
    if secondary:
        return SINGLE_AI_CONFIDENCE, ConfidenceBasis.SECONDARY, SECONDARY_LABEL
    # Demo value only; basis MOCK marks it as not a genuine score
    return random.randint(*MOCK_CONFIDENCE_RANGE), ConfidenceBasis.MOCK, MOCK_SOURCE


def social_links(company_name: str | None) -> SocialMedia:
    """Synthesized (unverified) company profile guesses."""
    if not has_value(company_name):
        return SocialMedia()
    name = company_name.strip().lower()
    return SocialMedia(
        linkedin=f"linkedin.com/company/{'-'.join(name.split())}",
        facebook=f"facebook.com/{''.join(name.split())}",
    )


def apply_final_merge(
    lead: Lead,
    primary: AIAnalysis | None,
    secondary: AIAnalysis | None,
    overrides: LeadOverrides | None = None,
) -> Lead:
    pinned = overrides.provided() if overrides else {}
    update: dict[str, Any] = {}

    for name in AI_FIELDS:
        update[name] = resolve_field(
            pinned.get(name),
            getattr(primary, name, None),
            getattr(secondary, name, None),
            getattr(lead, name),
        )

    score, basis, source = confidence_for(primary, secondary)
    update["business_details"] = resolve_field(
        pinned.get("business_details"),
        _combined_details(primary, secondary),
        lead.business_details,
        MOCK_DETAILS if basis is ConfidenceBasis.MOCK else None,
    )

    for name in OVERRIDE_FIELDS:
        if name not in update:
            update[name] = resolve_field(pinned.get(name), getattr(lead, name))

    update.update(
        ai_confidence=score,
        confidence_basis=basis,
        ai_source=source,
        primary_ai_confidence=primary.confidence if primary else None,
        secondary_ai_confidence=secondary.confidence if secondary else None,
        verified=True,
    )
    merged = lead.model_copy(update=update)
    return merged.model_copy(update={"social_media": social_links(merged.company_name)})
