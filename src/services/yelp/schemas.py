from pydantic import Field

from models.lead import NOT_AVAILABLE, CamelModel, Lead

SEARCH_SOURCE = "Yelp Fusion API"
MATCH_CONFIDENCE = 95


def _display_address(location: dict) -> str | None:
    parts = location.get("display_address") or []
    return ", ".join(parts) or None


def _category_titles(business: dict) -> list[str]:
    return [c.get("title") for c in business.get("categories") or [] if c.get("title")]


class YelpBusiness(CamelModel):
    """Full business record from the details endpoint."""

    yelp_id: str
    name: str | None = None
    phone: str | None = None
    address: str | None = None
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    rating: float | None = None
    review_count: int | None = None
    categories: list[str] = Field(default_factory=list)
    image_url: str | None = None
    photos: list[str] = Field(default_factory=list)
    price: str | None = None
    hours: list[dict] = Field(default_factory=list)
    is_closed: bool = False
    url: str | None = None

    @staticmethod
    def from_dict(business: dict) -> "YelpBusiness":
        location = business.get("location") or {}
        return YelpBusiness(
            yelp_id=business.get("id") or "",
            name=business.get("name"),
            phone=business.get("phone") or business.get("display_phone"),
            address=_display_address(location),
            zipcode=location.get("zip_code"),
            city=location.get("city"),
            state=location.get("state"),
            country=location.get("country"),
            rating=business.get("rating"),
            review_count=business.get("review_count"),
            categories=_category_titles(business),
            image_url=business.get("image_url"),
            photos=business.get("photos") or [],
            price=business.get("price"),
            hours=business.get("hours") or [],
            is_closed=business.get("is_closed") or False,
            url=business.get("url"),
        )


class YelpMatch(CamelModel):
    """
    Outcome of a business match attempt.

    ``verified=False`` means the search ran and found nothing; a failed or
    skipped attempt is represented by None at the call site instead.
    """

    verified: bool
    yelp_id: str | None = None
    yelp_url: str | None = None
    business: YelpBusiness | None = None
    confidence: int = 0


def business_to_lead(business: dict) -> Lead:
    location = business.get("location") or {}
    coordinates = business.get("coordinates") or {}
    categories = _category_titles(business)
    return Lead(
        company_name=business.get("name"),
        phone=business.get("phone") or business.get("display_phone") or NOT_AVAILABLE,
        address=_display_address(location) or NOT_AVAILABLE,
        zipcode=location.get("zip_code") or NOT_AVAILABLE,
        city=location.get("city") or NOT_AVAILABLE,
        state=location.get("state") or NOT_AVAILABLE,
        country=location.get("country") or NOT_AVAILABLE,
        industry=categories[0] if categories else "Business",
        rating=business.get("rating"),
        review_count=business.get("review_count") or 0,
        latitude=coordinates.get("latitude"),
        longitude=coordinates.get("longitude"),
        yelp_id=business.get("id"),
        yelp_url=business.get("url"),
        yelp_categories=categories,
        image_url=business.get("image_url"),
        price=business.get("price") or NOT_AVAILABLE,
        source=SEARCH_SOURCE,
    )
