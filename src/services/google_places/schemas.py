from pydantic import BaseModel, Field

from enrichments.industry import industry_from_place_types
from enrichments.normalize import normalize_address, normalize_phone, normalize_postal_code
from models.lead import NOT_AVAILABLE, Lead

PLACES_SOURCE = "Google Places API"

DETAIL_FIELDS = ",".join(
    [
        "name",
        "formatted_address",
        "formatted_phone_number",
        "international_phone_number",
        "website",
        "rating",
        "user_ratings_total",
        "types",
        "geometry",
        "address_components",
    ]
)

OK_STATUSES = {"OK", "ZERO_RESULTS"}


class PlaceAddress(BaseModel):
    postal_code: str | None = None
    city: str | None = None
    state: str | None = None  # short name, e.g. "CA"
    country: str | None = None

    @staticmethod
    def from_components(components: list[dict]) -> "PlaceAddress":
        address = PlaceAddress()
        for component in components or []:
            types = component.get("types", [])
            if "postal_code" in types:
                address.postal_code = component.get("long_name")
            if "locality" in types:
                address.city = component.get("long_name")
            if "country" in types:
                address.country = component.get("long_name")
            if "administrative_area_level_1" in types:
                address.state = component.get("short_name")
        return address

    def location_label(self) -> str | None:
        """'Austin, TX, United States' style label; requires a city."""
        if not self.city:
            return None
        return ", ".join(filter(None, [self.city, self.state, self.country]))


class PlaceDetails(BaseModel):
    """A place-details record, as returned by the details endpoint."""

    place_id: str
    name: str | None = None
    formatted_address: str | None = None
    phone: str | None = None
    website: str | None = None
    rating: float | None = None
    review_count: int = 0
    types: list[str] = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None
    address: PlaceAddress = Field(default_factory=PlaceAddress)

    @staticmethod
    def from_dict(place_id: str, data: dict) -> "PlaceDetails":
        location = (data.get("geometry") or {}).get("location") or {}
        return PlaceDetails(
            place_id=place_id,
            name=data.get("name"),
            formatted_address=data.get("formatted_address"),
            phone=data.get("formatted_phone_number") or data.get("international_phone_number"),
            website=data.get("website"),
            rating=data.get("rating"),
            review_count=data.get("user_ratings_total") or 0,
            types=data.get("types") or [],
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            address=PlaceAddress.from_components(data.get("address_components") or []),
        )

    def to_lead(self) -> Lead:
        """Map to the normalized lead shape; every field passes through the normalizer."""
        return Lead(
            company_name=self.name,
            phone=normalize_phone(self.phone),
            address=normalize_address(self.formatted_address),
            zipcode=normalize_postal_code(self.address.postal_code),
            city=self.address.city or NOT_AVAILABLE,
            state=self.address.state or "",
            country=self.address.country or NOT_AVAILABLE,
            industry=industry_from_place_types(self.types),
            website=self.website or NOT_AVAILABLE,
            rating=self.rating,
            review_count=self.review_count,
            latitude=self.latitude,
            longitude=self.longitude,
            place_id=self.place_id,
            types=self.types,
            source=PLACES_SOURCE,
        )
