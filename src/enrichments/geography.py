"""Country name/code utilities used when building provider match requests."""

import re

import pycountry

DEFAULT_COUNTRY_CODE = "US"

# Common short forms pycountry's fuzzy search does not resolve reliably
COUNTRY_ALIASES: dict[str, str] = {
    "usa": "US",
    "united states": "US",
    "united states of america": "US",
    "uk": "GB",
    "united kingdom": "GB",
    "great britain": "GB",
    "england": "GB",
}


def normalize_country_name(country_name: str | None) -> str | None:
    """Normalize country names by removing parenthetical suffixes.

    Examples:
        "Netherlands (the)" -> "Netherlands"
        "Korea (Republic of)" -> "Korea"
    """
    if not country_name:
        return None
    return re.sub(r"\s*\([^)]*\)\s*$", "", country_name).strip()


def to_country_code(country: str | None, default: str | None = DEFAULT_COUNTRY_CODE) -> str | None:
    """Resolve a country name or code to ISO 3166-1 alpha-2.

    Unknown names resolve to ``default`` (US), matching how the review site
    treats requests without a recognizable country.
    """
    normalized = normalize_country_name(country)
    if not normalized:
        return None

    if len(normalized) == 2 and normalized.isalpha():
        return normalized.upper()

    alias = COUNTRY_ALIASES.get(normalized.lower())
    if alias:
        return alias

    match = pycountry.countries.get(name=normalized) or pycountry.countries.get(alpha_3=normalized.upper())
    if match:
        return match.alpha_2

    try:
        return pycountry.countries.search_fuzzy(normalized)[0].alpha_2
    except LookupError:
        return default
