"""Field normalization for provider-sourced lead data.

Place-details responses are inconsistently populated (descriptive text in the
postal code field, phone numbers or person names in the address field). Each
normalizer returns a cleaned value or the ``N/A`` literal, and every normalizer
is idempotent.
"""

import re

from models.lead import NOT_AVAILABLE

PHONE_CHARS = re.compile(r"[\d\s\-()+.]")
MIN_PHONE_DIGITS = 7

POSTAL_CODE_STRIP = re.compile(r"[^0-9A-Za-z\s\-]")
MAX_POSTAL_CODE_LENGTH = 15
POSTAL_CODE_DENYLIST = re.compile(r"United|States|America|Canada|Kingdom|City|County|Street|Avenue|Road", re.IGNORECASE)

ADDRESS_PHONE_PATTERNS = [
    re.compile(r"^\+?1?\s*\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{4}$"),  # US
    re.compile(r"^\(\d{3}\)\s*\d{3}[\s\-]?\d{4}$"),  # (555) 555-5555
    re.compile(r"^\d{3}[\s\-]\d{3}[\s\-]\d{4}$"),  # 555-555-5555
    re.compile(r"^\+\d{1,3}[\s\-]?\d{3,4}[\s\-]?\d{3,4}[\s\-]?\d{3,4}$"),  # international
]
STREET_INDICATORS = re.compile(
    r"\b(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd|Drive|Dr|Lane|Ln|Way|Court|Ct|Circle|Place|Pl|"
    r"Square|Sq|Parkway|Pkwy)\b|\d",
    re.IGNORECASE,
)
CAPITALIZED_WORD = re.compile(r"^[A-Z][a-z]+$")
MIN_ADDRESS_LENGTH = 10


def _is_missing(raw: str | None) -> bool:
    return raw is None or not str(raw).strip() or str(raw).strip() == NOT_AVAILABLE


def count_digits(value: str) -> int:
    return sum(ch.isdigit() for ch in value)


def normalize_phone(raw: str | None) -> str:
    """Keep digits, spaces, dashes, parentheses, dots and plus; reject under 7 digits."""
    if _is_missing(raw):
        return NOT_AVAILABLE

    cleaned = "".join(PHONE_CHARS.findall(str(raw))).strip()
    if count_digits(cleaned) < MIN_PHONE_DIGITS:
        return NOT_AVAILABLE
    return cleaned


def normalize_postal_code(raw: str | None) -> str:
    """Keep alphanumerics, spaces and dashes; reject long values and descriptive text."""
    if _is_missing(raw):
        return NOT_AVAILABLE

    cleaned = POSTAL_CODE_STRIP.sub("", str(raw)).strip()
    if not cleaned or len(cleaned) > MAX_POSTAL_CODE_LENGTH:
        return NOT_AVAILABLE
    if POSTAL_CODE_DENYLIST.search(cleaned):
        return NOT_AVAILABLE
    return cleaned


def looks_like_phone_number(value: str) -> bool:
    digits = count_digits(value)
    if digits > MIN_PHONE_DIGITS and digits / len(value) > 0.4 and len(value) < 30:
        return True
    return any(pattern.match(value) for pattern in ADDRESS_PHONE_PATTERNS)


def looks_like_person_name(value: str) -> bool:
    """2-4 capitalized words with no street indicator or digit."""
    words = value.split()
    if not 2 <= len(words) <= 4:
        return False
    if STREET_INDICATORS.search(value):
        return False
    return all(CAPITALIZED_WORD.match(word) for word in words)


def normalize_address(raw: str | None) -> str:
    """Reject phone numbers, person names and fragments masquerading as addresses."""
    if _is_missing(raw):
        return NOT_AVAILABLE

    cleaned = str(raw).strip()
    if looks_like_phone_number(cleaned):
        return NOT_AVAILABLE
    if looks_like_person_name(cleaned):
        return NOT_AVAILABLE
    if len(cleaned) < MIN_ADDRESS_LENGTH:
        return NOT_AVAILABLE
    return cleaned


def extract_domain(website: str | None) -> str | None:
    """
    Derive a bare domain from a website field.

    Examples:
        "https://www.acme.io/about" -> "acme.io"
        "acme.io?ref=maps" -> "acme.io"
    """
    if _is_missing(website):
        return None

    domain = re.sub(r"^https?://", "", website.strip(), flags=re.IGNORECASE)
    domain = re.sub(r"^www\.", "", domain, flags=re.IGNORECASE)
    domain = domain.split("/")[0].split("?")[0].strip()
    return domain.lower() or None


def strip_phone_for_lookup(phone: str) -> str:
    """Bare digit string for phone validation: no formatting, no leading + or 00."""
    cleaned = re.sub(r"[\s\-().]", "", phone)
    if cleaned.startswith("+"):
        cleaned = cleaned[1:]
    elif cleaned.startswith("00"):
        cleaned = cleaned[2:]
    return cleaned
