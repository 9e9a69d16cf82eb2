"""Industry label lookup tables.

Places category tags and AI answers are both collapsed into a small fixed set of
industry labels so leads from different providers group together.
"""

DEFAULT_INDUSTRY = "Business"

# Ordered: the first label whose tags intersect the place's types wins
PLACE_TYPE_INDUSTRIES: list[tuple[str, set[str]]] = [
    ("Restaurant", {"restaurant"}),
    ("Retail", {"store", "retail"}),
    ("Healthcare", {"hospital", "doctor"}),
    ("Legal Services", {"lawyer"}),
    ("Real Estate", {"real_estate_agency"}),
    ("Food & Beverage", {"cafe", "bakery"}),
    ("Fitness", {"gym"}),
    ("Beauty & Wellness", {"beauty_salon", "spa"}),
]

# Labels the AI analyzers are allowed to answer with
AI_INDUSTRY_LABELS: list[str] = [
    "Restaurant",
    "Retail",
    "Healthcare",
    "Technology",
    "Finance",
    "Real Estate",
    "Manufacturing",
    "Legal Services",
    "Construction",
    "Education",
    "Transportation",
    "Food & Beverage",
    "Fitness",
    "Beauty & Wellness",
    "Professional Services",
    "Business",
]


def title_case_tag(tag: str) -> str:
    """'car_repair' -> 'Car Repair'"""
    return " ".join(word.capitalize() for word in tag.replace("_", " ").split())


def industry_from_place_types(types: list[str] | None) -> str:
    """Map provider category tags to an industry label."""
    if not types:
        return DEFAULT_INDUSTRY

    tag_set = set(types)
    for label, tags in PLACE_TYPE_INDUSTRIES:
        if tag_set & tags:
            return label

    return title_case_tag(types[0]) or DEFAULT_INDUSTRY
