import re
from typing import Any

from pydantic import field_validator

from models.lead import CamelModel
from services.ai.parsing import coerce_industry


class AIAnalysis(CamelModel):
    """Structured answer from one AI analyzer (keys arrive camelCase from the model)."""

    owner_name: str | None = None
    industry: str | None = None
    employee_count: str | None = None
    revenue: str | None = None
    business_details: str | None = None
    confidence: int | None = None
    source: str | None = None

    @field_validator("industry", mode="before")
    @classmethod
    def _industry_label(cls, value: Any) -> Any:
        return coerce_industry(value)

    @field_validator("owner_name", "employee_count", "revenue", "business_details", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence_score(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return max(0, min(100, int(value)))
        match = re.search(r"\d+", str(value))
        return max(0, min(100, int(match.group()))) if match else None
