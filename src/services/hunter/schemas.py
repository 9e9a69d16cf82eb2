from pydantic import Field

from models.lead import CamelModel

DOMAIN_SEARCH_SOURCE = "Hunter.io Domain Search"
VERIFIER_SOURCE = "Hunter.io Email Verifier"

OWNER_POSITION_KEYWORDS = ("owner", "ceo", "founder", "president", "partner")


class Mailbox(CamelModel):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    position: str | None = None
    department: str | None = None
    type: str | None = None
    confidence: int | None = None

    @property
    def full_name(self) -> str | None:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}".strip()
        return None

    def is_decision_maker(self) -> bool:
        position = (self.position or "").lower()
        return any(keyword in position for keyword in OWNER_POSITION_KEYWORDS)

    @staticmethod
    def from_dict(data: dict) -> "Mailbox":
        return Mailbox(
            email=data.get("value") or "",
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            position=data.get("position"),
            department=data.get("department"),
            type=data.get("type"),
            confidence=data.get("confidence"),
        )


class DomainEmails(CamelModel):
    """Mailboxes found for a domain, with the most senior one picked as primary."""

    domain: str
    organization_name: str | None = None
    emails: list[Mailbox] = Field(default_factory=list)
    primary_email: str
    owner_name: str | None = None
    owner_position: str | None = None
    confidence: int = 0
    source: str = DOMAIN_SEARCH_SOURCE


class EmailVerification(CamelModel):
    email: str | None = None
    status: str | None = None  # valid, invalid, accept_all, webmail, disposable, unknown
    score: int | None = None
    result: str | None = None  # deliverable, undeliverable, risky, unknown
    disposable: bool | None = None
    webmail: bool | None = None
    mx_records: bool | None = None
    smtp_check: bool | None = None
    accept_all: bool | None = None
    source: str = VERIFIER_SOURCE
