"""In-memory store for leads returned by the HTTP layer."""

from collections import Counter

from models.lead import CamelModel, Lead


class LeadStats(CamelModel):
    total_leads: int = 0
    verified_leads: int = 0
    average_confidence: float = 0.0
    top_industries: dict[str, int] = {}


class LeadRepository:
    """
    Process-local lead store, injected into the routes.

    Saving a lead whose id is already stored replaces the stored copy, so a
    verified lead supersedes its discovered version.
    """

    def __init__(self) -> None:
        self._leads: dict[str, Lead] = {}

    def save(self, lead: Lead) -> None:
        self._leads[lead.id] = lead

    def save_many(self, leads: list[Lead]) -> None:
        for lead in leads:
            self.save(lead)

    def list(self) -> list[Lead]:
        return list(self._leads.values())

    def clear(self) -> int:
        count = len(self._leads)
        self._leads.clear()
        return count

    def stats(self) -> LeadStats:
        leads = self.list()
        if not leads:
            return LeadStats()
        industries = Counter(lead.industry for lead in leads if lead.industry)
        return LeadStats(
            total_leads=len(leads),
            verified_leads=sum(1 for lead in leads if lead.verified),
            average_confidence=sum(lead.ai_confidence or 0 for lead in leads) / len(leads),
            top_industries=dict(industries.most_common()),
        )


_repository = LeadRepository()


def get_lead_repository() -> LeadRepository:
    return _repository
