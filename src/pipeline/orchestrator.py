"""
Enrichment orchestrator: runs the provider steps for one lead in a fixed order,
then the two AI analyzers, then the final precedence merge.

Every step always runs, whatever the earlier steps returned, because each
sources different fields. A failing step contributes nothing and never stops
the pipeline.
"""

import asyncio
from collections.abc import Awaitable, Callable

from common.config import config
from common.logging import get_logger
from models.lead import AIMode, Lead, LeadOverrides, has_value
from pipeline.merge import (
    apply_final_merge,
    merge_emails,
    merge_owner,
    merge_person_match,
    merge_phone_validation,
    merge_review_match,
)
from services.ai.analyzer import AIAnalyzer, primary_analyzer, secondary_analyzer
from services.ai.schemas import AIAnalysis
from services.apollo.client import ApolloClient
from services.hunter.client import HunterClient
from services.numverify.client import NumverifyClient
from services.people_data_labs.client import PeopleDataLabsClient
from services.people_data_labs.schemas import OwnerRecord
from services.yelp.client import YelpClient

logger = get_logger(__name__)

Step = Callable[[Lead], Awaitable[Lead]]


class EnrichmentOrchestrator:
    """Sequences the enrichment adapters and merges their output into one lead."""

    def __init__(
        self,
        apollo: ApolloClient | None = None,
        people_data_labs: PeopleDataLabsClient | None = None,
        hunter: HunterClient | None = None,
        numverify: NumverifyClient | None = None,
        yelp: YelpClient | None = None,
        primary_ai: AIAnalyzer | None = None,
        secondary_ai: AIAnalyzer | None = None,
        ai_parallel: bool | None = None,
    ):
        self.apollo = apollo or ApolloClient()
        self.people_data_labs = people_data_labs or PeopleDataLabsClient()
        self.hunter = hunter or HunterClient()
        self.numverify = numverify or NumverifyClient()
        self.yelp = yelp or YelpClient()
        self.primary_ai = primary_ai or primary_analyzer()
        self.secondary_ai = secondary_ai or secondary_analyzer()
        self.ai_parallel = config.ai_parallel if ai_parallel is None else ai_parallel

    async def _run_step(self, name: str, lead: Lead, step: Step) -> Lead:
        try:
            return await step(lead)
        except Exception as e:
            logger.error(f"[{name}] Step failed, continuing without it: {type(e).__name__}: {e}")
            return lead

    # Steps 1-5

    async def enrich_organization(self, lead: Lead) -> Lead:
        match = await self.apollo.match_person(lead)
        if not match:
            return lead
        logger.info(f"[Organization] Enriched {lead.company_name}")
        return merge_person_match(lead, match)

    async def _owner_step(self, lead: Lead) -> Lead:
        owner = await self.people_data_labs.find_owner(lead.company_name, lead.city, lead.state, lead.country)
        return merge_owner(lead, owner) if owner else lead

    async def _email_step(self, lead: Lead) -> Lead:
        found = await self.hunter.find_emails(lead)
        return merge_emails(lead, found) if found else lead

    async def _phone_step(self, lead: Lead) -> Lead:
        if not has_value(lead.phone):
            return lead
        validation = await self.numverify.validate(lead.phone)
        if not validation:
            return lead
        logger.info(f"[Phone] Valid: {validation.valid}, type: {validation.line_type}")
        return merge_phone_validation(lead, validation)

    async def _review_step(self, lead: Lead) -> Lead:
        match = await self.yelp.match(lead)
        return merge_review_match(lead, match) if match else lead

    # Step 6

    async def _analyze(self, analyzer: AIAnalyzer, lead: Lead) -> AIAnalysis | None:
        try:
            return await analyzer.analyze(lead)
        except Exception as e:
            logger.error(f"[{analyzer.name}] Analysis failed: {type(e).__name__}: {e}")
            return None

    async def run_ai_analyses(self, lead: Lead, ai_mode: AIMode) -> tuple[AIAnalysis | None, AIAnalysis | None]:
        """Primary and secondary analyses; order of completion never affects which is which."""
        logger.info(f"Verifying lead with AI (mode: {ai_mode.value})")

        if self.ai_parallel and ai_mode is AIMode.BOTH:
            primary, secondary = await asyncio.gather(
                self._analyze(self.primary_ai, lead),
                self._analyze(self.secondary_ai, lead),
            )
            return primary, secondary

        primary = await self._analyze(self.primary_ai, lead) if ai_mode.uses_primary else None
        secondary = await self._analyze(self.secondary_ai, lead) if ai_mode.uses_secondary else None
        return primary, secondary

    async def enrich(
        self,
        lead: Lead,
        ai_mode: AIMode = AIMode.BOTH,
        overrides: LeadOverrides | None = None,
    ) -> Lead:
        """
        Run the full enrichment pipeline for one lead.

        Never raises on provider failure: the caller always gets a verified lead
        whose confidence reflects how much real enrichment succeeded.
        """
        logger.info(f"Starting enrichment for lead: {lead.company_name} ({lead.id})")

        working = lead
        if overrides and not overrides.is_empty():
            # Adapters search with the caller's values; the final merge pins them again
            working = working.model_copy(update=overrides.provided())

        working = await self._run_step("Organization", working, self.enrich_organization)
        working = await self._run_step("Owner", working, self._owner_step)
        working = await self._run_step("Email", working, self._email_step)
        working = await self._run_step("Phone", working, self._phone_step)
        working = await self._run_step("Review site", working, self._review_step)

        primary, secondary = await self.run_ai_analyses(working, ai_mode)

        final = apply_final_merge(working, primary, secondary, overrides)
        logger.info(
            f"Enrichment complete for {final.company_name}: confidence {final.ai_confidence} ({final.ai_source})"
        )
        return final

    async def find_owner(
        self,
        company_name: str,
        city: str | None = None,
        state: str | None = None,
        country: str | None = None,
    ) -> OwnerRecord | None:
        return await self.people_data_labs.find_owner(company_name, city, state, country)
