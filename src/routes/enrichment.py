"""Lead verification and enrichment endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from common.logging import get_logger
from models.discovery import ManualEnrichmentResult, OwnerSearchRequest, VerifyRequest
from models.lead import Lead, LeadOverrides
from pipeline.discovery import LeadDiscovery
from pipeline.orchestrator import EnrichmentOrchestrator
from routes.dependencies import get_discovery, get_orchestrator, raise_http_error
from services.lead_repository import LeadRepository, get_lead_repository

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["enrichment"])


@router.post("/verify", response_model=Lead)
async def verify_lead_endpoint(
    request: VerifyRequest,
    orchestrator: EnrichmentOrchestrator = Depends(get_orchestrator),
    repository: LeadRepository = Depends(get_lead_repository),
):
    """
    Run the full enrichment pipeline for one lead.

    Steps: organization match, owner search, email finder, phone validation,
    review-site match, then the AI analyzers selected by ``aiProvider``
    (``both`` | ``primary`` | ``secondary``). Provider failures never fail the
    request; the returned lead's ``aiConfidence`` and ``aiSource`` show how much
    real enrichment succeeded.
    """
    try:
        lead = await orchestrator.enrich(request.lead, request.ai_provider, request.overrides)
    except Exception as e:
        raise_http_error(e, "Failed to verify lead")

    repository.save(lead)
    return lead


@router.post("/enrich-manual", response_model=ManualEnrichmentResult)
async def enrich_manual_endpoint(
    manual: LeadOverrides,
    discovery: LeadDiscovery = Depends(get_discovery),
    repository: LeadRepository = Depends(get_lead_repository),
):
    """Enrich a hand-typed lead: find it by phone, address or name, then verify it."""
    try:
        result = await discovery.enrich_manual(manual)
    except Exception as e:
        raise_http_error(e, "Failed to enrich lead")

    repository.save(result.lead)
    return result


@router.post("/pdl/find-owner")
async def find_owner_endpoint(
    request: OwnerSearchRequest,
    orchestrator: EnrichmentOrchestrator = Depends(get_orchestrator),
):
    """Find the owner or decision maker of a company."""
    if not request.company_name or not request.company_name.strip():
        raise HTTPException(
            status_code=400,
            detail={"error": "Company name is required", "message": "companyName must not be empty"},
        )

    try:
        owner = await orchestrator.find_owner(request.company_name, request.city, request.state, request.country)
    except Exception as e:
        raise_http_error(e, "Failed to find company owner")

    if owner is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "No owner found",
                "message": "Could not find an owner or decision maker for this company",
            },
        )

    return {"success": True, "owner": owner.model_dump(by_alias=True)}
