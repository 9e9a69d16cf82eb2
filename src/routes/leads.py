"""Stored lead listing and statistics."""

from fastapi import APIRouter, Depends

from models.responses import StoredLeadsResponse
from services.lead_repository import LeadRepository, LeadStats, get_lead_repository

router = APIRouter(prefix="/api", tags=["leads"])


@router.get("/leads", response_model=StoredLeadsResponse)
async def list_leads(repository: LeadRepository = Depends(get_lead_repository)):
    leads = repository.list()
    return StoredLeadsResponse(leads=leads, count=len(leads))


@router.delete("/leads")
async def clear_leads(repository: LeadRepository = Depends(get_lead_repository)):
    cleared = repository.clear()
    return {"message": "All leads cleared", "cleared": cleared}


@router.get("/stats", response_model=LeadStats)
async def lead_stats(repository: LeadRepository = Depends(get_lead_repository)):
    return repository.stats()
