"""Liveness check and a self-describing index."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

SERVICE_NAME = "lead-scraper"


@router.get("/")
async def root(request: Request):
    """List the API surface so a browser hit on the base URL is useful."""
    endpoints = sorted(path for path in request.app.openapi()["paths"] if path.startswith("/api/"))
    return {
        "service": request.app.title,
        "version": request.app.version,
        "status": "running",
        "docs": request.app.docs_url,
        "endpoints": endpoints,
        "exampleRequest": {"query": "coffee shops", "location": "Austin, TX", "maxLeads": 10},
    }


@router.get("/health")
@router.get("/api/health")
async def health_check():
    return {"status": "OK", "service": SERVICE_NAME, "timestamp": datetime.now(UTC).isoformat()}
