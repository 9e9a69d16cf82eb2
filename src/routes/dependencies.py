"""Shared route dependencies and error mapping."""

from functools import lru_cache
from typing import NoReturn

from fastapi import HTTPException

from common.errors import ConfigurationError, DiscoveryError, LeadValidationError
from common.logging import get_logger
from pipeline.discovery import LeadDiscovery
from pipeline.orchestrator import EnrichmentOrchestrator
from services.apollo.client import ApolloClient
from services.hunter.client import HunterClient
from services.nominatim.client import NominatimClient
from services.yelp.client import YelpClient

logger = get_logger(__name__)


@lru_cache
def get_orchestrator() -> EnrichmentOrchestrator:
    return EnrichmentOrchestrator()


@lru_cache
def get_discovery() -> LeadDiscovery:
    return LeadDiscovery(orchestrator=get_orchestrator())


@lru_cache
def get_apollo() -> ApolloClient:
    return ApolloClient()


@lru_cache
def get_geocoder() -> NominatimClient:
    return NominatimClient()


@lru_cache
def get_hunter() -> HunterClient:
    return HunterClient()


@lru_cache
def get_yelp() -> YelpClient:
    return YelpClient()


def raise_http_error(e: Exception, error: str) -> NoReturn:
    """Translate a pipeline exception into an HTTP error with an {error, message} body."""
    if isinstance(e, LeadValidationError):
        status = 400
    elif isinstance(e, ConfigurationError):
        status = 503
    else:
        status = 500

    if isinstance(e, (LeadValidationError, ConfigurationError, DiscoveryError)):
        logger.warning(f"{error}: {e}")
    else:
        logger.error(f"{error}: {type(e).__name__}: {e}")

    raise HTTPException(status_code=status, detail={"error": error, "message": str(e)}) from e
