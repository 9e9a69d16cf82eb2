from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from common.config import config
from common.errors import ConfigurationError, DiscoveryError, LeadValidationError
from main import app
from models.discovery import AreaDiscoveryResult, DiscoveryStrategy, ManualEnrichmentResult
from models.lead import AIMode, ConfidenceBasis, Lead
from routes.dependencies import get_apollo, get_discovery, get_geocoder, get_hunter, get_orchestrator, get_yelp
from services.lead_repository import LeadRepository, get_lead_repository
from services.hunter.schemas import EmailVerification
from services.nominatim.client import GeocodeResult
from services.people_data_labs.schemas import OwnerRecord


@pytest.fixture
def discovery():
    return MagicMock()


@pytest.fixture
def orchestrator():
    return MagicMock()


@pytest.fixture
def repository():
    return LeadRepository()


@pytest.fixture
def client(discovery, orchestrator, repository):
    app.dependency_overrides[get_discovery] = lambda: discovery
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_lead_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


def verified_lead(**values) -> Lead:
    return Lead(
        company_name="Acme Coffee",
        verified=True,
        ai_confidence=100,
        confidence_basis=ConfidenceBasis.BOTH,
        industry="Food & Beverage",
        **values,
    )


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert client.get("/").json()["service"] == "Lead Scraper API"


def test_scrape_returns_and_stores_leads(client, discovery, repository):
    discovery.discover_by_text = AsyncMock(return_value=[Lead(company_name="Acme Coffee", place_id="p1")])

    response = client.post("/api/scrape", json={"query": "coffee", "location": "Austin, TX", "maxLeads": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["searchSource"] == "Google Places"
    assert body["results"][0]["companyName"] == "Acme Coffee"
    assert discovery.discover_by_text.await_args.args[0].max_leads == 5
    assert len(repository.list()) == 1


@pytest.mark.parametrize(
    "error, status",
    [
        (LeadValidationError("Both query and location are required"), 400),
        (ConfigurationError("Google Places", "google_places_api_key"), 503),
        (DiscoveryError("Failed to fetch data from Google Places API"), 500),
        (RuntimeError("unexpected"), 500),
    ],
)
def test_scrape_maps_errors(client, discovery, error, status):
    discovery.discover_by_text = AsyncMock(side_effect=error)

    response = client.post("/api/scrape", json={"query": "coffee"})

    assert response.status_code == status
    assert response.json()["detail"] == {"error": "Failed to scrape data", "message": str(error)}


def test_scrape_area(client, discovery):
    discovery.discover_by_area = AsyncMock(
        return_value=AreaDiscoveryResult(
            leads=[Lead(company_name="Acme Coffee", place_id="p1")],
            detected_locations=["Austin, TX, United States"],
            polygons_searched=2,
            total_before_dedup=3,
        )
    )
    area = {
        "type": "multipolygon",
        "polygons": [
            [{"lat": 0, "lng": 0}, {"lat": 0, "lng": 1}, {"lat": 1, "lng": 1}],
            [{"lat": 5, "lng": 5}, {"lat": 5, "lng": 6}, {"lat": 6, "lng": 6}],
        ],
    }

    response = client.post("/api/scrape-area", json={"query": "coffee", "area": area, "maxLeads": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["polygonsSearched"] == 2
    assert body["totalResultsBeforeDedup"] == 3
    assert body["detectedLocations"] == ["Austin, TX, United States"]
    assert body["area"]["type"] == "multipolygon"


def test_scrape_area_rejects_unknown_shape(client, discovery):
    response = client.post("/api/scrape-area", json={"query": "coffee", "area": {"type": "hexagon"}})

    assert response.status_code == 422


def test_verify_runs_orchestrator_with_ai_mode(client, orchestrator, repository):
    orchestrator.enrich = AsyncMock(return_value=verified_lead(owner_name="Jane Doe"))

    response = client.post(
        "/api/verify",
        json={"lead": {"companyName": "Acme Coffee", "phone": "(512) 555-0100"}, "aiProvider": "claude"},
    )

    assert response.status_code == 200
    assert response.json()["ownerName"] == "Jane Doe"
    assert response.json()["confidenceBasis"] == "both"
    lead, ai_mode, overrides = orchestrator.enrich.await_args.args
    assert lead.company_name == "Acme Coffee"
    assert ai_mode is AIMode.PRIMARY_ONLY
    assert overrides is None
    assert repository.stats().verified_leads == 1


def test_enrich_manual(client, discovery):
    lead = verified_lead(owner_name="Jane Doe", enrichment_source="Manual + AI")
    discovery.enrich_manual = AsyncMock(
        return_value=ManualEnrichmentResult(
            lead=lead,
            search_method=DiscoveryStrategy.NONE,
            scraped_data_available=False,
            enrichment_source="Manual + AI",
        )
    )

    response = client.post("/api/enrich-manual", json={"ownerName": "Jane Doe", "city": "Austin"})

    assert response.status_code == 200
    body = response.json()
    assert body["searchMethod"] == "unknown"
    assert body["enrichmentSource"] == "Manual + AI"
    assert discovery.enrich_manual.await_args.args[0].owner_name == "Jane Doe"


def test_enrich_manual_rejects_empty_record(client, discovery):
    discovery.enrich_manual = AsyncMock(side_effect=LeadValidationError("At least one field is required"))

    response = client.post("/api/enrich-manual", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Failed to enrich lead"


def test_find_owner(client, orchestrator):
    orchestrator.find_owner = AsyncMock(return_value=OwnerRecord(owner_name="Jane Doe", title="Owner"))

    response = client.post("/api/pdl/find-owner", json={"companyName": "Acme", "city": "Austin"})

    assert response.status_code == 200
    assert response.json()["owner"]["ownerName"] == "Jane Doe"
    orchestrator.find_owner.assert_awaited_once_with("Acme", "Austin", None, None)


def test_find_owner_errors(client, orchestrator):
    orchestrator.find_owner = AsyncMock(return_value=None)

    assert client.post("/api/pdl/find-owner", json={"city": "Austin"}).status_code == 400
    assert client.post("/api/pdl/find-owner", json={"companyName": "Nobody"}).status_code == 404


def test_geocode(client):
    geocoder = MagicMock()
    geocoder.geocode = AsyncMock(return_value=[GeocodeResult(display_name="Austin, Texas", lat=30.27, lon=-97.74)])
    app.dependency_overrides[get_geocoder] = lambda: geocoder

    response = client.post("/api/geocode", json={"query": "Austin"})

    assert response.status_code == 200
    assert response.json()["results"][0]["display_name"] == "Austin, Texas"
    assert client.post("/api/geocode", json={"query": " "}).status_code == 400


def test_apollo_organizations(client):
    apollo = MagicMock()
    apollo.search_organizations = AsyncMock(return_value=[Lead(company_name="Acme", source="Apollo Organizations")])
    app.dependency_overrides[get_apollo] = lambda: apollo

    response = client.post("/api/apollo/organizations", json={"keywords": ["saas"], "perPage": 10})

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert apollo.search_organizations.await_args.args[0].per_page == 10


def test_apollo_organizations_requires_key(client):
    apollo = MagicMock()
    apollo.search_organizations = AsyncMock(side_effect=ConfigurationError("Apollo", "apollo_api_key"))
    app.dependency_overrides[get_apollo] = lambda: apollo

    response = client.post("/api/apollo/organizations", json={"keywords": ["saas"]})

    assert response.status_code == 503


def test_ai_status(client, monkeypatch):
    monkeypatch.setattr(config, "openai_api_key", SecretStr(""))
    monkeypatch.setattr(config, "anthropic_api_key", SecretStr("your_anthropic_api_key_here"))

    body = client.get("/api/ai-status").json()

    assert body["openai"] == {"configured": False, "status": "not configured"}
    assert body["claude"]["configured"] is False
    assert "peopleDataLabs" in body
    assert body["recommendation"].startswith("Configure at least one AI API key")

    monkeypatch.setattr(config, "openai_api_key", SecretStr("sk-real"))
    assert client.get("/api/ai-status").json()["recommendation"] == "All services ready"


def test_stored_leads_and_stats(client, repository):
    repository.save_many([verified_lead(), Lead(company_name="Other", industry="Retail")])

    assert client.get("/api/leads").json()["count"] == 2
    stats = client.get("/api/stats").json()
    assert stats["totalLeads"] == 2
    assert stats["verifiedLeads"] == 1
    assert stats["averageConfidence"] == 50
    assert stats["topIndustries"] == {"Food & Beverage": 1, "Retail": 1}

    assert client.delete("/api/leads").json()["cleared"] == 2
    assert client.get("/api/leads").json()["count"] == 0


def test_root_lists_api_routes(client):
    body = client.get("/").json()

    assert body["version"] == "0.1.0"
    assert "/api/scrape-area" in body["endpoints"]
    assert "/api/verify" in body["endpoints"]
    assert "/" not in body["endpoints"]


def test_apollo_people(client):
    apollo = MagicMock()
    apollo.search_people = AsyncMock(return_value=[Lead(company_name="Acme", owner_name="Jane Doe")])
    app.dependency_overrides[get_apollo] = lambda: apollo

    response = client.post("/api/apollo/people", json={"titles": ["owner"], "domains": ["acme.io"]})

    assert response.status_code == 200
    assert response.json()["results"][0]["ownerName"] == "Jane Doe"
    assert apollo.search_people.await_args.args[0].titles == ["owner"]


def test_verify_email(client):
    hunter = MagicMock(provider="Hunter.io", configured=True)
    hunter.verify_email = AsyncMock(
        return_value=EmailVerification(email="jane@acme.io", status="valid", score=96, result="deliverable")
    )
    app.dependency_overrides[get_hunter] = lambda: hunter

    response = client.post("/api/hunter/verify-email", json={"email": " jane@acme.io "})

    assert response.status_code == 200
    assert response.json()["result"] == "deliverable"
    hunter.verify_email.assert_awaited_once_with("jane@acme.io")


def test_verify_email_errors(client):
    hunter = MagicMock(provider="Hunter.io", configured=False)
    hunter.verify_email = AsyncMock(return_value=None)
    app.dependency_overrides[get_hunter] = lambda: hunter

    assert client.post("/api/hunter/verify-email", json={"email": ""}).status_code == 400
    assert client.post("/api/hunter/verify-email", json={"email": "jane@acme.io"}).status_code == 503

    hunter.configured = True
    response = client.post("/api/hunter/verify-email", json={"email": "jane@acme.io"})
    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Failed to verify email"


def test_yelp_search(client):
    yelp = MagicMock()
    yelp.search = AsyncMock(return_value=[Lead(company_name="Acme Coffee", source="Yelp")])
    app.dependency_overrides[get_yelp] = lambda: yelp

    response = client.post("/api/yelp/search", json={"term": "coffee", "latitude": 30.27, "longitude": -97.74})

    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert yelp.search.await_args.kwargs["latitude"] == 30.27
    assert client.post("/api/yelp/search", json={"term": "coffee"}).status_code == 400
    assert client.post("/api/yelp/search", json={"location": "Austin"}).status_code == 400
